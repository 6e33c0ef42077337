"""Tests for single-day journal operations."""
import pytest
from datetime import date, datetime

from readlog.core.exceptions import InvalidDateFormatError, ValidationError
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind
from readlog.reconcile.journal import (
    add_reading_day_entry,
    create_empty_enhanced_streak_history,
    record_check_in,
    remove_reading_day_entry,
    synchronize_reading_days,
    update_reading_day_entry,
)


def _manual(day, notes=None):
    return ReadingDayEntry(
        date=day,
        sources=[ReadingDataSource(kind=SourceKind.MANUAL, timestamp=datetime(2024, 3, 10, 8))],
        notes=notes,
    )


class TestCreateEmpty:
    """Tests for create_empty_enhanced_streak_history."""

    def test_empty_journal(self, clock, now):
        history = create_empty_enhanced_streak_history(clock)
        assert history.reading_days == set()
        assert history.reading_day_entries == []
        assert history.version == 1
        assert history.last_sync_date == now
        assert history.last_calculated == now


class TestAddReadingDayEntry:
    """Tests for add_reading_day_entry."""

    def test_adds_and_syncs(self, healthy_history, clock, now):
        updated = add_reading_day_entry(healthy_history, _manual("2024-03-10", "evening"), clock)

        assert updated.reading_days == {"2024-03-08", "2024-03-09", "2024-03-10"}
        added = updated.find_entry("2024-03-10")
        assert added.notes == "evening"
        assert added.created_at == now and added.modified_at == now
        assert updated.last_sync_date == now

    def test_input_not_mutated(self, healthy_history, clock):
        before = healthy_history.to_dict()
        add_reading_day_entry(healthy_history, _manual("2024-03-10"), clock)
        assert healthy_history.to_dict() == before

    def test_same_date_overwrites_and_keeps_created(self, healthy_history, clock, now):
        updated = add_reading_day_entry(healthy_history, _manual("2024-03-09", "redo"), clock)

        assert len(updated.reading_day_entries) == 2
        entry = updated.find_entry("2024-03-09")
        assert entry.source_kinds == [SourceKind.MANUAL]
        assert entry.notes == "redo"
        assert entry.created_at == datetime(2024, 3, 1, 9, 0)
        assert entry.modified_at == now

    def test_book_ids_are_deduplicated(self, clock):
        history = create_empty_enhanced_streak_history(clock)
        entry = ReadingDayEntry(date="2024-03-01", sources=_manual("2024-03-01").sources,
                                book_ids=[2, 2, 1])
        assert add_reading_day_entry(history, entry, clock).find_entry("2024-03-01").book_ids == [2, 1]

    @pytest.mark.parametrize("entry", [
        ReadingDayEntry(date="03/01/2024", sources=_manual("x").sources),
        ReadingDayEntry(date="2024-03-01", sources=[]),
    ])
    def test_rejects_bad_entries(self, healthy_history, clock, entry):
        with pytest.raises(ValidationError):
            add_reading_day_entry(healthy_history, entry, clock)


class TestUpdateReadingDayEntry:
    """Tests for update_reading_day_entry."""

    def test_updates_fields(self, healthy_history, clock, now):
        updated = update_reading_day_entry(
            healthy_history, "2024-03-08", {"notes": "short session", "book_ids": [3, 3]}, clock
        )
        entry = updated.find_entry("2024-03-08")
        assert entry.notes == "short session"
        assert entry.book_ids == [3]
        assert entry.modified_at == now
        assert entry.created_at == datetime(2024, 3, 1, 9, 0)

    def test_missing_date(self, healthy_history, clock):
        with pytest.raises(ValidationError, match="No reading day entry"):
            update_reading_day_entry(healthy_history, "2024-01-01", {"notes": "x"}, clock)

    def test_unknown_field(self, healthy_history, clock):
        with pytest.raises(ValidationError, match="Cannot update fields: date"):
            update_reading_day_entry(healthy_history, "2024-03-08", {"date": "2024-03-07"}, clock)

    def test_cannot_empty_sources(self, healthy_history, clock):
        with pytest.raises(ValidationError, match="at least one source"):
            update_reading_day_entry(healthy_history, "2024-03-08", {"sources": []}, clock)


class TestRemoveAndSync:
    """Tests for remove_reading_day_entry and synchronize_reading_days."""

    def test_remove(self, healthy_history, clock):
        updated = remove_reading_day_entry(healthy_history, "2024-03-08", clock)
        assert updated.reading_days == {"2024-03-09"}
        assert [e.date for e in updated.reading_day_entries] == ["2024-03-09"]

    def test_remove_missing_is_noop(self, healthy_history, clock, now):
        updated = remove_reading_day_entry(healthy_history, "2020-01-01", clock)
        assert updated.entry_dates() == healthy_history.entry_dates()
        assert updated.last_sync_date == now

    def test_sync_adds_entry_dates_and_keeps_index_days(self, healthy_history, clock):
        healthy_history.reading_days = {"2024-03-01"}
        synced = synchronize_reading_days(healthy_history, clock)
        assert synced.reading_days == {"2024-03-01", "2024-03-08", "2024-03-09"}


class TestRecordCheckIn:
    """Tests for manual check-ins."""

    def test_defaults_to_today(self, clock):
        history = record_check_in(create_empty_enhanced_streak_history(clock), clock=clock)
        assert history.reading_days == {"2024-03-10"}
        assert history.find_entry("2024-03-10").source_kinds == [SourceKind.MANUAL]

    def test_merges_into_existing_day(self, healthy_history, clock):
        updated = record_check_in(healthy_history, "2024-03-09", notes="finished it", clock=clock)
        entry = updated.find_entry("2024-03-09")

        assert entry.source_kinds == [SourceKind.MANUAL, SourceKind.BOOK_COMPLETION]
        assert entry.book_ids == [1]
        assert entry.notes == "finished it"
        assert entry.created_at == datetime(2024, 3, 1, 9, 0)

    def test_accepts_date_objects(self, healthy_history, clock):
        updated = record_check_in(healthy_history, date(2024, 3, 7), clock=clock)
        assert "2024-03-07" in updated.reading_days
        updated = record_check_in(healthy_history, datetime(2024, 3, 6, 22, 15), clock=clock)
        assert "2024-03-06" in updated.reading_days

    def test_rejects_bad_date(self, healthy_history, clock):
        with pytest.raises(InvalidDateFormatError):
            record_check_in(healthy_history, "yesterday", clock=clock)
