"""Tests for chunked and streaming operations."""
import pytest
from dataclasses import replace
from datetime import date, datetime, timedelta

from readlog.core.exceptions import BulkOperationError, InvalidRangeError, ValidationError
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind
from readlog.reconcile import bulk
from readlog.reconcile.bulk import (
    BulkOperation,
    bulk_update_reading_day_entries,
    iter_chunks,
    process_in_chunks,
    stream_entries,
)
from readlog.reconcile.journal import (
    add_reading_day_entry,
    remove_reading_day_entry,
    update_reading_day_entry,
)
from readlog.validators.integrity import IntegrityValidator


def _add(day, notes=None):
    return {
        "kind": "add",
        "date": day,
        "entry": {
            "sources": [{"kind": "manual", "timestamp": "2024-03-10T08:00:00"}],
            "notes": notes,
        },
    }


class TestIterChunks:
    """Tests for iter_chunks."""

    def test_chunks(self):
        assert list(iter_chunks(range(5), 2)) == [[0, 1], [2, 3], [4]]

    def test_empty(self):
        assert list(iter_chunks([], 3)) == []

    def test_invalid_size(self):
        with pytest.raises(ValidationError):
            list(iter_chunks([1], 0))


class TestBulkUpdate:
    """Tests for bulk_update_reading_day_entries."""

    def test_applies_all_kinds(self, healthy_history, clock):
        operations = [
            _add("2024-03-10", "morning"),
            {"kind": "update", "date": "2024-03-08", "updates": {"notes": "edited"}},
            {"kind": "remove", "date": "2024-03-09"},
        ]
        updated, stats = bulk_update_reading_day_entries(
            healthy_history, operations, chunk_size=2, clock=clock
        )

        assert updated.reading_days == {"2024-03-08", "2024-03-10"}
        assert updated.find_entry("2024-03-08").notes == "edited"
        assert updated.find_entry("2024-03-10").notes == "morning"
        assert (stats.entries_added, stats.entries_updated, stats.entries_removed) == (1, 1, 1)
        assert stats.items_processed == 3
        assert stats.chunks == 2
        assert stats.validations == 3

    def test_skip_validation_still_validates_result(self, healthy_history, clock):
        _, stats = bulk_update_reading_day_entries(
            healthy_history, [_add("2024-03-10")], skip_validation=True, clock=clock
        )
        assert stats.validations == 1

    def test_starts_from_empty_journal(self, clock):
        updated, _ = bulk_update_reading_day_entries(
            None, [_add("2024-03-01"), _add("2024-03-02")], clock=clock
        )
        assert updated.reading_days == {"2024-03-01", "2024-03-02"}
        assert updated.version == 1

    def test_accepts_operation_objects(self, clock):
        entry = ReadingDayEntry(
            date="ignored",
            sources=[ReadingDataSource(kind=SourceKind.MANUAL, timestamp=datetime(2024, 3, 1))],
        )
        updated, _ = bulk_update_reading_day_entries(
            None, [BulkOperation(kind="add", date="2024-03-01", entry=entry)], clock=clock
        )
        assert updated.entry_dates() == {"2024-03-01"}

    @pytest.mark.parametrize("operation,message", [
        ({"kind": "update", "date": "2024-01-01", "updates": {"notes": "x"}}, "not found"),
        ({"kind": "update", "date": "2024-03-08"}, "missing update data"),
        ({"kind": "add", "date": "2024-03-07"}, "missing entry data"),
        ({"kind": "rename", "date": "2024-03-08"}, "Unknown bulk operation type"),
    ])
    def test_bad_operations(self, healthy_history, clock, operation, message):
        with pytest.raises(BulkOperationError, match=message):
            bulk_update_reading_day_entries(healthy_history, [operation], clock=clock)

    def test_validation_errors_are_wrapped(self, healthy_history, clock):
        operation = {"kind": "update", "date": "2024-03-08", "updates": {"sources": []}}
        with pytest.raises(BulkOperationError, match="Bulk operation failed"):
            bulk_update_reading_day_entries(healthy_history, [operation], clock=clock)

    def test_all_or_nothing(self, healthy_history, clock):
        """A failing operation leaves the caller's journal untouched."""
        before = healthy_history.to_dict()
        operations = [_add("2024-03-10"), {"kind": "remove", "date": "2024-03-08"},
                      {"kind": "update", "date": "2023-01-01", "updates": {"notes": "x"}}]
        with pytest.raises(BulkOperationError):
            bulk_update_reading_day_entries(healthy_history, operations, chunk_size=1, clock=clock)
        assert healthy_history.to_dict() == before

    def test_invalid_result_is_rejected(self, healthy_history, clock):
        too_new = replace(healthy_history, version=2)
        with pytest.raises(BulkOperationError, match="resulted in invalid data"):
            bulk_update_reading_day_entries(too_new, [_add("2024-03-10")], clock=clock)


    def test_matches_single_day_operations(self, healthy_history, clock):
        """A bulk request ends where the same single-day calls would."""
        healthy_history.reading_days.add("2024-03-01")
        operations = [
            _add("2024-03-10", "evening"),
            {"kind": "update", "date": "2024-03-09", "updates": {"book_ids": [1, 1, 2]}},
            _add("2024-03-08", "rewritten"),
            {"kind": "remove", "date": "2024-03-10"},
            _add("2024-03-07"),
        ]
        updated, _ = bulk_update_reading_day_entries(
            healthy_history, operations, chunk_size=2, skip_validation=True, clock=clock
        )

        expected = healthy_history
        for op in map(BulkOperation.from_dict, operations):
            if op.kind == "add":
                expected = add_reading_day_entry(expected, replace(op.entry, date=op.date), clock)
            elif op.kind == "update":
                expected = update_reading_day_entry(expected, op.date, op.updates, clock)
            else:
                expected = remove_reading_day_entry(expected, op.date, clock)

        assert updated == expected
        assert "2024-03-01" not in updated.reading_days

    def test_large_batch_rebuilds_once_per_chunk(self, clock, monkeypatch):
        """Work per request grows with chunks, not with operations."""
        index_reads = []
        validations = []
        real_keys = bulk.iter_day_keys
        real_validate = IntegrityValidator.validate

        def counting_keys(raw):
            index_reads.append(1)
            return real_keys(raw)

        def counting_validate(self, history, books=None):
            validations.append(len(history.reading_day_entries))
            return real_validate(self, history, books)

        monkeypatch.setattr(bulk, "iter_day_keys", counting_keys)
        monkeypatch.setattr(IntegrityValidator, "validate", counting_validate)

        today = date(2024, 3, 10)
        operations = [_add((today - timedelta(days=i)).isoformat()) for i in range(3000)]
        updated, stats = bulk_update_reading_day_entries(
            None, operations, chunk_size=500, clock=clock
        )

        assert len(updated.reading_day_entries) == 3000
        assert len(updated.reading_days) == 3000
        assert stats.chunks == 6
        assert index_reads == [1]
        assert validations == [500, 1000, 1500, 2000, 2500, 3000, 3000]


class TestStreaming:
    """Tests for stream_entries and process_in_chunks."""

    @pytest.fixture
    def day_map(self, make_entry):
        keys = ["2024-01-01", "2024-01-05", "2024-02-01", "2024-03-01"]
        return {key: make_entry(key, book_ids=[1] if key < "2024-02-01" else []) for key in keys}

    def test_bounds_are_inclusive(self, day_map):
        dates = [e.date for e in stream_entries(day_map, "2024-01-05", "2024-02-01")]
        assert dates == ["2024-01-05", "2024-02-01"]

    def test_datetime_bounds(self, day_map):
        dates = [e.date for e in stream_entries(day_map, datetime(2024, 1, 5, 9), datetime(2024, 2, 1, 23))]
        assert dates == ["2024-01-05", "2024-02-01"]

    def test_predicate(self, day_map):
        dates = [e.date for e in stream_entries(day_map, predicate=lambda e: e.book_ids)]
        assert dates == ["2024-01-01", "2024-01-05"]

    def test_reversed_bounds(self, day_map):
        with pytest.raises(InvalidRangeError):
            list(stream_entries(day_map, "2024-03-01", "2024-01-01"))

    def test_process_in_chunks(self, day_map):
        assert list(process_in_chunks(day_map, len, chunk_size=3)) == [3, 1]
