"""Tests for the conflict resolver."""
import pytest
from datetime import datetime

from readlog.core.exceptions import ConflictResolutionError, EmptyInputError
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind
from readlog.reconcile.conflicts import resolve_conflicts, resolve_conflicts_advanced


def _source(kind, timestamp=datetime(2024, 1, 1, 12), book_id=None, **metadata):
    return ReadingDataSource(kind=SourceKind(kind), timestamp=timestamp, book_id=book_id,
                             metadata=metadata)


class TestResolveConflicts:
    """Tests for priority-based resolution."""

    def test_manual_comes_first(self, make_entry):
        """book_completion then manual resolves with manual first."""
        resolved = resolve_conflicts([
            make_entry("2024-01-01", "book_completion", book_ids=[1]),
            make_entry("2024-01-01", "manual"),
        ])
        assert resolved.sources[0].kind is SourceKind.MANUAL
        assert [s.kind for s in resolved.sources] == [
            SourceKind.MANUAL, SourceKind.BOOK_COMPLETION
        ]

    def test_all_sources_kept_and_ties_keep_order(self):
        first = _source("progress_update", book_id=1)
        second = _source("book_completion", book_id=2)
        third = _source("progress_update", book_id=3)
        resolved = resolve_conflicts([
            ReadingDayEntry(date="2024-01-01", sources=[first]),
            ReadingDayEntry(date="2024-01-01", sources=[second, third]),
        ])
        assert resolved.sources == [second, first, third]

    def test_book_ids_union_preserves_first_occurrence(self, make_entry):
        resolved = resolve_conflicts([
            make_entry("2024-01-01", "progress_update", book_ids=[3, 1]),
            make_entry("2024-01-01", "book_completion", book_ids=[1, 2]),
        ])
        assert resolved.book_ids == [3, 1, 2]

    def test_notes_are_joined_distinct(self, make_entry):
        resolved = resolve_conflicts([
            make_entry("2024-01-01", notes="Reading \"A\""),
            make_entry("2024-01-01"),
            make_entry("2024-01-01", notes="Progress update: 40%"),
            make_entry("2024-01-01", notes="Reading \"A\""),
        ])
        assert resolved.notes == 'Reading "A"; Progress update: 40%'

    def test_no_notes_gives_none(self, make_entry):
        assert resolve_conflicts([make_entry("2024-01-01")]).notes is None

    def test_created_and_modified_bounds(self, make_entry):
        resolved = resolve_conflicts([
            make_entry("2024-01-01", created_at=datetime(2024, 1, 2), modified_at=datetime(2024, 1, 3)),
            make_entry("2024-01-01", created_at=datetime(2024, 1, 1), modified_at=datetime(2024, 1, 5)),
        ])
        assert resolved.created_at == datetime(2024, 1, 1)
        assert resolved.modified_at == datetime(2024, 1, 5)

    def test_idempotent(self, make_entry):
        entries = [
            make_entry("2024-01-01", "progress_update", book_ids=[2], notes="a"),
            make_entry("2024-01-01", "manual", notes="b"),
            make_entry("2024-01-01", "book_completion", book_ids=[1, 2], notes="a"),
        ]
        once = resolve_conflicts(entries)
        assert resolve_conflicts([once]) == once

    def test_empty_input_raises(self):
        with pytest.raises(EmptyInputError):
            resolve_conflicts([])

    def test_mixed_dates_raise(self, make_entry):
        with pytest.raises(ConflictResolutionError, match="different dates"):
            resolve_conflicts([make_entry("2024-01-01"), make_entry("2024-01-02")])


class TestResolveConflictsAdvanced:
    """Tests for the confidence/recency tie-breaker."""

    def test_priority_still_dominates(self):
        low = _source("progress_update", timestamp=datetime(2024, 1, 9), confidence=1.0)
        high = _source("manual", timestamp=datetime(2024, 1, 1), confidence=0.1)
        resolved = resolve_conflicts_advanced([
            ReadingDayEntry(date="2024-01-01", sources=[low]),
            ReadingDayEntry(date="2024-01-01", sources=[high]),
        ])
        assert resolved.sources[0] is high

    def test_confidence_then_recency_within_tier(self):
        older_confident = _source("progress_update", timestamp=datetime(2024, 1, 1), confidence=0.9)
        newer_unsure = _source("progress_update", timestamp=datetime(2024, 1, 5), confidence=0.5)
        newest_unsure = _source("progress_update", timestamp=datetime(2024, 1, 7), confidence=0.5)
        resolved = resolve_conflicts_advanced([
            ReadingDayEntry(date="2024-01-01", sources=[newer_unsure, newest_unsure, older_confident]),
        ])
        assert resolved.sources == [older_confident, newest_unsure, newer_unsure]
