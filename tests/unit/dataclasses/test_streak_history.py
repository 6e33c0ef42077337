"""Tests for streak history records and reading periods."""
import pytest
import yaml
from datetime import date, datetime

from readlog.core.exceptions import SerializationError
from readlog.dataclasses.reading_period import ReadingPeriod
from readlog.dataclasses.streak_history import (
    CURRENT_STREAK_HISTORY_VERSION,
    EnhancedStreakHistory,
    LegacyStreakHistory,
    days_from,
)
from readlog.validators.integrity import validate_reading_data_enhanced


class TestReadingPeriod:
    """Tests for ReadingPeriod."""

    def test_between_counts_inclusively(self):
        period = ReadingPeriod.between(1, date(2024, 1, 1), date(2024, 1, 3))
        assert period.total_days == 3
        assert ReadingPeriod.between(1, date(2024, 1, 1), date(2024, 1, 1)).total_days == 1

    def test_contains_and_overlaps(self):
        first = ReadingPeriod.between(1, date(2024, 1, 1), date(2024, 1, 3))
        second = ReadingPeriod.between(2, date(2024, 1, 3), date(2024, 1, 5))
        third = ReadingPeriod.between(3, date(2024, 1, 4), date(2024, 1, 5))
        assert first.contains(date(2024, 1, 3))
        assert not first.contains(date(2024, 1, 4))
        assert first.overlaps(second)
        assert not first.overlaps(third)

    def test_from_dict_drops_reversed(self):
        assert ReadingPeriod.from_dict(
            {"book_id": 1, "start_date": "2024-01-05", "end_date": "2024-01-01"}
        ) is None


class TestLegacyStreakHistory:
    """Tests for LegacyStreakHistory serialization."""

    def test_round_trip(self, legacy_history):
        assert LegacyStreakHistory.from_dict(legacy_history.to_dict()) == legacy_history

    def test_dict_shaped_days_are_recovered(self):
        """A day set serialized as an index mapping is read back from its values."""
        history = LegacyStreakHistory.from_dict(
            {"reading_days": {"0": "2024-01-01", "1": "2024-01-02"}}
        )
        assert history.reading_days == {"2024-01-01", "2024-01-02"}

    def test_date_objects_become_keys(self):
        history = LegacyStreakHistory.from_dict({"reading_days": [date(2024, 1, 1)]})
        assert history.reading_days == {"2024-01-01"}

    def test_wrong_type_raises(self):
        with pytest.raises(SerializationError):
            LegacyStreakHistory.from_dict({"reading_days": 5})


class TestEnhancedStreakHistory:
    """Tests for EnhancedStreakHistory views and serialization."""

    def test_entry_map_is_sorted_and_last_duplicate_wins(self, make_entry):
        history = EnhancedStreakHistory(
            reading_day_entries=[
                make_entry("2024-01-02", notes="first"),
                make_entry("2024-01-01"),
                make_entry("2024-01-02", notes="second"),
            ]
        )
        day_map = history.entry_map()
        assert list(day_map) == ["2024-01-01", "2024-01-02"]
        assert day_map["2024-01-02"].notes == "second"
        assert history.find_entry("2024-01-03") is None

    def test_round_trip(self, healthy_history):
        restored = EnhancedStreakHistory.from_dict(healthy_history.to_dict())
        assert restored == healthy_history
        assert restored.version == CURRENT_STREAK_HISTORY_VERSION

    def test_damaged_containers_are_kept(self):
        """Wrong container types survive loading for the validator to report."""
        history = EnhancedStreakHistory.from_dict(
            {"reading_days": "2024-01-01", "reading_day_entries": {"2024-01-01": {}}}
        )
        assert history.reading_days == "2024-01-01"
        assert history.reading_day_entries == {"2024-01-01": {}}
        assert history.entry_map() == {}
        assert history.version is None

    def test_unquoted_yaml_dates_load_as_keys(self, healthy_history, clock):
        """Dates YAML parses into date objects still become ISO keys on entries."""
        text = """
version: 1
reading_days: [2024-03-08, 2024-03-09]
reading_day_entries:
  - date: 2024-03-08
    sources: [{kind: manual, timestamp: 2024-03-10 12:00:00}]
    book_ids: []
    created_at: 2024-03-01 09:00:00
    modified_at: 2024-03-01 09:00:00
  - date: 2024-03-09
    sources: [{kind: book_completion, timestamp: 2024-03-10 12:00:00}]
    book_ids: [1]
    created_at: 2024-03-01 09:00:00
    modified_at: 2024-03-01 09:00:00
book_periods: []
last_calculated: 2024-03-01 09:00:00
last_sync_date: 2024-03-01 09:00:00
"""
        history = EnhancedStreakHistory.from_dict(yaml.safe_load(text))

        assert [e.date for e in history.reading_day_entries] == ["2024-03-08", "2024-03-09"]
        assert history == healthy_history
        assert validate_reading_data_enhanced(history, clock=clock).is_valid

    def test_not_a_mapping_raises(self):
        with pytest.raises(SerializationError):
            EnhancedStreakHistory.from_dict(["2024-01-01"])


def test_days_from_normalizes():
    assert days_from([date(2024, 1, 1), datetime(2024, 1, 2, 5), "2024-01-03"]) == {
        "2024-01-01", "2024-01-02", "2024-01-03"
    }
