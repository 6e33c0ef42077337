#!/usr/bin/env python3
"""
streak_history.py
-------------------

Defines the two persisted shapes of a reader's streak record:

- LegacyStreakHistory: the coarse record, a plain set of reading days
- EnhancedStreakHistory: the per-day journal with sources, books and notes

The enhanced journal persists its entries as a list so that duplicated
dates survive a load and can be detected by the integrity validator.
``entry_map()`` gives the keyed ReadingDayMap view used by queries.

Deserialization is tolerant: a container of the wrong type or a missing
field is kept as found (the wrong object, or None) rather than rejected,
because structural damage is reported and repaired downstream.
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set, Union

# ---- Local imports ----
from readlog.core.exceptions import SerializationError
from .reading_day import (
    ReadingDayEntry,
    ReadingDayMap,
    _coerce_timestamp,
    _day_key,
    _dump_timestamp,
)
from .reading_period import ReadingPeriod


CURRENT_STREAK_HISTORY_VERSION = 1


def _load_days(raw: Any) -> Any:
    if raw is None:
        return None
    if isinstance(raw, (list, tuple, set, frozenset)):
        return {_day_key(day) for day in raw}
    return raw


def _load_periods(raw: Any) -> List[ReadingPeriod]:
    if not raw:
        return []
    if not isinstance(raw, list):
        raise SerializationError("book_periods must be a list")
    periods = []
    for item in raw:
        if isinstance(item, ReadingPeriod):
            periods.append(item)
            continue
        period = ReadingPeriod.from_dict(item)
        if period is not None:
            periods.append(period)
    return periods


@dataclass
class LegacyStreakHistory:
    """
    Coarse streak record: which days were read, nothing more.

    Attributes:
        reading_days: ISO date keys of reading days
        book_periods: Reading periods stored alongside the days
        last_calculated: When the record was last recomputed
    """

    reading_days: Set[str] = field(default_factory=set)
    book_periods: List[ReadingPeriod] = field(default_factory=list)
    last_calculated: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reading_days": sorted(self.reading_days),
            "book_periods": [p.to_dict() for p in self.book_periods],
            "last_calculated": _dump_timestamp(self.last_calculated),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LegacyStreakHistory":
        if not isinstance(data, dict):
            raise SerializationError("Legacy streak history must be a mapping")
        days = _load_days(data.get("reading_days"))
        if days is None:
            days = set()
        if isinstance(days, dict):
            # a set that went through a lossy serializer
            days = {v for v in days.values() if isinstance(v, str)} or set(days)
        if not isinstance(days, set):
            raise SerializationError("reading_days must be a list of dates")
        return cls(
            reading_days=days,
            book_periods=_load_periods(data.get("book_periods")),
            last_calculated=_coerce_timestamp(data.get("last_calculated")),
        )


@dataclass
class EnhancedStreakHistory:
    """
    Canonical per-day reading journal.

    Attributes:
        reading_days: Index of journal dates, kept in sync with the entries
        reading_day_entries: One entry per reading day (duplicates are damage)
        book_periods: Reading periods stored alongside the journal
        last_calculated: When streaks were last recomputed
        last_sync_date: When the journal was last reconciled with books
        version: Schema version tag
    """

    reading_days: Optional[Set[str]] = field(default_factory=set)
    reading_day_entries: Optional[List[ReadingDayEntry]] = field(default_factory=list)
    book_periods: List[ReadingPeriod] = field(default_factory=list)
    last_calculated: Optional[datetime] = None
    last_sync_date: Optional[datetime] = None
    version: Optional[int] = CURRENT_STREAK_HISTORY_VERSION

    def entry_map(self) -> ReadingDayMap:
        """
        Keyed view of the entries, sorted by date.

        When a date is duplicated the last stored entry wins.
        """
        entries = self.reading_day_entries
        if not isinstance(entries, list):
            return {}
        by_date: ReadingDayMap = {}
        for entry in entries:
            by_date[entry.date] = entry
        return {key: by_date[key] for key in sorted(by_date)}

    def entry_dates(self) -> Set[str]:
        if not isinstance(self.reading_day_entries, list):
            return set()
        return {entry.date for entry in self.reading_day_entries}

    def find_entry(self, day: str) -> Optional[ReadingDayEntry]:
        return self.entry_map().get(day)

    # ---- Serialization ----
    def to_dict(self) -> Dict[str, Any]:
        days: Any = self.reading_days
        if isinstance(days, (set, frozenset)):
            days = sorted(days)
        entries: Any = self.reading_day_entries
        if isinstance(entries, list):
            entries = [entry.to_dict() for entry in entries]
        return {
            "version": self.version,
            "reading_days": days,
            "reading_day_entries": entries,
            "book_periods": [p.to_dict() for p in self.book_periods],
            "last_calculated": _dump_timestamp(self.last_calculated),
            "last_sync_date": _dump_timestamp(self.last_sync_date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnhancedStreakHistory":
        """
        Rebuild a journal from its stored mapping.

        Raises:
            SerializationError: If the mapping or one of its entries is unreadable
        """
        if not isinstance(data, dict):
            raise SerializationError("Enhanced streak history must be a mapping")

        raw_entries = data.get("reading_day_entries")
        if isinstance(raw_entries, list):
            entries: Any = [ReadingDayEntry.from_dict(item) for item in raw_entries]
        else:
            entries = raw_entries

        return cls(
            reading_days=_load_days(data.get("reading_days")),
            reading_day_entries=entries,
            book_periods=_load_periods(data.get("book_periods")),
            last_calculated=_coerce_timestamp(data.get("last_calculated")),
            last_sync_date=_coerce_timestamp(data.get("last_sync_date")),
            version=data.get("version"),
        )


StreakHistory = Union[LegacyStreakHistory, EnhancedStreakHistory]


def days_from(values: Iterable[Any]) -> Set[str]:
    """Normalize an iterable of dates or date keys into a set of date keys."""
    return {_day_key(value) for value in values}
