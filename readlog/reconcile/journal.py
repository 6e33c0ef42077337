#!/usr/bin/env python3
"""
journal.py
-------------------

Single-day operations on the enhanced journal.

Each operation returns a new EnhancedStreakHistory; the history passed in
is never mutated. Every operation keeps reading_days in sync with the
entry dates and stamps last_sync_date.

Functions:
    create_empty_enhanced_streak_history
    synchronize_reading_days
    add_reading_day_entry
    update_reading_day_entry
    remove_reading_day_entry
    record_check_in
    overwrite_entry: Entry content for an add, shared with bulk updates
    change_entry: Entry content for an update, shared with bulk updates
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

# ---- Local imports ----
from readlog.core.clock import Clock, resolve_clock
from readlog.core.exceptions import ValidationError
from readlog.core.validators import DataValidator
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind
from readlog.dataclasses.streak_history import (
    CURRENT_STREAK_HISTORY_VERSION,
    EnhancedStreakHistory,
)
from .conflicts import resolve_conflicts
from .merger import iter_day_keys


UPDATABLE_FIELDS = ("sources", "book_ids", "notes")


def _entries(history: EnhancedStreakHistory) -> List[ReadingDayEntry]:
    entries = history.reading_day_entries
    return list(entries) if isinstance(entries, list) else []


def _dedupe(book_ids: List[int]) -> List[int]:
    unique: List[int] = []
    for book_id in book_ids:
        if book_id not in unique:
            unique.append(book_id)
    return unique


def _check_entry(entry: ReadingDayEntry) -> None:
    if not DataValidator.is_iso_date(entry.date):
        raise ValidationError(f"Invalid entry date: {entry.date!r}. Use YYYY-MM-DD format.")
    if not entry.sources:
        raise ValidationError(f"Entry for {entry.date} must have at least one source")


def _check_fields(changes: Dict[str, Any]) -> None:
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Cannot update fields: {', '.join(unknown)}")


# ----- Entry edits -----
def overwrite_entry(
    existing: Optional[ReadingDayEntry], entry: ReadingDayEntry, now: datetime
) -> ReadingDayEntry:
    """
    Entry stored when adding `entry` over `existing` (None for a new date).

    Raises:
        ValidationError: If the entry date is not canonical or it has no sources
    """
    _check_entry(entry)
    if existing is None:
        return replace(
            entry,
            sources=list(entry.sources),
            book_ids=_dedupe(entry.book_ids),
            created_at=now,
            modified_at=now,
        )
    return replace(
        existing,
        sources=list(entry.sources),
        book_ids=_dedupe(entry.book_ids),
        notes=entry.notes,
        modified_at=now,
    )


def change_entry(existing: ReadingDayEntry, changes: Dict[str, Any], now: datetime) -> ReadingDayEntry:
    """
    Apply field changes to an entry.

    Raises:
        ValidationError: If a field is not updatable or the entry would be
            left without sources
    """
    _check_fields(changes)
    updated = replace(existing, **changes)
    updated = replace(
        updated,
        sources=list(updated.sources),
        book_ids=_dedupe(updated.book_ids),
        modified_at=now,
    )
    _check_entry(updated)
    return updated


def create_empty_enhanced_streak_history(clock: Optional[Clock] = None) -> EnhancedStreakHistory:
    """New journal with no days, stamped with the current time."""
    now = resolve_clock(clock).now()
    return EnhancedStreakHistory(
        reading_days=set(),
        reading_day_entries=[],
        book_periods=[],
        last_calculated=now,
        last_sync_date=now,
        version=CURRENT_STREAK_HISTORY_VERSION,
    )


def synchronize_reading_days(
    history: EnhancedStreakHistory, clock: Optional[Clock] = None
) -> EnhancedStreakHistory:
    """
    Make reading_days the union of its current days and the entry dates.

    Days already in reading_days are kept even without an entry.
    """
    days = set(iter_day_keys(history.reading_days))
    days.update(entry.date for entry in _entries(history))
    return replace(
        history,
        reading_days=days,
        reading_day_entries=_entries(history),
        last_sync_date=resolve_clock(clock).now(),
    )


def add_reading_day_entry(
    history: EnhancedStreakHistory,
    entry: ReadingDayEntry,
    clock: Optional[Clock] = None,
) -> EnhancedStreakHistory:
    """
    Add an entry, or overwrite the content of the entry for the same date.

    An overwritten entry keeps its created_at; modified_at is always set
    to now.

    Raises:
        ValidationError: If the entry date is not canonical or it has no sources
    """
    now = resolve_clock(clock).now()
    entries = _entries(history)

    for index, existing in enumerate(entries):
        if existing.date == entry.date:
            entries[index] = overwrite_entry(existing, entry, now)
            break
    else:
        entries.append(overwrite_entry(None, entry, now))

    return synchronize_reading_days(replace(history, reading_day_entries=entries), clock)


def update_reading_day_entry(
    history: EnhancedStreakHistory,
    day: str,
    changes: Dict[str, Any],
    clock: Optional[Clock] = None,
) -> EnhancedStreakHistory:
    """
    Change fields of the entry for a date.

    Args:
        history: Journal to update
        day: ISO date of the entry
        changes: New values for any of sources, book_ids, notes

    Raises:
        ValidationError: If there is no entry for the date, a field is not
            updatable, or the update would leave the entry without sources
    """
    _check_fields(changes)
    entries = _entries(history)
    for index, existing in enumerate(entries):
        if existing.date == day:
            break
    else:
        raise ValidationError(f"No reading day entry for {day}")

    entries[index] = change_entry(existing, changes, resolve_clock(clock).now())
    return synchronize_reading_days(replace(history, reading_day_entries=entries), clock)


def remove_reading_day_entry(
    history: EnhancedStreakHistory, day: str, clock: Optional[Clock] = None
) -> EnhancedStreakHistory:
    """
    Remove every entry for a date.

    reading_days is rebuilt from the remaining entries. Removing a date
    that has no entry is a no-op apart from the sync stamp.
    """
    entries = [entry for entry in _entries(history) if entry.date != day]
    return replace(
        history,
        reading_day_entries=entries,
        reading_days={entry.date for entry in entries},
        last_sync_date=resolve_clock(clock).now(),
    )


def record_check_in(
    history: EnhancedStreakHistory,
    day: Union[str, date, None] = None,
    notes: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> EnhancedStreakHistory:
    """
    Record a manual "I read today" check-in.

    When the date already has an entry, the manual source is merged into
    it so the entry keeps its books and earlier sources.

    Args:
        history: Journal to update
        day: Date to check in; today when omitted
        notes: Optional note for the day
    """
    clock = resolve_clock(clock)
    if day is None:
        day = clock.today()
    if isinstance(day, date):
        key = DataValidator.format_date(DataValidator.normalize_date(day))
    else:
        key = DataValidator.parse_iso_date(day).isoformat()

    check_in = ReadingDayEntry(
        date=key,
        sources=[ReadingDataSource(kind=SourceKind.MANUAL, timestamp=clock.now())],
        notes=notes,
    )
    existing = history.find_entry(key)
    if existing is not None:
        check_in = resolve_conflicts([existing, check_in])
    return add_reading_day_entry(history, check_in, clock)
