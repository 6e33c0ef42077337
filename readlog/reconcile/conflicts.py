#!/usr/bin/env python3
"""
conflicts.py
-------------------

Conflict resolution for reading day entries that land on the same date.

Every contributing source is retained; sources are re-ordered so the
highest-priority kind comes first:

    manual > book_completion > progress_update

Ties keep their encounter order. Book ids are unioned (first occurrence
wins the position) and distinct notes are joined with ``"; "``.

The advanced variant breaks ties inside a priority tier by the
``confidence`` metadata hint and then by recency.
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

# ---- Local imports ----
from readlog.core.exceptions import ConflictResolutionError, EmptyInputError
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind


SOURCE_PRIORITY: Dict[SourceKind, int] = {kind: kind.priority for kind in SourceKind}

NOTE_SEPARATOR = "; "


def _timestamp_rank(source: ReadingDataSource) -> float:
    if isinstance(source.timestamp, datetime):
        return source.timestamp.timestamp()
    return float("-inf")


def _priority_key(source: ReadingDataSource) -> Tuple[int]:
    return (-source.priority,)


def _advanced_key(source: ReadingDataSource) -> Tuple[int, float, float]:
    return (-source.priority, -source.confidence, -_timestamp_rank(source))


def _merge_notes(entries: Sequence[ReadingDayEntry]) -> Optional[str]:
    notes: List[str] = []
    for entry in entries:
        if not entry.notes:
            continue
        # already-merged notes are split so re-merging never repeats a part
        for part in entry.notes.split(NOTE_SEPARATOR):
            if part and part not in notes:
                notes.append(part)
    return NOTE_SEPARATOR.join(notes) if notes else None


def _merge_book_ids(entries: Sequence[ReadingDayEntry]) -> List[int]:
    book_ids: List[int] = []
    for entry in entries:
        for book_id in entry.book_ids:
            if book_id not in book_ids:
                book_ids.append(book_id)
    return book_ids


def _bound(entries: Sequence[ReadingDayEntry], attr: str, pick: Callable) -> Optional[datetime]:
    values = [getattr(e, attr) for e in entries if isinstance(getattr(e, attr), datetime)]
    if not values:
        return None
    try:
        return pick(values)
    except TypeError:
        # naive and aware timestamps cannot be compared
        return values[0]


def _combine(
    entries: Sequence[ReadingDayEntry],
    sort_key: Callable[[ReadingDataSource], tuple],
) -> ReadingDayEntry:
    if not entries:
        raise EmptyInputError("Cannot resolve conflicts for an empty list of entries")

    day = entries[0].date
    stray = [entry.date for entry in entries if entry.date != day]
    if stray:
        raise ConflictResolutionError(
            f"Cannot resolve entries for different dates: {day} vs {', '.join(sorted(set(stray)))}"
        )

    sources = [source for entry in entries for source in entry.sources]
    # sorted() is stable, so equal keys keep encounter order
    sources = sorted(sources, key=sort_key)

    return ReadingDayEntry(
        date=day,
        sources=sources,
        book_ids=_merge_book_ids(entries),
        notes=_merge_notes(entries),
        created_at=_bound(entries, "created_at", min),
        modified_at=_bound(entries, "modified_at", max),
    )


def resolve_conflicts(entries: Sequence[ReadingDayEntry]) -> ReadingDayEntry:
    """
    Merge candidate entries for one date into a single entry.

    Args:
        entries: One or more entries sharing the same date

    Returns:
        Entry whose sources are ordered by descending priority

    Raises:
        EmptyInputError: If no entries are given
        ConflictResolutionError: If the entries are for different dates
    """
    return _combine(entries, _priority_key)


def resolve_conflicts_advanced(entries: Sequence[ReadingDayEntry]) -> ReadingDayEntry:
    """
    Like resolve_conflicts, but orders sources of equal priority by their
    confidence hint and then by most recent timestamp.
    """
    return _combine(entries, _advanced_key)
