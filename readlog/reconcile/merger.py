#!/usr/bin/env python3
"""
merger.py
-------------------

Source merger: builds the canonical ReadingDayMap from a streak record and
the book list.

Contributions, in processing order:
    1. Manual days from the streak record's reading_days
    2. Stored journal entries, when the record is already enhanced
    3. Finished books: every day of the start/finish period (book_completion)
    4. Other books with a start and a modification date: every day
       from start to modification (progress_update)
    5. Currently-reading books modified within the progress window: the
       modification day (progress_update)

Candidates for the same date are collapsed with resolve_conflicts, so the
output holds exactly one entry per date, sorted by date.

Usage:
    day_map = merge_reading_data(history, books, clock=FixedClock(now))
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

# ---- Local imports ----
from readlog.configs.engine_configs import DEFAULT_CONFIG, EngineConfig
from readlog.core.clock import Clock, resolve_clock
from readlog.core.logging_manager import ReadlogLogger, safe_logger
from readlog.core.validators import DataValidator, iter_days
from readlog.dataclasses.book import Book
from readlog.dataclasses.reading_day import (
    ReadingDataSource,
    ReadingDayEntry,
    ReadingDayMap,
    SourceKind,
)
from readlog.dataclasses.streak_history import EnhancedStreakHistory, StreakHistory
from .conflicts import resolve_conflicts
from .periods import period_for_book


logger = logging.getLogger(__name__)

Candidates = Dict[str, List[ReadingDayEntry]]


# ----- Day keys -----
def iter_day_keys(raw: Any) -> Iterator[str]:
    """Yield canonical keys from a reading_days container, skipping junk."""
    if raw is None:
        return
    if isinstance(raw, dict):
        # A set that went through a lossy serializer ends up as a mapping
        values = [v for v in raw.values() if isinstance(v, str)]
        raw = values or list(raw.keys())
    if not isinstance(raw, (set, frozenset, list, tuple)):
        logger.warning("Unexpected reading_days type %s, skipping manual days", type(raw).__name__)
        return
    for value in raw:
        day = DataValidator.normalize_date(value)
        if day is None:
            logger.warning("Skipping unparseable reading day %r", value)
            continue
        yield DataValidator.format_date(day)


def _as_datetime(day: date) -> datetime:
    return datetime(day.year, day.month, day.day)


# ----- Contributions -----
def history_candidates(history: Optional[StreakHistory], clock: Optional[Clock] = None) -> Iterator[ReadingDayEntry]:
    """
    Yield candidate entries contributed by a streak record.

    Days only present in reading_days become manual entries. For an
    enhanced record, days that already have a stored entry are taken from
    that entry instead, with its own sources.
    """
    if history is None:
        return

    recorded_at = history.last_calculated
    if not isinstance(recorded_at, datetime):
        recorded_at = resolve_clock(clock).now()

    stored: List[ReadingDayEntry] = []
    if isinstance(history, EnhancedStreakHistory) and isinstance(history.reading_day_entries, list):
        stored = history.reading_day_entries
    stored_dates = {entry.date for entry in stored}

    for key in iter_day_keys(history.reading_days):
        if key in stored_dates:
            continue
        yield ReadingDayEntry(
            date=key,
            sources=[ReadingDataSource(kind=SourceKind.MANUAL, timestamp=recorded_at)],
        )

    for entry in stored:
        if not DataValidator.is_iso_date(entry.date) or not entry.sources:
            logger.warning("Skipping malformed journal entry for %r", entry.date)
            continue
        yield ReadingDayEntry(
            date=entry.date,
            sources=list(entry.sources),
            book_ids=list(entry.book_ids),
            notes=entry.notes,
            created_at=entry.created_at,
            modified_at=entry.modified_at,
        )


def _completion_candidates(book: Book) -> Iterator[ReadingDayEntry]:
    period = period_for_book(book)
    if period is None:
        return
    timestamp = DataValidator.normalize_datetime(book.date_finished)
    for day in period.days():
        is_last_day = day == period.end_date
        yield ReadingDayEntry(
            date=DataValidator.format_date(day),
            sources=[ReadingDataSource(
                kind=SourceKind.BOOK_COMPLETION,
                timestamp=timestamp,
                book_id=book.id,
                metadata={
                    "progress": 100 if is_last_day else book.progress,
                    "pages": book.total_pages,
                },
            )],
            book_ids=[book.id],
            notes=f'Reading "{book.title}"',
        )


def _progress_span_candidates(book: Book) -> Iterator[ReadingDayEntry]:
    if not book.date_started or not book.date_modified:
        return
    start = book.started_on
    end = book.finished_on if book.date_finished else DataValidator.normalize_date(book.date_modified)
    if start is None or end is None:
        logger.warning("Invalid dates for book %r, skipping progress span", book.title)
        return
    if start > end:
        logger.warning("Start date after end date for book %r, skipping progress span", book.title)
        return

    timestamp = book.modified_at or _as_datetime(end)
    for day in iter_days(start, end):
        yield ReadingDayEntry(
            date=DataValidator.format_date(day),
            sources=[ReadingDataSource(
                kind=SourceKind.PROGRESS_UPDATE,
                timestamp=timestamp,
                book_id=book.id,
                metadata={"progress": book.progress, "pages": book.total_pages},
            )],
            book_ids=[book.id],
            notes=f'Currently reading "{book.title}" ({book.progress}%)',
        )


def _recent_progress_candidates(book: Book, today: date, config: EngineConfig) -> Iterator[ReadingDayEntry]:
    if not book.is_currently_reading:
        return
    modified = book.modified_at
    if modified is None:
        return
    age = (today - modified.date()).days
    if age < 0 or age > config.progress_window_days:
        return
    yield ReadingDayEntry(
        date=DataValidator.format_date(modified.date()),
        sources=[ReadingDataSource(
            kind=SourceKind.PROGRESS_UPDATE,
            timestamp=modified,
            book_id=book.id,
            metadata={"progress": book.progress, "pages": book.current_page},
        )],
        book_ids=[book.id],
        notes=f"Progress update: {book.progress}%",
    )


def book_candidates(
    book: Book,
    clock: Optional[Clock] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Iterator[ReadingDayEntry]:
    """
    Yield candidate entries contributed by one book.

    Finished books with a finish date contribute their completion period.
    Any other book contributes a progress span from start to modification
    and, when currently reading and recently modified, the modification day.
    """
    if book.is_finished and book.date_finished:
        yield from _completion_candidates(book)
        return
    yield from _progress_span_candidates(book)
    yield from _recent_progress_candidates(book, resolve_clock(clock).today(), config)


# ----- Assembly -----
def collect_candidates(candidates: Candidates, entries: Iterable[ReadingDayEntry]) -> Candidates:
    """Group entries by date into an existing candidate table."""
    for entry in entries:
        candidates[entry.date].append(entry)
    return candidates


def resolve_candidates(candidates: Candidates) -> ReadingDayMap:
    """Collapse each date's candidates into one entry, returning a date-sorted map."""
    return {day: resolve_conflicts(candidates[day]) for day in sorted(candidates)}


def merge_reading_data(
    history: Optional[StreakHistory],
    books: Iterable[Book],
    clock: Optional[Clock] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    logger: Optional[ReadlogLogger] = None,
) -> ReadingDayMap:
    """
    Merge a streak record and the book list into one entry per reading day.

    Args:
        history: Legacy or enhanced streak record (None means no manual days)
        books: Books from the repository
        clock: Time source for the progress window
        config: Engine thresholds
        logger: Optional ReadlogLogger for operation logging

    Returns:
        ReadingDayMap sorted by date
    """
    log = safe_logger(logger)
    clock = resolve_clock(clock)

    candidates: Candidates = defaultdict(list)
    collect_candidates(candidates, history_candidates(history, clock))

    book_count = 0
    for book in books:
        book_count += 1
        collect_candidates(candidates, book_candidates(book, clock, config))

    day_map = resolve_candidates(candidates)
    log.log_debug(
        "merge_reading_data",
        {"books": book_count, "days": len(day_map)},
    )
    return day_map
