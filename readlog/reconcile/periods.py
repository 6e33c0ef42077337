#!/usr/bin/env python3
"""
periods.py
-------------------

Period extraction and day-set generation.

Derives closed reading intervals from book start/finish timestamps and
expands them into the set of calendar days they cover.

Bad source data is expected: a book whose dates cannot be parsed, or
whose start falls after its finish, is dropped with a warning in the log
and never raised to the caller.

Functions:
    extract_reading_periods: Books -> valid ReadingPeriods
    generate_reading_days: Periods -> set of ISO day keys (union)
    validate_reading_periods: Flag suspicious but valid periods
    get_reading_period_stats: Summary counts over periods
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

# ---- Local imports ----
from readlog.configs.engine_configs import DEFAULT_CONFIG, EngineConfig
from readlog.core.clock import Clock, resolve_clock
from readlog.core.validators import DataValidator
from readlog.dataclasses.book import Book
from readlog.dataclasses.reading_period import ReadingPeriod


logger = logging.getLogger(__name__)


def period_for_book(book: Book) -> Optional[ReadingPeriod]:
    """
    Build the reading period for one book.

    Args:
        book: Book with start and finish timestamps

    Returns:
        ReadingPeriod, or None if either date is missing, unparseable,
        or the interval is reversed
    """
    if not book.date_started or not book.date_finished:
        return None

    start = book.started_on
    end = book.finished_on
    if start is None or end is None:
        logger.warning(
            "Invalid dates for book %r: start=%r, end=%r",
            book.title, book.date_started, book.date_finished,
        )
        return None

    if start > end:
        logger.warning(
            "Start date is after end date for book %r: start=%s, end=%s",
            book.title, start, end,
        )
        return None

    return ReadingPeriod.between(book.id, start, end, title=book.title, author=book.author)


def extract_reading_periods(books: Iterable[Book]) -> List[ReadingPeriod]:
    """
    Extract reading periods from books that have both start and finish dates.

    Invalid books are skipped; the output keeps the input order.
    """
    periods = []
    for book in books:
        period = period_for_book(book)
        if period is not None:
            periods.append(period)
    return periods


def generate_reading_days(periods: Iterable[ReadingPeriod]) -> Set[str]:
    """
    Expand periods into the union of the days they cover.

    Overlapping periods count each shared day once.

    Returns:
        Set of ISO ``YYYY-MM-DD`` keys
    """
    days: Set[str] = set()
    for period in periods:
        days.update(DataValidator.format_date(day) for day in period.days())
    return days


def validate_reading_periods(
    periods: Iterable[ReadingPeriod],
    clock: Optional[Clock] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Tuple[List[ReadingPeriod], List[Dict[str, Any]]]:
    """
    Flag periods that are valid but worth a second look.

    Every period stays in the valid list; warnings are informational.

    Args:
        periods: Periods to inspect
        clock: Time source for the future-date check
        config: Thresholds (max_reasonable_period_days)

    Returns:
        Tuple of (valid periods, warnings as {"period", "message"} dicts)
    """
    today = resolve_clock(clock).today()
    valid: List[ReadingPeriod] = []
    warnings: List[Dict[str, Any]] = []

    for period in periods:
        if period.total_days > config.max_reasonable_period_days:
            warnings.append({
                "period": period,
                "message": (
                    f"Very long reading period ({period.total_days} days). "
                    "Consider checking dates."
                ),
            })
        if period.total_days == 1:
            warnings.append({
                "period": period,
                "message": "Book completed in one day. This is fine but unusual.",
            })
        if period.end_date > today:
            warnings.append({
                "period": period,
                "message": f"End date is in the future ({period.end_date.isoformat()}).",
            })
        valid.append(period)

    return valid, warnings


def get_reading_period_stats(periods: List[ReadingPeriod]) -> Dict[str, Any]:
    """
    Summarize a list of periods.

    Returns:
        Dictionary with total_books, total_days (sum of per-period lengths),
        unique_days (union size), average_days_per_book (rounded) and
        overlapping_periods (number of overlapping pairs)
    """
    total_days = sum(period.total_days for period in periods)

    overlapping = 0
    for i, first in enumerate(periods):
        for second in periods[i + 1:]:
            if first.overlaps(second):
                overlapping += 1

    return {
        "total_books": len(periods),
        "total_days": total_days,
        "unique_days": len(generate_reading_days(periods)),
        "average_days_per_book": round(total_days / len(periods)) if periods else 0,
        "overlapping_periods": overlapping,
    }
