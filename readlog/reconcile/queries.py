#!/usr/bin/env python3
"""
queries.py
-------------------

Range, aggregation and statistics queries over a ReadingDayMap.

Every function here is read-only: the map passed in is never mutated.

Functions:
    get_reading_days_in_range: Inclusive date slice, sorted ascending
    aggregate_by_period: Daily / monthly / yearly buckets
    find_reading_patterns: Weekday histogram, habits and streak analysis
    get_reading_statistics: Counts, per-source breakdown, date bounds
    get_extended_reading_statistics: Adds frequency, consistency, peaks
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from collections import Counter
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

# ---- Local imports ----
from readlog.core.clock import Clock
from readlog.core.exceptions import InvalidRangeError, ValidationError
from readlog.core.validators import DataValidator
from readlog.dataclasses.reading_day import ReadingDayEntry, ReadingDayMap, SourceKind
from .streaks import calculate_streaks_from_days


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class Granularity(str, Enum):
    """Bucket sizes for aggregate_by_period."""

    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def choices(cls) -> List[str]:
        return [g.value for g in cls]

    def bucket(self, day_key: str) -> str:
        """Bucket key for a canonical date key."""
        if self is Granularity.MONTHLY:
            return day_key[:7]
        if self is Granularity.YEARLY:
            return day_key[:4]
        return day_key


def _parse_bound(value: Union[str, date]) -> date:
    if isinstance(value, date):
        # datetime is a date subclass; its time part is dropped
        return DataValidator.normalize_date(value)
    return DataValidator.parse_iso_date(value)


def _valid_days(day_map: ReadingDayMap) -> List[date]:
    return sorted(
        date.fromisoformat(key) for key in day_map if DataValidator.is_iso_date(key)
    )


# ----- Range -----
def get_reading_days_in_range(
    start: Union[str, date], end: Union[str, date], day_map: ReadingDayMap
) -> List[ReadingDayEntry]:
    """
    Entries whose date falls between start and end, both inclusive.

    Args:
        start: First day, ``YYYY-MM-DD``
        end: Last day, ``YYYY-MM-DD``
        day_map: Reading day map

    Returns:
        Entries sorted ascending by date; empty when nothing matches

    Raises:
        InvalidDateFormatError: If a bound is not a canonical date
        InvalidRangeError: If start is after end
    """
    first = _parse_bound(start)
    last = _parse_bound(end)
    if first > last:
        raise InvalidRangeError(
            f"Start date must be before or equal to end date ({first} > {last})"
        )

    lower, upper = first.isoformat(), last.isoformat()
    keys = sorted(
        key for key in day_map if DataValidator.is_iso_date(key) and lower <= key <= upper
    )
    return [day_map[key] for key in keys]


# ----- Aggregation -----
def aggregate_by_period(
    day_map: ReadingDayMap, granularity: Union[Granularity, str] = Granularity.DAILY
) -> Dict[str, Dict[str, Any]]:
    """
    Bucket reading days by day, month (``YYYY-MM``) or year (``YYYY``).

    Books are unioned within a bucket, so a book read on several days of
    the same month counts once for that month.

    Returns:
        Mapping of bucket key -> {"reading_days": int, "books": set of ids},
        sorted by bucket key

    Raises:
        ValidationError: If the granularity is unknown
    """
    try:
        granularity = Granularity(granularity)
    except ValueError:
        raise ValidationError(
            f"Unknown granularity {granularity!r}. "
            f"Expected one of: {', '.join(Granularity.choices())}"
        )

    buckets: Dict[str, Dict[str, Any]] = {}
    for key in sorted(day_map):
        if not DataValidator.is_iso_date(key):
            continue
        bucket = buckets.setdefault(
            granularity.bucket(key), {"reading_days": 0, "books": set()}
        )
        bucket["reading_days"] += 1
        bucket["books"].update(day_map[key].book_ids)
    return buckets


# ----- Patterns -----
def _runs(days: List[date]) -> List[int]:
    """Lengths of consecutive-day runs in a sorted list of distinct days."""
    runs: List[int] = []
    for i, day in enumerate(days):
        if i and (day - days[i - 1]).days == 1:
            runs[-1] += 1
        else:
            runs.append(1)
    return runs


def find_reading_patterns(day_map: ReadingDayMap, clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Describe when the reader tends to read.

    Returns:
        Dictionary with:
            weekday_pattern: reading-day count per weekday, Monday..Sunday
            reading_habits: preferred_reading_days, weekend_ratio,
                average_books_per_day
            streak_analysis: current/longest streak, number of streaks and
                average streak length
    """
    days = _valid_days(day_map)

    weekday_pattern = {name: 0 for name in WEEKDAYS}
    for day in days:
        weekday_pattern[WEEKDAYS[day.weekday()]] += 1

    peak = max(weekday_pattern.values())
    preferred = [name for name, count in weekday_pattern.items() if peak and count == peak]
    weekend = weekday_pattern["Saturday"] + weekday_pattern["Sunday"]
    book_counts = [len(day_map[day.isoformat()].book_ids) for day in days]

    runs = _runs(days)
    streaks = calculate_streaks_from_days(days, clock=clock)

    return {
        "weekday_pattern": weekday_pattern,
        "reading_habits": {
            "preferred_reading_days": preferred,
            "weekend_ratio": round(weekend / len(days), 3) if days else 0.0,
            "average_books_per_day": round(sum(book_counts) / len(days), 2) if days else 0.0,
        },
        "streak_analysis": {
            "current_streak": streaks.current_streak,
            "longest_streak": streaks.longest_streak,
            "total_streaks": len(runs),
            "average_streak_length": round(sum(runs) / len(runs), 1) if runs else 0.0,
        },
    }


# ----- Statistics -----
def get_reading_statistics(day_map: ReadingDayMap) -> Dict[str, Any]:
    """
    Basic statistics over a reading day map.

    The source breakdown counts days: a day with two progress updates
    counts once for progress_update.

    Returns:
        Dictionary with total_reading_days, total_books, source_breakdown
        and date_range (earliest/latest, None when empty)
    """
    source_breakdown = {kind.value: 0 for kind in SourceKind}
    books: Set[int] = set()

    for entry in day_map.values():
        books.update(entry.book_ids)
        for kind in {source.kind for source in entry.sources}:
            source_breakdown[kind.value] += 1

    keys = sorted(day_map)
    return {
        "total_reading_days": len(day_map),
        "total_books": len(books),
        "source_breakdown": source_breakdown,
        "date_range": {
            "earliest": keys[0] if keys else None,
            "latest": keys[-1] if keys else None,
        },
    }


def _months_spanned(first: date, last: date) -> int:
    return (last.year - first.year) * 12 + (last.month - first.month) + 1


def get_extended_reading_statistics(
    day_map: ReadingDayMap, clock: Optional[Clock] = None
) -> Dict[str, Any]:
    """
    Statistics including frequency, consistency and activity peaks.

    Frequencies are averaged over the span from the first to the last
    reading day. The consistency score is the share of days in that span
    that were reading days (0 to 1).

    Returns:
        get_reading_statistics output plus weekly_frequency,
        monthly_frequency, consistency_score, most_active_month,
        most_active_year and streaks
    """
    stats = get_reading_statistics(day_map)
    days = _valid_days(day_map)

    if not days:
        stats.update({
            "weekly_frequency": 0.0,
            "monthly_frequency": 0.0,
            "consistency_score": 0.0,
            "most_active_month": None,
            "most_active_year": None,
            "streaks": calculate_streaks_from_days([], clock=clock).to_dict(),
        })
        return stats

    span_days = (days[-1] - days[0]).days + 1
    months = Counter(day.strftime("%Y-%m") for day in days)
    years = Counter(str(day.year) for day in days)

    # most_common keeps first-seen order on ties, and days are sorted
    stats.update({
        "weekly_frequency": round(len(days) / (span_days / 7), 2),
        "monthly_frequency": round(len(days) / _months_spanned(days[0], days[-1]), 2),
        "consistency_score": round(len(days) / span_days, 3),
        "most_active_month": months.most_common(1)[0][0],
        "most_active_year": years.most_common(1)[0][0],
        "streaks": calculate_streaks_from_days(days, clock=clock).to_dict(),
    })
    return stats
