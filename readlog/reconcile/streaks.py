#!/usr/bin/env python3
"""
streaks.py
-------------------

Streak calculation over a set of reading days.

- longest_streak: longest run of calendar-consecutive days
- current_streak: run ending today, or yesterday when today has no
  reading yet; 0 once both are missing
- last_read_date: latest day in the set
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, Optional, Set

from readlog.core.clock import Clock, resolve_clock
from readlog.core.validators import DataValidator


@dataclass(frozen=True)
class StreakSummary:
    """Streak statistics for a set of reading days."""

    current_streak: int = 0
    longest_streak: int = 0
    last_read_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_read_date": self.last_read_date.isoformat() if self.last_read_date else None,
        }


def _normalize_days(days: Iterable[Any]) -> Set[date]:
    normalized = set()
    for value in days:
        day = DataValidator.normalize_date(value)
        if day is not None:
            normalized.add(day)
    return normalized


def longest_run(days: Iterable[date]) -> int:
    """Length of the longest run of consecutive days."""
    ordered = sorted(set(days))
    if not ordered:
        return 0
    longest = run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if (current - previous).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def current_run(days: Set[date], today: date) -> int:
    """Length of the run ending today, or yesterday if today is absent."""
    one_day = timedelta(days=1)
    if today in days:
        anchor = today
    elif today - one_day in days:
        anchor = today - one_day
    else:
        return 0

    count = 0
    while anchor in days:
        count += 1
        anchor -= one_day
    return count


def calculate_streaks_from_days(days: Iterable[Any], clock: Optional[Clock] = None) -> StreakSummary:
    """
    Compute streak statistics.

    Args:
        days: Reading days as dates or ISO keys; unparseable values are ignored
        clock: Time source anchoring the current streak

    Returns:
        StreakSummary; all zeros and no last read date for an empty input
    """
    normalized = _normalize_days(days)
    if not normalized:
        return StreakSummary()

    return StreakSummary(
        current_streak=current_run(normalized, resolve_clock(clock).today()),
        longest_streak=longest_run(normalized),
        last_read_date=max(normalized),
    )
