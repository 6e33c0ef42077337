#!/usr/bin/env python3
"""
clock.py
--------------------
Time source abstraction for "now"-relative engine rules.

The progress-update window, the current-streak anchor, future/stale date
warnings and every timestamp stamped by migrations and auto-fixes read the
time through a Clock so tests can pin "now".

Usage:
    from readlog.core.clock import FixedClock

    clock = FixedClock(datetime(2024, 3, 10, 12, 0))
    summary = calculate_streaks_from_days(days, clock=clock)
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol


class Clock(Protocol):
    """Protocol for objects that can report the current moment."""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class SystemClock:
    """Clock backed by the local system time."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """
    Clock frozen at a given moment.

    Attributes:
        moment: The datetime returned by every now() call
    """

    def __init__(self, moment: datetime) -> None:
        if not isinstance(moment, datetime):
            moment = datetime(moment.year, moment.month, moment.day)
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def today(self) -> date:
        return self.moment.date()


_system_clock = SystemClock()


def resolve_clock(clock: Optional[Clock]) -> Clock:
    """Return the provided clock or the shared system clock if None."""
    return clock if clock is not None else _system_clock
