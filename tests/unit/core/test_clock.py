"""Tests for the clock abstraction."""
from datetime import date, datetime

from readlog.core.clock import FixedClock, SystemClock, resolve_clock


class TestFixedClock:
    """Tests for FixedClock."""

    def test_returns_pinned_moment(self):
        clock = FixedClock(datetime(2024, 3, 10, 12, 0))
        assert clock.now() == datetime(2024, 3, 10, 12, 0)
        assert clock.today() == date(2024, 3, 10)

    def test_accepts_plain_date(self):
        """A date is pinned at midnight."""
        assert FixedClock(date(2024, 1, 2)).now() == datetime(2024, 1, 2)


class TestResolveClock:
    """Tests for resolve_clock."""

    def test_none_gives_system_clock(self):
        assert isinstance(resolve_clock(None), SystemClock)

    def test_passes_clock_through(self):
        clock = FixedClock(datetime(2024, 1, 1))
        assert resolve_clock(clock) is clock
