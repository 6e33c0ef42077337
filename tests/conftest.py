"""
conftest.py
-----------
Shared pytest fixtures for readlog tests.

Provides fixtures for:
- A clock pinned to 2024-03-10 12:00 (a Sunday)
- Book factories
- Sample legacy and enhanced streak records
- Database setup and teardown
"""
import pytest
from datetime import datetime
from pathlib import Path
from tempfile import TemporaryDirectory

from readlog.core.clock import FixedClock
from readlog.dataclasses.book import Book, BookStatus
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind
from readlog.dataclasses.streak_history import EnhancedStreakHistory, LegacyStreakHistory


NOW = datetime(2024, 3, 10, 12, 0)


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Clock -----

@pytest.fixture
def now():
    """The pinned current moment."""
    return NOW


@pytest.fixture
def clock():
    """Clock frozen at 2024-03-10 12:00."""
    return FixedClock(NOW)


# ----- Factories -----

@pytest.fixture
def make_book():
    """Factory for Book records with sensible defaults."""

    def _make(book_id=1, status=BookStatus.FINISHED, start=None, finish=None,
              modified=None, progress=0, title=None, **kwargs):
        return Book(
            id=book_id,
            title=title or f"Book {book_id}",
            author=kwargs.pop("author", "Author"),
            status=status,
            progress=progress,
            date_started=start,
            date_finished=finish,
            date_modified=modified,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_entry():
    """Factory for ReadingDayEntry with one source per given kind."""

    def _make(day, *kinds, book_ids=None, notes=None, timestamp=NOW,
              created_at=None, modified_at=None):
        kinds = kinds or (SourceKind.MANUAL,)
        return ReadingDayEntry(
            date=day,
            sources=[ReadingDataSource(kind=SourceKind(k), timestamp=timestamp) for k in kinds],
            book_ids=list(book_ids or []),
            notes=notes,
            created_at=created_at,
            modified_at=modified_at,
        )

    return _make


@pytest.fixture
def legacy_history():
    """Legacy record with three manual days."""
    return LegacyStreakHistory(
        reading_days={"2024-03-01", "2024-03-02", "2024-03-05"},
        book_periods=[],
        last_calculated=datetime(2024, 3, 5, 20, 0),
    )


@pytest.fixture
def healthy_history(make_entry):
    """Consistent enhanced journal with two days."""
    stamp = datetime(2024, 3, 1, 9, 0)
    entries = [
        make_entry("2024-03-08", "manual", created_at=stamp, modified_at=stamp),
        make_entry("2024-03-09", "book_completion", book_ids=[1],
                   created_at=stamp, modified_at=stamp),
    ]
    return EnhancedStreakHistory(
        reading_days={"2024-03-08", "2024-03-09"},
        reading_day_entries=entries,
        book_periods=[],
        last_calculated=stamp,
        last_sync_date=stamp,
        version=1,
    )


# ----- Database -----

@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


@pytest.fixture
def test_db(test_db_path):
    """
    Create test database instance with schema.

    Database is torn down after the test.
    """
    from readlog.database.manager import ReadlogDB

    db = ReadlogDB(db_path=test_db_path)
    yield db
    db.dispose()
