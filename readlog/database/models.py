"""
Database Models
---------------

SQLAlchemy ORM models for the readlog database.

Models:
    - BookRecord: Book repository rows
    - StreakHistoryRecord: Stored streak records (legacy and enhanced)

Book timestamps are stored as the ISO text they were imported with.
Malformed values are kept so the period extractor can drop them at merge
time, the same as for books handed to the engine directly.

Streak records are stored as YAML payloads, one row per kind.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from readlog.dataclasses.book import Book, BookStatus


# --- Base ORM class ---
class Base(DeclarativeBase):
    """Declarative base for all readlog models."""

    pass


def _timestamp_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


# ----- Books -----
class BookRecord(Base):
    """
    A book as stored by the Book Repository.

    Attributes:
        id: Book identifier (primary key, assigned by the importer)
        title: Book title
        author: Book author
        status: One of BookStatus values
        progress: Completion percentage
        total_pages: Optional page count
        current_page: Optional current page
        date_added: ISO text
        date_started: ISO text
        date_finished: ISO text
        date_modified: ISO text
    """

    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint(
            "status IN ('want_to_read', 'currently_reading', 'finished')",
            name="ck_book_status",
        ),
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_book_progress"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    author: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=BookStatus.WANT_TO_READ.value, index=True
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_pages: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_page: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    date_added: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    date_started: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    date_finished: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    date_modified: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    def to_book(self) -> Book:
        """Convert the row into the engine's Book view."""
        return Book(
            id=self.id,
            title=self.title,
            author=self.author,
            status=self.status,
            progress=self.progress,
            date_added=self.date_added,
            date_started=self.date_started,
            date_finished=self.date_finished,
            date_modified=self.date_modified,
            total_pages=self.total_pages,
            current_page=self.current_page,
        )

    def apply(self, book: Book) -> None:
        """Copy every field of a Book onto this row."""
        self.title = book.title
        self.author = book.author
        self.status = book.status.value
        self.progress = book.progress
        self.total_pages = book.total_pages
        self.current_page = book.current_page
        self.date_added = _timestamp_text(book.date_added)
        self.date_started = _timestamp_text(book.date_started)
        self.date_finished = _timestamp_text(book.date_finished)
        self.date_modified = _timestamp_text(book.date_modified)

    def __repr__(self) -> str:
        return f"<BookRecord(id={self.id}, title={self.title!r}, status={self.status})>"


# ----- Streak records -----
class StreakHistoryRecord(Base):
    """
    A stored streak record.

    Attributes:
        id: Primary key
        kind: 'legacy' or 'enhanced' (one row each)
        version: Schema version of the payload, if any
        payload: YAML serialization of the record
        updated_at: When the row was last written
    """

    __tablename__ = "streak_histories"
    __table_args__ = (
        CheckConstraint("kind IN ('legacy', 'enhanced')", name="ck_history_kind"),
    )

    LEGACY = "legacy"
    ENHANCED = "enhanced"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    kind: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    version: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<StreakHistoryRecord(kind={self.kind}, version={self.version})>"
