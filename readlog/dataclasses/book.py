#!/usr/bin/env python3
"""
book.py
-------------------

Defines the Book dataclass: the read-only view of a book record that the
Book Repository hands to the engine.

Only the fields the engine consumes are modelled (identity, status,
progress and the four lifecycle timestamps). Timestamps are kept as they
arrive; a value that fails to parse is not rejected here because the
period extractor is responsible for silently dropping bad intervals.
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# ---- Local imports ----
from readlog.core.exceptions import ValidationError
from readlog.core.validators import DataValidator


Timestamp = Union[datetime, date, str, None]


class BookStatus(str, Enum):
    """
    Enumeration of book reading states.
    - WANT_TO_READ: On the shelf, not started
    - CURRENTLY_READING: In progress
    - FINISHED: Marked as completed
    """

    WANT_TO_READ = "want_to_read"
    CURRENTLY_READING = "currently_reading"
    FINISHED = "finished"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available status choices."""
        return [status.value for status in cls]


@dataclass
class Book:
    """
    A book record as seen by the reconciliation engine.

    Attributes:
        id: Unique book identifier
        title: Book title
        author: Book author
        status: Reading state
        progress: Completion percentage (0-100)
        date_added: When the book was added to the library
        date_started: When reading started
        date_finished: When reading finished
        date_modified: Last time the record (usually progress) was edited
        total_pages: Optional page count
        current_page: Optional current page
    """

    id: int
    title: str = ""
    author: str = ""
    status: BookStatus = BookStatus.WANT_TO_READ
    progress: int = 0
    date_added: Timestamp = None
    date_started: Timestamp = None
    date_finished: Timestamp = None
    date_modified: Timestamp = None
    total_pages: Optional[int] = None
    current_page: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, BookStatus):
            try:
                self.status = BookStatus(self.status)
            except ValueError:
                raise ValidationError(
                    f"Invalid status {self.status!r} for book {self.id}. "
                    f"Expected one of: {', '.join(BookStatus.choices())}"
                )

    @property
    def is_finished(self) -> bool:
        return self.status is BookStatus.FINISHED

    @property
    def is_currently_reading(self) -> bool:
        return self.status is BookStatus.CURRENTLY_READING

    @property
    def started_on(self) -> Optional[date]:
        return DataValidator.normalize_date(self.date_started)

    @property
    def finished_on(self) -> Optional[date]:
        return DataValidator.normalize_date(self.date_finished)

    @property
    def modified_at(self) -> Optional[datetime]:
        return DataValidator.normalize_datetime(self.date_modified)

    @property
    def added_on(self) -> Optional[date]:
        return DataValidator.normalize_date(self.date_added)

    # ---- Serialization ----
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Book":
        """
        Build a Book from a plain mapping (YAML import, database row dict).

        Args:
            data: Mapping with at least an ``id`` key

        Returns:
            Book instance

        Raises:
            ValidationError: If the id is missing or the status is unknown
        """
        DataValidator.validate_required_fields(data, ["id"])
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            author=str(data.get("author") or ""),
            status=data.get("status") or BookStatus.WANT_TO_READ,
            progress=int(data.get("progress") or 0),
            date_added=data.get("date_added"),
            date_started=data.get("date_started"),
            date_finished=data.get("date_finished"),
            date_modified=data.get("date_modified"),
            total_pages=data.get("total_pages"),
            current_page=data.get("current_page"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain mapping."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "status": self.status.value,
            "progress": self.progress,
            "date_added": self.date_added,
            "date_started": self.date_started,
            "date_finished": self.date_finished,
            "date_modified": self.date_modified,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
        }
