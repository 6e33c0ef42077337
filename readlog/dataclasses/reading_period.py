#!/usr/bin/env python3
"""
reading_period.py
-------------------

Defines ReadingPeriod: a closed date interval during which one book was
being read, derived from the book's start and finish timestamps.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterator, Optional

from readlog.core.exceptions import SerializationError
from readlog.core.validators import DataValidator, iter_days


@dataclass(frozen=True)
class ReadingPeriod:
    """
    Inclusive reading interval for one book.

    Attributes:
        book_id: Book the period belongs to
        title: Book title at extraction time
        author: Book author at extraction time
        start_date: First reading day
        end_date: Last reading day (inclusive)
        total_days: Inclusive day count, 1 when start == end
    """

    book_id: int
    title: str
    author: str
    start_date: date
    end_date: date
    total_days: int

    @classmethod
    def between(
        cls, book_id: int, start: date, end: date, title: str = "", author: str = ""
    ) -> "ReadingPeriod":
        """Build a period, computing the inclusive day count."""
        return cls(
            book_id=book_id,
            title=title,
            author=author,
            start_date=start,
            end_date=end,
            total_days=(end - start).days + 1,
        )

    def days(self) -> Iterator[date]:
        return iter_days(self.start_date, self.end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, other: "ReadingPeriod") -> bool:
        return self.start_date <= other.end_date and other.start_date <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "book_id": self.book_id,
            "title": self.title,
            "author": self.author,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["ReadingPeriod"]:
        """
        Rebuild a stored period.

        Returns:
            The period, or None when its dates are unparseable or reversed

        Raises:
            SerializationError: If the value is not a mapping
        """
        if not isinstance(data, dict):
            raise SerializationError(f"Reading period must be a mapping: {data!r}")
        start = DataValidator.normalize_date(data.get("start_date"))
        end = DataValidator.normalize_date(data.get("end_date"))
        if start is None or end is None or start > end:
            return None
        return cls.between(
            book_id=data.get("book_id"),
            start=start,
            end=end,
            title=data.get("title") or "",
            author=data.get("author") or "",
        )
