#!/usr/bin/env python3
"""
validators.py
--------------------
Date validation and normalization utilities for all readlog operations.

Provides type-safe conversion of the loosely typed timestamps that arrive
from the book repository and stored journals (date objects, datetimes,
ISO strings with or without a time part) into calendar dates and
canonical ``YYYY-MM-DD`` keys.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import InvalidDateFormatError, ValidationError


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DataValidator:
    """Centralized date and field validation for engine inputs."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            if field not in data or data[field] in (None, ""):
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def is_iso_date(value: Any) -> bool:
        """
        Check that a value is a canonical ``YYYY-MM-DD`` string naming a real day.

        Args:
            value: Candidate date key

        Returns:
            True if the value is a valid canonical date key
        """
        if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
            return False
        try:
            date.fromisoformat(value)
        except ValueError:
            return False
        return True

    @staticmethod
    def parse_iso_date(value: Any) -> date:
        """
        Parse a canonical ``YYYY-MM-DD`` string.

        Args:
            value: Date string

        Returns:
            Parsed date

        Raises:
            InvalidDateFormatError: If the value is not a canonical date key
        """
        if not DataValidator.is_iso_date(value):
            raise InvalidDateFormatError(
                f"Invalid date format: {value!r}. Use YYYY-MM-DD format."
            )
        return date.fromisoformat(value)

    @staticmethod
    def normalize_datetime(value: Any) -> Optional[datetime]:
        """
        Normalize various timestamp inputs to a datetime.

        Args:
            value: datetime, date, or ISO 8601 string (``Z`` suffix allowed)

        Returns:
            Normalized datetime or None if the value cannot be parsed
        """
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        if isinstance(value, str) and value.strip():
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError:
                return None
        return None

    @staticmethod
    def normalize_date(value: Any) -> Optional[date]:
        """
        Normalize various date inputs to a calendar date.

        Args:
            value: Date string, date object, or datetime

        Returns:
            Normalized date object or None if the value cannot be parsed
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        moment = DataValidator.normalize_datetime(value)
        return moment.date() if moment else None

    @staticmethod
    def format_date(value: date) -> str:
        """Format a date as its canonical ``YYYY-MM-DD`` key."""
        return value.isoformat()


def iter_days(start: date, end: date) -> Iterator[date]:
    """
    Yield every calendar day from start to end, both inclusive.

    Args:
        start: First day
        end: Last day

    Yields:
        Consecutive dates; nothing when start > end
    """
    current = start
    one_day = timedelta(days=1)
    while current <= end:
        yield current
        current += one_day
