#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the readlog project.

This module defines the hierarchy of exceptions raised by the reading
activity reconciliation engine and its persistence/CLI boundary.

Exception Hierarchy:
    Exception (built-in)
    ├── ValidationError - Invalid caller input
    │   ├── InvalidDateFormatError - Date is not canonical YYYY-MM-DD
    │   └── InvalidRangeError - Range start is after range end
    ├── ConflictResolutionError - Conflict resolver failures
    │   └── EmptyInputError - Nothing to resolve
    ├── MigrationError - Legacy journal cannot be upgraded
    ├── BulkOperationError - Bulk journal update rejected
    ├── SerializationError - Journal blob cannot be encoded/decoded
    ├── ConfigError - Engine configuration cannot be loaded
    └── DatabaseError - Persistence layer failures

Only caller errors raise. Messy book data is dropped silently by the
period extractor and integrity problems are reported, not raised.

Usage:
    from readlog.core.exceptions import InvalidRangeError

    try:
        entries = get_reading_days_in_range(start, end, day_map)
    except InvalidRangeError as e:
        click.echo(f"Bad range: {e}")
"""


class ValidationError(Exception):
    """
    Exception for caller input validation failures.

    Examples:
        >>> raise ValidationError("Unknown granularity: 'weekly'")
    """

    pass


class InvalidDateFormatError(ValidationError):
    """
    Exception for dates that are not canonical ISO ``YYYY-MM-DD`` strings.

    Raised by range queries when either bound cannot be parsed.

    Examples:
        >>> raise InvalidDateFormatError("Invalid date format: '2024/01/01'")
    """

    pass


class InvalidRangeError(ValidationError):
    """
    Exception for inverted date ranges.

    Examples:
        >>> raise InvalidRangeError("Start date 2024-01-10 is after end date 2024-01-01")
    """

    pass


class ConflictResolutionError(Exception):
    """
    Base exception for conflict resolution failures.

    See Also:
        EmptyInputError
    """

    pass


class EmptyInputError(ConflictResolutionError):
    """
    Exception for conflict resolution called without any candidate entries.

    Examples:
        >>> raise EmptyInputError("Cannot resolve conflicts for an empty list")
    """

    pass


class MigrationError(Exception):
    """
    Exception for legacy journal migration failures.

    Raised when a stored record is in an unrecognised format or carries a
    schema version newer than this engine supports.
    """

    pass


class BulkOperationError(Exception):
    """
    Exception for rejected bulk journal operations.

    Raised when an operation is malformed, targets a missing day, or when
    the journal fails integrity validation after a chunk is applied. The
    input journal is never modified when this is raised.
    """

    pass


class SerializationError(Exception):
    """
    Exception for journal blob encoding/decoding failures.

    Examples:
        >>> raise SerializationError("Stored payload is not a mapping")
    """

    pass


class ConfigError(Exception):
    """
    Exception for engine configuration loading failures.

    Examples:
        >>> raise ConfigError("Unknown config keys: chunk")
    """

    pass


class DatabaseError(Exception):
    """
    Exception for persistence layer failures.

    Raised by the SQLAlchemy-backed book repository and journal store when
    queries fail or integrity constraints are violated.
    """

    pass
