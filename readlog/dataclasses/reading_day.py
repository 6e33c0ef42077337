#!/usr/bin/env python3
"""
reading_day.py
-------------------

Defines the per-day journal records:

- SourceKind: closed set of signal types, ordered by priority
- ReadingDataSource: one immutable, timestamped signal for a day
- ReadingDayEntry: the canonical record for one calendar day
- ReadingDayMap: date key -> ReadingDayEntry

Entries loaded from a stored journal may carry malformed values (bad
timestamps, missing sources). Deserialization keeps such values as-is so
the integrity validator can report them instead of failing on load.
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

# ---- Local imports ----
from readlog.core.exceptions import SerializationError
from readlog.core.validators import DataValidator


class SourceKind(str, Enum):
    """
    Enumeration of reading activity signals.
    - MANUAL: User check-in ("I read today"), highest priority
    - BOOK_COMPLETION: Day inside a finished book's start/finish period
    - PROGRESS_UPDATE: Recent progress edit on an in-progress book
    """

    MANUAL = "manual"
    BOOK_COMPLETION = "book_completion"
    PROGRESS_UPDATE = "progress_update"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available source kinds."""
        return [kind.value for kind in cls]

    @classmethod
    def from_value(cls, value: Any) -> "SourceKind":
        """
        Parse a kind, accepting the short names used by older journals.

        Raises:
            SerializationError: If the value names no known kind
        """
        if isinstance(value, cls):
            return value
        aliases = {"book": cls.BOOK_COMPLETION, "progress": cls.PROGRESS_UPDATE}
        if value in aliases:
            return aliases[value]
        try:
            return cls(value)
        except ValueError:
            raise SerializationError(f"Unknown reading source kind: {value!r}")

    @property
    def priority(self) -> int:
        """Conflict resolution rank; higher wins."""
        return _PRIORITY[self]


_PRIORITY = {
    SourceKind.MANUAL: 3,
    SourceKind.BOOK_COMPLETION: 2,
    SourceKind.PROGRESS_UPDATE: 1,
}


def _day_key(value: Any) -> Any:
    """Turn date objects (as YAML loads unquoted dates) into ISO keys; keep anything else."""
    if isinstance(value, (date, datetime)):
        return DataValidator.format_date(DataValidator.normalize_date(value))
    return value


def _coerce_timestamp(value: Any) -> Any:
    """Parse a stored timestamp, keeping the raw value when it cannot be parsed."""
    if value is None:
        return None
    parsed = DataValidator.normalize_datetime(value)
    return parsed if parsed is not None else value


def _dump_timestamp(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


@dataclass(frozen=True)
class ReadingDataSource:
    """
    One contributing signal for a reading day.

    Attributes:
        kind: Signal type
        timestamp: When the signal was recorded
        book_id: Book the signal refers to, if any
        metadata: Free-form hints (progress, pages, confidence)
    """

    kind: SourceKind
    timestamp: datetime
    book_id: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def priority(self) -> int:
        return self.kind.priority

    @property
    def confidence(self) -> float:
        """Confidence hint from metadata, clamped to [0, 1]; 1.0 when absent."""
        raw = self.metadata.get("confidence", 1.0) if self.metadata else 1.0
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return 1.0
        return max(0.0, min(1.0, value))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "timestamp": _dump_timestamp(self.timestamp),
        }
        if self.book_id is not None:
            data["book_id"] = self.book_id
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReadingDataSource":
        if not isinstance(data, dict):
            raise SerializationError(f"Reading source must be a mapping, got {type(data).__name__}")
        return cls(
            kind=SourceKind.from_value(data.get("kind", data.get("type"))),
            timestamp=_coerce_timestamp(data.get("timestamp")),
            book_id=data.get("book_id"),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class ReadingDayEntry:
    """
    Canonical record for one calendar day.

    Attributes:
        date: ISO ``YYYY-MM-DD`` key
        sources: Contributing signals, highest priority first
        book_ids: Books touched that day, without duplicates
        notes: Merged free-form notes
        created_at: When the entry was first persisted
        modified_at: When the entry was last changed
    """

    date: str
    sources: List[ReadingDataSource] = field(default_factory=list)
    book_ids: List[int] = field(default_factory=list)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @property
    def primary_source(self) -> Optional[ReadingDataSource]:
        return self.sources[0] if self.sources else None

    @property
    def source_kinds(self) -> List[SourceKind]:
        """Distinct source kinds in priority order."""
        seen: List[SourceKind] = []
        for source in self.sources:
            if source.kind not in seen:
                seen.append(source.kind)
        return seen

    def has_source(self, kind: SourceKind) -> bool:
        return any(source.kind is kind for source in self.sources)

    # ---- Serialization ----
    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "date": self.date,
            "sources": [source.to_dict() for source in self.sources],
            "book_ids": list(self.book_ids),
        }
        if self.notes:
            data["notes"] = self.notes
        if self.created_at is not None:
            data["created_at"] = _dump_timestamp(self.created_at)
        if self.modified_at is not None:
            data["modified_at"] = _dump_timestamp(self.modified_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReadingDayEntry":
        """
        Build an entry from a stored mapping.

        Accepts both the current ``sources`` list and the single ``source``
        string written by older journals.

        Raises:
            SerializationError: If the mapping has no date or an unknown source kind
        """
        if not isinstance(data, dict) or "date" not in data:
            raise SerializationError(f"Reading day entry must be a mapping with a date: {data!r}")

        created_at = _coerce_timestamp(data.get("created_at"))
        modified_at = _coerce_timestamp(data.get("modified_at"))

        if "sources" in data:
            sources = [ReadingDataSource.from_dict(s) for s in data.get("sources") or []]
        elif "source" in data:
            sources = [ReadingDataSource(
                kind=SourceKind.from_value(data["source"]),
                timestamp=created_at,
            )]
        else:
            sources = []

        return cls(
            date=_day_key(data["date"]),
            sources=sources,
            book_ids=list(data.get("book_ids") or []),
            notes=data.get("notes"),
            created_at=created_at,
            modified_at=modified_at,
        )


ReadingDayMap = Dict[str, ReadingDayEntry]
