#!/usr/bin/env python3
"""
bulk.py
-------------------

Batched and streaming operations for large journals.

Nothing here runs concurrently: chunking bounds how much is held in
memory at once and how often integrity checks run.

Functions:
    iter_chunks: Split any iterable into lists of at most chunk_size
    merge_reading_data_batched: merge_reading_data, books a chunk at a time
    bulk_update_reading_day_entries: Apply add/update/remove operations
        all-or-nothing
    stream_entries: Lazy, date-ordered, filtered walk over a day map
    process_in_chunks: Apply a function to date-ordered chunks of entries
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
    Union,
)

# ---- Local imports ----
from readlog.configs.engine_configs import DEFAULT_CONFIG, EngineConfig
from readlog.core.cli import BulkStats
from readlog.core.clock import Clock, resolve_clock
from readlog.core.exceptions import BulkOperationError, InvalidRangeError, ValidationError
from readlog.core.logging_manager import ReadlogLogger, safe_logger
from readlog.core.validators import DataValidator
from readlog.dataclasses.book import Book
from readlog.dataclasses.reading_day import ReadingDayEntry, ReadingDayMap
from readlog.dataclasses.streak_history import EnhancedStreakHistory, StreakHistory
from readlog.validators.integrity import IntegrityValidator
from .conflicts import resolve_conflicts
from .journal import change_entry, create_empty_enhanced_streak_history, overwrite_entry
from .merger import book_candidates, history_candidates, iter_day_keys


T = TypeVar("T")
R = TypeVar("R")


def iter_chunks(items: Iterable[T], chunk_size: int) -> Iterator[List[T]]:
    """
    Yield consecutive lists of at most chunk_size items.

    Raises:
        ValidationError: If chunk_size is smaller than 1
    """
    if chunk_size < 1:
        raise ValidationError(f"chunk_size must be at least 1, got {chunk_size}")
    chunk: List[T] = []
    for item in items:
        chunk.append(item)
        if len(chunk) == chunk_size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


# ----- Batched merge -----
def _fold(day_map: ReadingDayMap, entries: Iterable[ReadingDayEntry]) -> None:
    pending: Dict[str, List[ReadingDayEntry]] = defaultdict(list)
    for entry in entries:
        pending[entry.date].append(entry)
    for day, candidates in pending.items():
        if day in day_map:
            candidates.insert(0, day_map[day])
        day_map[day] = resolve_conflicts(candidates)


def merge_reading_data_batched(
    history: Optional[StreakHistory],
    books: Iterable[Book],
    chunk_size: Optional[int] = None,
    clock: Optional[Clock] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    logger: Optional[ReadlogLogger] = None,
) -> ReadingDayMap:
    """
    Same result as merge_reading_data, folding books in chunk by chunk.

    Each chunk's candidates are resolved into the running map before the
    next chunk is read, so only one chunk of candidates is held at a time.
    """
    log = safe_logger(logger)
    clock = resolve_clock(clock)
    size = chunk_size or config.chunk_size

    day_map: ReadingDayMap = {}
    _fold(day_map, history_candidates(history, clock))

    chunks = 0
    for chunk in iter_chunks(books, size):
        chunks += 1
        _fold(
            day_map,
            (entry for book in chunk for entry in book_candidates(book, clock, config)),
        )

    log.log_debug("merge_reading_data_batched", {"chunks": chunks, "days": len(day_map)})
    return {day: day_map[day] for day in sorted(day_map)}


# ----- Bulk journal updates -----
class BulkOperationKind(str, Enum):
    """Kinds of single-day journal changes."""

    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"

    @classmethod
    def choices(cls) -> List[str]:
        return [kind.value for kind in cls]


@dataclass(frozen=True)
class BulkOperation:
    """
    One journal change in a bulk request.

    Attributes:
        kind: add, update or remove
        date: ISO date the change applies to
        entry: Entry to add (add only)
        updates: Field changes (update only)
    """

    kind: str
    date: str
    entry: Optional[ReadingDayEntry] = None
    updates: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkOperation":
        entry = data.get("entry")
        if isinstance(entry, dict):
            entry = ReadingDayEntry.from_dict({"date": data.get("date"), **entry})
        return cls(
            kind=data.get("kind", data.get("type")),
            date=data.get("date"),
            entry=entry,
            updates=data.get("updates"),
        )


class _WorkingJournal:
    """
    Mutable date -> entry view of a journal used while a bulk request runs.

    Entries keep their journal order; a removal makes the index follow the
    entries from then on, as remove_reading_day_entry does.
    """

    def __init__(self, history: EnhancedStreakHistory):
        self.base = history
        entries = history.reading_day_entries
        self.entries: Dict[str, ReadingDayEntry] = {
            entry.date: entry for entry in (entries if isinstance(entries, list) else [])
        }
        self.days: Set[str] = set(iter_day_keys(history.reading_days))
        self.index_follows_entries = False

    def apply(self, operation: BulkOperation, stats: BulkStats, now: datetime) -> None:
        try:
            kind = BulkOperationKind(operation.kind)
        except ValueError:
            raise BulkOperationError(f"Unknown bulk operation type: {operation.kind!r}")

        if kind is BulkOperationKind.ADD:
            if operation.entry is None:
                raise BulkOperationError(f"Add operation for {operation.date} missing entry data")
            entry = replace(operation.entry, date=operation.date)
            self.entries[operation.date] = overwrite_entry(self.entries.get(operation.date), entry, now)
            stats.entries_added += 1
            return

        if kind is BulkOperationKind.UPDATE:
            if not operation.updates:
                raise BulkOperationError(f"Update operation for {operation.date} missing update data")
            existing = self.entries.get(operation.date)
            if existing is None:
                raise BulkOperationError(f"Reading day entry for {operation.date} not found")
            self.entries[operation.date] = change_entry(existing, operation.updates, now)
            stats.entries_updated += 1
            return

        self.entries.pop(operation.date, None)
        self.index_follows_entries = True
        stats.entries_removed += 1

    def snapshot(self, now: datetime) -> EnhancedStreakHistory:
        """Rebuild the journal with reading_days synchronized to the entries."""
        if self.index_follows_entries:
            self.days = set(self.entries)
        else:
            self.days.update(self.entries)
        return replace(
            self.base,
            reading_day_entries=list(self.entries.values()),
            reading_days=set(self.days),
            last_sync_date=now,
        )


def _check(
    history: EnhancedStreakHistory, validator: IntegrityValidator, stats: BulkStats
) -> None:
    stats.validations += 1
    report = validator.validate(history)
    if not report.is_valid:
        raise BulkOperationError(
            "Bulk operation resulted in invalid data: "
            + ", ".join(issue.message for issue in report.errors)
        )


def bulk_update_reading_day_entries(
    history: Optional[EnhancedStreakHistory],
    operations: Sequence[Union[BulkOperation, Dict[str, Any]]],
    chunk_size: Optional[int] = None,
    skip_validation: bool = False,
    clock: Optional[Clock] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    logger: Optional[ReadlogLogger] = None,
) -> Tuple[EnhancedStreakHistory, BulkStats]:
    """
    Apply many single-day changes as one all-or-nothing batch.

    Operations run in order, chunk_size at a time, against a keyed working
    copy of the entries; the journal is rebuilt once per chunk. After each
    chunk the rebuilt journal is re-validated unless skip_validation is set;
    the final result is always validated. The input journal is never
    mutated, so a failure leaves the caller with the journal exactly as it
    was.

    Args:
        history: Journal to update; None starts from an empty journal
        operations: BulkOperation objects or their mapping form
        chunk_size: Operations per chunk (defaults to config.chunk_size)
        skip_validation: Skip the between-chunk integrity checks
        clock: Time source for modification stamps
        config: Engine thresholds
        logger: Optional ReadlogLogger

    Returns:
        Tuple of (updated journal, BulkStats)

    Raises:
        BulkOperationError: On missing data, unknown kind, unknown date for
            an update, or a failed integrity check
    """
    log = safe_logger(logger)
    clock = resolve_clock(clock)
    size = chunk_size or config.chunk_size
    validator = IntegrityValidator(config=config, clock=clock)
    stats = BulkStats()

    start = history if history is not None else create_empty_enhanced_streak_history(clock)
    parsed = [op if isinstance(op, BulkOperation) else BulkOperation.from_dict(op) for op in operations]
    working = _WorkingJournal(start)

    try:
        for chunk in iter_chunks(parsed, size):
            for operation in chunk:
                working.apply(operation, stats, clock.now())
                stats.items_processed += 1
            stats.chunks += 1
            if not skip_validation:
                _check(working.snapshot(clock.now()), validator, stats)

        result = working.snapshot(clock.now())
        _check(result, validator, stats)
    except BulkOperationError as e:
        stats.errors += 1
        log.log_error(e, {"operation": "bulk_update_reading_day_entries", **stats.to_dict()})
        raise
    except ValidationError as e:
        stats.errors += 1
        log.log_error(e, {"operation": "bulk_update_reading_day_entries", **stats.to_dict()})
        raise BulkOperationError(f"Bulk operation failed: {e}") from e

    log.log_operation("bulk_update_reading_day_entries", stats.to_dict())
    return result, stats


# ----- Streaming -----
def stream_entries(
    day_map: ReadingDayMap,
    start: Union[str, date, None] = None,
    end: Union[str, date, None] = None,
    predicate: Optional[Callable[[ReadingDayEntry], bool]] = None,
) -> Iterator[ReadingDayEntry]:
    """
    Lazily yield entries in date order, optionally bounded and filtered.

    Raises:
        InvalidDateFormatError: If a bound is not a canonical date
        InvalidRangeError: If start is after end
    """
    lower = _bound(start)
    upper = _bound(end)
    if lower and upper and lower > upper:
        raise InvalidRangeError(f"Start date must be before or equal to end date ({lower} > {upper})")

    for key in sorted(day_map):
        if lower and key < lower:
            continue
        if upper and key > upper:
            break
        entry = day_map[key]
        if predicate is None or predicate(entry):
            yield entry


def _bound(value: Union[str, date, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return DataValidator.format_date(DataValidator.normalize_date(value))
    return DataValidator.parse_iso_date(value).isoformat()


def process_in_chunks(
    day_map: ReadingDayMap,
    fn: Callable[[List[ReadingDayEntry]], R],
    chunk_size: int = DEFAULT_CONFIG.chunk_size,
) -> Iterator[R]:
    """Yield fn(chunk) for each date-ordered chunk of entries."""
    for chunk in iter_chunks(stream_entries(day_map), chunk_size):
        yield fn(chunk)
