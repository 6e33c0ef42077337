#!/usr/bin/env python3
"""
migration.py
-------------------

Legacy migrator: upgrades stored streak records to the enhanced journal.

Migration is purely additive. Every legacy reading day becomes one
manual-sourced entry (with the books whose stored periods cover that day),
book periods are preserved, and the result is stamped with the current
schema version.

Stored blobs come in three recognised shapes:

    basic_legacy      {"reading_days": [...], "book_periods": [...], ...}
    enhanced_legacy   has "reading_day_entries" but no version/sync stamp
    enhanced_current  has "reading_day_entries", "version", "last_sync_date"
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
import logging
from dataclasses import replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

# ---- Local imports ----
from readlog.core.clock import Clock, resolve_clock
from readlog.core.exceptions import MigrationError
from readlog.dataclasses.reading_day import ReadingDataSource, ReadingDayEntry, SourceKind
from readlog.dataclasses.reading_period import ReadingPeriod
from readlog.dataclasses.streak_history import (
    CURRENT_STREAK_HISTORY_VERSION,
    EnhancedStreakHistory,
    LegacyStreakHistory,
    StreakHistory,
)
from .merger import iter_day_keys


logger = logging.getLogger(__name__)


class LegacyFormat(str, Enum):
    """Shapes a stored streak record can take."""

    BASIC_LEGACY = "basic_legacy"
    ENHANCED_LEGACY = "enhanced_legacy"
    ENHANCED_CURRENT = "enhanced_current"
    UNKNOWN = "unknown"


def find_book_ids_for_date(day: str, periods: Iterable[ReadingPeriod]) -> List[int]:
    """Ids of books whose reading period covers a date, in period order."""
    target = date.fromisoformat(day)
    book_ids: List[int] = []
    for period in periods:
        if period.contains(target) and period.book_id not in book_ids:
            book_ids.append(period.book_id)
    return book_ids


def detect_legacy_format(data: Any) -> Dict[str, Any]:
    """
    Recognise the shape of a stored streak record.

    Args:
        data: Raw mapping as loaded from storage, or a history object

    Returns:
        Dictionary with format (LegacyFormat value), version, data_points
        and issues (list of strings, non-empty only for unknown data)
    """
    if isinstance(data, (LegacyStreakHistory, EnhancedStreakHistory)):
        data = data.to_dict()

    result: Dict[str, Any] = {
        "format": LegacyFormat.UNKNOWN.value,
        "version": 0,
        "data_points": 0,
        "issues": [],
    }

    if not isinstance(data, dict):
        result["issues"].append("Invalid data: not a mapping")
        return result

    entries = data.get("reading_day_entries")
    if data.get("version") and entries is not None and data.get("last_sync_date"):
        result["format"] = LegacyFormat.ENHANCED_CURRENT.value
        result["version"] = data["version"]
        result["data_points"] = len(entries) if isinstance(entries, list) else 0
        return result

    if isinstance(entries, list):
        result["format"] = LegacyFormat.ENHANCED_LEGACY.value
        result["version"] = data.get("version") or 0
        result["data_points"] = len(entries)
        return result

    days = data.get("reading_days")
    if days is not None or "current_streak" in data:
        result["format"] = LegacyFormat.BASIC_LEGACY.value
        result["data_points"] = len(days) if isinstance(days, (list, set, tuple, dict)) else 0
        return result

    result["issues"].append("Unknown or unsupported data format")
    return result


def migrate_streak_history(
    legacy: LegacyStreakHistory, clock: Optional[Clock] = None
) -> EnhancedStreakHistory:
    """
    Convert a legacy record into an enhanced journal.

    Each legacy day becomes one manual entry; books whose stored periods
    cover the day are attached to it.

    Args:
        legacy: Legacy streak record
        clock: Time source for the sync stamps

    Returns:
        EnhancedStreakHistory at the current version
    """
    now = resolve_clock(clock).now()
    recorded_at = legacy.last_calculated if isinstance(legacy.last_calculated, datetime) else now
    periods = list(legacy.book_periods)

    days = sorted(set(iter_day_keys(legacy.reading_days)))
    entries = [
        ReadingDayEntry(
            date=day,
            sources=[ReadingDataSource(kind=SourceKind.MANUAL, timestamp=recorded_at)],
            book_ids=find_book_ids_for_date(day, periods),
            created_at=now,
            modified_at=now,
        )
        for day in days
    ]

    logger.debug("Migrated %d legacy reading days", len(entries))
    return EnhancedStreakHistory(
        reading_days=set(days),
        reading_day_entries=entries,
        book_periods=periods,
        last_calculated=now,
        last_sync_date=now,
        version=CURRENT_STREAK_HISTORY_VERSION,
    )


def is_enhanced_streak_history(history: StreakHistory) -> bool:
    return isinstance(history, EnhancedStreakHistory)


def upgrade_streak_history_version(
    history: EnhancedStreakHistory, clock: Optional[Clock] = None
) -> EnhancedStreakHistory:
    """
    Bring an enhanced journal to the current schema version.

    Raises:
        MigrationError: If the journal is newer than this engine supports
    """
    version = history.version or 0
    if version > CURRENT_STREAK_HISTORY_VERSION:
        raise MigrationError(
            f"History version {version} is newer than supported version "
            f"{CURRENT_STREAK_HISTORY_VERSION}"
        )
    return replace(
        history,
        version=CURRENT_STREAK_HISTORY_VERSION,
        last_sync_date=resolve_clock(clock).now(),
    )


def ensure_enhanced_streak_history(
    history: StreakHistory, clock: Optional[Clock] = None
) -> EnhancedStreakHistory:
    """Migrate a legacy record, or upgrade an enhanced one if it is behind."""
    if not is_enhanced_streak_history(history):
        return migrate_streak_history(history, clock)
    if history.version is not None and history.version == CURRENT_STREAK_HISTORY_VERSION:
        return history
    return upgrade_streak_history_version(history, clock)


def migrate_legacy_data(data: Any, clock: Optional[Clock] = None) -> EnhancedStreakHistory:
    """
    Turn any recognised stored record into a current enhanced journal.

    Raises:
        MigrationError: If the data format is not recognised
    """
    detection = detect_legacy_format(data)
    kind = LegacyFormat(detection["format"])

    if kind is LegacyFormat.UNKNOWN:
        raise MigrationError(f"Cannot migrate unknown data format: {'; '.join(detection['issues'])}")

    if isinstance(data, (LegacyStreakHistory, EnhancedStreakHistory)):
        return ensure_enhanced_streak_history(data, clock)

    if kind is LegacyFormat.BASIC_LEGACY:
        return migrate_streak_history(LegacyStreakHistory.from_dict(data), clock)

    enhanced = EnhancedStreakHistory.from_dict(data)
    upgraded = ensure_enhanced_streak_history(enhanced, clock)
    if kind is LegacyFormat.ENHANCED_LEGACY and not isinstance(enhanced.reading_days, set):
        upgraded = replace(upgraded, reading_days={e.date for e in upgraded.reading_day_entries})
    return upgraded
