#!/usr/bin/env python3
"""
reconcile
---------
The reading activity reconciliation engine.

Every function here is pure: inputs are never mutated and nothing touches
storage. Modules:
    - periods: Reading periods from book dates, day-set expansion
    - conflicts: Priority-based merge of same-day entries
    - merger: Builds the ReadingDayMap from a streak record and books
    - streaks: Current/longest streak
    - queries: Range, aggregation, pattern and statistics queries
    - journal: Single-day edits on the enhanced journal
    - bulk: Chunked merge, bulk edits and streaming helpers
    - migration: Legacy record detection and upgrade
"""
from .bulk import (
    BulkOperation,
    BulkOperationKind,
    bulk_update_reading_day_entries,
    iter_chunks,
    merge_reading_data_batched,
    process_in_chunks,
    stream_entries,
)
from .conflicts import SOURCE_PRIORITY, resolve_conflicts, resolve_conflicts_advanced
from .journal import (
    add_reading_day_entry,
    create_empty_enhanced_streak_history,
    record_check_in,
    remove_reading_day_entry,
    synchronize_reading_days,
    update_reading_day_entry,
)
from .merger import merge_reading_data
from .migration import (
    LegacyFormat,
    detect_legacy_format,
    ensure_enhanced_streak_history,
    migrate_legacy_data,
    migrate_streak_history,
    upgrade_streak_history_version,
)
from .periods import (
    extract_reading_periods,
    generate_reading_days,
    get_reading_period_stats,
    validate_reading_periods,
)
from .queries import (
    Granularity,
    aggregate_by_period,
    find_reading_patterns,
    get_extended_reading_statistics,
    get_reading_days_in_range,
    get_reading_statistics,
)
from .streaks import StreakSummary, calculate_streaks_from_days

__all__ = [
    "BulkOperation",
    "BulkOperationKind",
    "Granularity",
    "LegacyFormat",
    "SOURCE_PRIORITY",
    "StreakSummary",
    "add_reading_day_entry",
    "aggregate_by_period",
    "bulk_update_reading_day_entries",
    "calculate_streaks_from_days",
    "create_empty_enhanced_streak_history",
    "detect_legacy_format",
    "ensure_enhanced_streak_history",
    "extract_reading_periods",
    "find_reading_patterns",
    "generate_reading_days",
    "get_extended_reading_statistics",
    "get_reading_days_in_range",
    "get_reading_period_stats",
    "get_reading_statistics",
    "iter_chunks",
    "merge_reading_data",
    "merge_reading_data_batched",
    "migrate_legacy_data",
    "migrate_streak_history",
    "process_in_chunks",
    "record_check_in",
    "remove_reading_day_entry",
    "resolve_conflicts",
    "resolve_conflicts_advanced",
    "stream_entries",
    "synchronize_reading_days",
    "update_reading_day_entry",
    "upgrade_streak_history_version",
    "validate_reading_periods",
]
