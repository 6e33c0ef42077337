#!/usr/bin/env python3
"""
Domain dataclasses for the reconciliation engine.

- book: Book and BookStatus
- reading_day: SourceKind, ReadingDataSource, ReadingDayEntry, ReadingDayMap
- reading_period: ReadingPeriod
- streak_history: LegacyStreakHistory, EnhancedStreakHistory
"""
from .book import Book, BookStatus
from .reading_day import ReadingDataSource, ReadingDayEntry, ReadingDayMap, SourceKind
from .reading_period import ReadingPeriod
from .streak_history import (
    CURRENT_STREAK_HISTORY_VERSION,
    EnhancedStreakHistory,
    LegacyStreakHistory,
    StreakHistory,
)

__all__ = [
    "Book",
    "BookStatus",
    "CURRENT_STREAK_HISTORY_VERSION",
    "EnhancedStreakHistory",
    "LegacyStreakHistory",
    "ReadingDataSource",
    "ReadingDayEntry",
    "ReadingDayMap",
    "ReadingPeriod",
    "SourceKind",
    "StreakHistory",
]
