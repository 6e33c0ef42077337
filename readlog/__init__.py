"""
Readlog
=======

Reading activity reconciliation engine.

Merges manual check-ins, finished-book reading periods and recent
progress updates into one per-day reading journal, computes streaks,
answers range and aggregate queries, validates and repairs stored
journals, and migrates legacy streak records.

Main Components:
    - reconcile: Pure engine (periods, merge, conflicts, streaks, queries,
      journal edits, bulk/streaming, migration)
    - validators: Journal integrity checks, scoring and auto-fix
    - dataclasses: Book, ReadingDayEntry, streak history records
    - database: SQLAlchemy book repository and journal store
    - core: Logging, exceptions, paths, clock, date helpers
    - cli: The ``readlog`` command

Example Usage:
    >>> from readlog.reconcile import merge_reading_data, calculate_streaks_from_days
    >>> day_map = merge_reading_data(history, books)
    >>> summary = calculate_streaks_from_days(day_map.keys())
"""
__version__ = "0.1.0"
