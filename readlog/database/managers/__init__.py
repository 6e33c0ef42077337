#!/usr/bin/env python3
"""
managers package
--------------------
Session-bound managers for the readlog database.

Available Managers:
    BaseManager: Shared session/logger wiring and lock retry
    BookManager: Book repository (list/get/upsert/delete)
    JournalStore: Streak record persistence (load/save, legacy and enhanced)
"""
from .base_manager import BaseManager
from .book_manager import BookManager
from .journal_store import JournalStore

__all__ = ["BaseManager", "BookManager", "JournalStore"]
