#!/usr/bin/env python3
"""
Readlog Database Package
------------------------
SQLAlchemy persistence for the Book Repository and the streak record
store. The reconciliation engine does not import this package.

- manager: ReadlogDB (engine, sessions, schema)
- models: BookRecord, StreakHistoryRecord
- managers: BookManager, JournalStore
- decorators: handle_db_errors, log_database_operation
"""
from readlog.core.exceptions import DatabaseError
from .decorators import handle_db_errors, log_database_operation
from .manager import ReadlogDB
from .managers import BookManager, JournalStore
from .models import Base, BookRecord, StreakHistoryRecord

__all__ = [
    "Base",
    "BookManager",
    "BookRecord",
    "DatabaseError",
    "JournalStore",
    "ReadlogDB",
    "StreakHistoryRecord",
    "handle_db_errors",
    "log_database_operation",
]
