#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the readlog persistence boundary.

Provides the ReadlogDB class for the SQLite database that backs the Book
Repository and the streak record store. Handles:
    - Initialization of the database engine and sessionmaker
    - Schema creation from the ORM metadata
    - Transaction management with automatic rollback and logging
    - Session-bound managers (db.books, db.journal)

The reconciliation engine never sees a session: the CLI loads books and
histories here, hands plain dataclasses to the engine, and saves results.

Usage:
    db = ReadlogDB("~/data/readlog.db", log_dir="~/logs")
    with db.session_scope():
        books = db.books.list()
        history = db.journal.load()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from readlog.core.exceptions import DatabaseError
from readlog.core.logging_manager import ReadlogLogger
from .decorators import handle_db_errors
from .managers import BookManager, JournalStore
from .models import Base


class ReadlogDB:
    """
    Main database manager.

    Attributes:
        db_path: Filesystem path to the SQLite database file
        engine: SQLAlchemy engine instance
        SessionLocal: SQLAlchemy session factory
        logger: ReadlogLogger when a log directory was given, else None
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Initialize database engine, session factory and schema.

        Args:
            db_path: Path to the SQLite file (created if missing)
            log_dir: Directory for log files (optional)
        """
        self.db_path = Path(db_path).expanduser().resolve()

        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve() / "system"
            self.logger: Optional[ReadlogLogger] = ReadlogLogger(
                self.log_dir, component_name="database"
            )
        else:
            self.logger = None

        self._book_manager: Optional[BookManager] = None
        self._journal_store: Optional[JournalStore] = None

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        try:
            if self.logger:
                self.logger.log_operation("database_init_start", {"db_path": str(self.db_path)})

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                future=True,
                pool_pre_ping=True,
            )

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
                future=True,
            )

            self.initialize_schema()

            if self.logger:
                self.logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    @handle_db_errors
    def initialize_schema(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around operations with logging.

        Managers are available as db.books and db.journal inside the scope.

        Usage:
            with db.session_scope() as session:
                db.books.upsert(book)
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

        self._book_manager = BookManager(session, self.logger)
        self._journal_store = JournalStore(session, self.logger)

        if self.logger:
            self.logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            if self.logger:
                self.logger.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            if self.logger:
                self.logger.log_error(
                    e, {"operation": "session_rollback", "session_id": session_id}
                )
            raise
        finally:
            self._book_manager = None
            self._journal_store = None

            session.close()
            if self.logger:
                self.logger.log_debug("session_close", {"session_id": session_id})

    # ---- Managers ----
    @property
    def books(self) -> BookManager:
        """
        Access BookManager for book operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._book_manager is None:
            raise DatabaseError(
                "BookManager requires active session. "
                "Use within session_scope: "
                "with db.session_scope(): db.books.list()"
            )
        return self._book_manager

    @property
    def journal(self) -> JournalStore:
        """
        Access JournalStore for streak record operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._journal_store is None:
            raise DatabaseError(
                "JournalStore requires active session. "
                "Use within session_scope."
            )
        return self._journal_store
