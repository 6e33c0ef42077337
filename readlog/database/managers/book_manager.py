#!/usr/bin/env python3
"""
book_manager.py
--------------------
Book repository backed by the ``books`` table.

Rows are handed to the engine as Book dataclasses, never as ORM objects,
so nothing in the engine depends on a live session.

Usage:
    with db.session_scope():
        db.books.upsert(Book(id=1, title="Dune", status="finished", ...))
        books = db.books.list()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Iterable, List, Optional, Union

# --- Third party imports ---
from sqlalchemy import select

# --- Local imports ---
from readlog.dataclasses.book import Book, BookStatus
from ..decorators import handle_db_errors, log_database_operation
from ..models import BookRecord
from .base_manager import BaseManager


class BookManager(BaseManager):
    """Reads and writes books."""

    @handle_db_errors
    @log_database_operation("list_books")
    def list(self, status: Union[BookStatus, str, None] = None) -> List[Book]:
        """
        All books ordered by id, optionally restricted to one status.

        Args:
            status: Optional BookStatus (or its value) to filter by
        """
        query = select(BookRecord).order_by(BookRecord.id)
        if status is not None:
            query = query.where(BookRecord.status == BookStatus(status).value)
        return [record.to_book() for record in self.session.scalars(query)]

    @handle_db_errors
    @log_database_operation("get_book")
    def get(self, book_id: int) -> Optional[Book]:
        record = self.session.get(BookRecord, book_id)
        return record.to_book() if record is not None else None

    @handle_db_errors
    @log_database_operation("upsert_book")
    def upsert(self, book: Book) -> Book:
        """
        Insert a book, or overwrite every field of the book with the same id.

        Returns:
            The stored Book
        """

        def _write() -> BookRecord:
            record = self.session.get(BookRecord, book.id)
            if record is None:
                record = BookRecord(id=book.id)
                self.session.add(record)
            record.apply(book)
            self.session.flush()
            return record

        return self._execute_with_retry(_write).to_book()

    def upsert_many(self, books: Iterable[Book]) -> int:
        """Upsert several books; returns how many were written."""
        count = 0
        for book in books:
            self.upsert(book)
            count += 1
        return count

    @handle_db_errors
    @log_database_operation("delete_book")
    def delete(self, book_id: int) -> bool:
        """Delete a book; returns False when it did not exist."""
        record = self.session.get(BookRecord, book_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.flush()
        return True
