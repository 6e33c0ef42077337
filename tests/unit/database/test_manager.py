"""Tests for ReadlogDB setup, sessions and retry handling."""
import pytest
from unittest.mock import MagicMock, patch

from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from readlog.core.exceptions import DatabaseError
from readlog.core.logging_manager import ReadlogLogger
from readlog.database.manager import ReadlogDB
from readlog.database.managers import BookManager, JournalStore
from readlog.database.managers.base_manager import BaseManager


class TestReadlogDBSetup:
    """Tests for engine and schema initialization."""

    def test_creates_tables(self, test_db):
        tables = set(inspect(test_db.engine).get_table_names())
        assert {"books", "streak_histories"} <= tables

    def test_creates_parent_directory(self, tmp_dir):
        db = ReadlogDB(tmp_dir / "nested" / "dir" / "readlog.db")
        try:
            assert (tmp_dir / "nested" / "dir").is_dir()
        finally:
            db.dispose()

    def test_logger_only_with_log_dir(self, tmp_dir):
        quiet = ReadlogDB(tmp_dir / "a.db")
        logged = ReadlogDB(tmp_dir / "b.db", log_dir=tmp_dir / "logs")
        try:
            assert quiet.logger is None
            assert isinstance(logged.logger, ReadlogLogger)
            assert (tmp_dir / "logs" / "system").is_dir()
        finally:
            quiet.dispose()
            logged.dispose()

    def test_init_failure_is_wrapped(self, tmp_dir):
        with patch.object(ReadlogDB, "initialize_schema", side_effect=RuntimeError("boom")):
            with pytest.raises(DatabaseError, match="Database initialization failed"):
                ReadlogDB(tmp_dir / "c.db")


class TestSessionScope:
    """Tests for transaction handling."""

    def test_commit_on_success(self, test_db):
        mock_session = MagicMock()
        test_db.SessionLocal = MagicMock(return_value=mock_session)

        with test_db.session_scope() as session:
            assert session is mock_session

        mock_session.commit.assert_called_once()
        mock_session.rollback.assert_not_called()
        mock_session.close.assert_called_once()

    def test_rollback_on_exception(self, test_db):
        mock_session = MagicMock()
        test_db.SessionLocal = MagicMock(return_value=mock_session)

        with pytest.raises(ValueError, match="Test error"):
            with test_db.session_scope():
                raise ValueError("Test error")

        mock_session.rollback.assert_called_once()
        mock_session.commit.assert_not_called()
        mock_session.close.assert_called_once()

    def test_managers_only_inside_scope(self, test_db):
        with pytest.raises(DatabaseError, match="requires active session"):
            test_db.books
        with pytest.raises(DatabaseError, match="requires active session"):
            test_db.journal

        with test_db.session_scope():
            assert isinstance(test_db.books, BookManager)
            assert isinstance(test_db.journal, JournalStore)

        with pytest.raises(DatabaseError):
            test_db.books


class _Manager(BaseManager):
    pass


class TestExecuteWithRetry:
    """Tests for lock retries in BaseManager."""

    @pytest.fixture
    def manager(self):
        return _Manager(MagicMock(), MagicMock(spec=ReadlogLogger))

    @patch("readlog.database.managers.base_manager.time.sleep", autospec=True)
    def test_success_first_attempt(self, mock_sleep, manager):
        operation = MagicMock(return_value="Success")
        assert manager._execute_with_retry(operation) == "Success"
        operation.assert_called_once()
        mock_sleep.assert_not_called()

    @patch("readlog.database.managers.base_manager.time.sleep", autospec=True)
    def test_retries_when_locked(self, mock_sleep, manager):
        locked = OperationalError("stmt", {}, Exception("database is locked"))
        operation = MagicMock(side_effect=[locked, locked, "Success"])

        assert manager._execute_with_retry(operation) == "Success"
        assert operation.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.1, 0.2]

    @patch("readlog.database.managers.base_manager.time.sleep", autospec=True)
    def test_gives_up_after_max_retries(self, mock_sleep, manager):
        locked = OperationalError("stmt", {}, Exception("database is locked"))
        operation = MagicMock(side_effect=locked)

        with pytest.raises(OperationalError):
            manager._execute_with_retry(operation, max_retries=2)
        assert operation.call_count == 2

    @patch("readlog.database.managers.base_manager.time.sleep", autospec=True)
    def test_other_errors_are_not_retried(self, mock_sleep, manager):
        operation = MagicMock(side_effect=OperationalError("stmt", {}, Exception("no such table")))

        with pytest.raises(OperationalError):
            manager._execute_with_retry(operation)
        operation.assert_called_once()
