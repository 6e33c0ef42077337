"""
Tests for logging_manager module.

Tests ReadlogLogger file output, the NullLogger/safe_logger null object,
and handle_cli_error.
"""
import logging
import pytest
from unittest.mock import MagicMock

import click

from readlog.core.cli import setup_logger
from readlog.core.logging_manager import (
    NullLogger,
    ReadlogLogger,
    handle_cli_error,
    safe_logger,
)


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_all_methods_are_no_ops(self):
        """NullLogger methods should accept the logger interface and do nothing."""
        logger = NullLogger()
        logger.log_operation("op", {"key": "value"})
        logger.log_error(ValueError("boom"), {"ctx": 1})
        logger.log_debug("debug", {"a": 1})

    def test_log_cli_error_formats_message(self):
        """NullLogger.log_cli_error should still return a display message."""
        message = NullLogger().log_cli_error(ValueError("bad input"))
        assert message == "❌ ValueError: bad input"


class TestSafeLogger:
    """Tests for safe_logger helper."""

    def test_returns_given_logger(self):
        """safe_logger should pass through a real logger."""
        logger = MagicMock(spec=ReadlogLogger)
        assert safe_logger(logger) is logger

    def test_returns_null_logger_for_none(self):
        """safe_logger should substitute a NullLogger for None."""
        assert isinstance(safe_logger(None), NullLogger)


class TestReadlogLogger:
    """Tests for ReadlogLogger file handlers."""

    def test_creates_log_files(self, tmp_path):
        """Logger should write component and error logs in its directory."""
        logger = ReadlogLogger(tmp_path / "logs", component_name="testcomp")
        logger.log_operation("merge", {"days": 3})
        logger.log_error(RuntimeError("failure"), {"operation": "merge"})

        for handler in logger.main_logger.handlers + logger.error_logger.handlers:
            handler.flush()

        component_log = (tmp_path / "logs" / "testcomp.log").read_text(encoding="utf-8")
        error_log = (tmp_path / "logs" / "errors.log").read_text(encoding="utf-8")
        assert 'OPERATION - merge: {"days": 3}' in component_log
        assert 'RuntimeError: failure | {"operation": "merge"}' in error_log
        assert "Traceback" not in error_log

    def test_error_in_handler_carries_traceback(self, tmp_path):
        logger = ReadlogLogger(tmp_path, component_name="tbtest")
        try:
            raise ValueError("inside")
        except ValueError as e:
            logger.log_error(e)
        for handler in logger.error_logger.handlers:
            handler.flush()

        error_log = (tmp_path / "errors.log").read_text(encoding="utf-8")
        assert "ValueError: inside" in error_log
        assert "Traceback (most recent call last)" in error_log

    @pytest.mark.parametrize("verbose,level", [(False, logging.WARNING), (True, logging.INFO)])
    def test_setup_logger_console_level(self, tmp_path, verbose, level):
        logger = setup_logger(tmp_path, "levels", verbose=verbose)
        console = [h for h in logger.main_logger.handlers if type(h) is logging.StreamHandler]
        assert [h.level for h in console] == [level]
        assert (tmp_path / "operations" / "levels.log").exists()

    def test_log_cli_error_with_traceback(self, tmp_path):
        """log_cli_error should append a traceback when requested."""
        logger = ReadlogLogger(tmp_path, component_name="clitest")
        message = logger.log_cli_error(KeyError("x"), show_traceback=True)
        assert message.startswith("❌ KeyError")
        assert "\n\n" in message


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_exits_with_code(self):
        """handle_cli_error should log through the context logger and exit."""
        logger = MagicMock(spec=ReadlogLogger)
        logger.log_cli_error.return_value = "❌ ValueError: nope"
        ctx = click.Context(click.Command("dummy"), obj={"logger": logger, "verbose": False})

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ctx, ValueError("nope"), "dummy", {"extra": 1}, exit_code=3)

        assert exc_info.value.code == 3
        context = logger.log_cli_error.call_args[0][1]
        assert context == {"operation": "dummy", "extra": 1}
