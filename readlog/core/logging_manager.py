#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Logging for readlog runs.

Each component (``cli``, ``reconcile``, ``integrity`` ...) writes a rotating
``<component>.log`` with one line per operation and its details as JSON.
Errors from every component also land in a shared ``errors.log``.

Engine functions take ``logger: Optional[ReadlogLogger] = None`` and log
through ``safe_logger(logger)``, so they run silently when no logger is
wired in.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click


FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _as_json(details: Dict[str, Any]) -> str:
    return json.dumps(details, default=str, sort_keys=True)


class ReadlogLogger:
    """
    Rotating operation and error logs for one component.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Component the operation log is named after
        main_logger: ``<component>.operations`` logger (file + console)
        error_logger: ``<component>.errors`` logger (errors.log)
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "readlog",
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        console_level: int = logging.WARNING,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files (created if missing)
            component_name: Component identifier, e.g. 'cli' or 'integrity'
            max_bytes: Size at which a log file rotates (default: 10MB)
            backup_count: Rotated files to keep (default: 5)
            console_level: Threshold for echoing operation records to stderr
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.console_level = console_level
        self._setup_loggers()

    def _setup_loggers(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = logging.getLogger(f"{self.component_name}.operations")
        self.main_logger.setLevel(logging.DEBUG)
        # Reset only this logger's handlers (not global logger state)
        self.main_logger.handlers = []

        self.error_logger = logging.getLogger(f"{self.component_name}.errors")
        self.error_logger.setLevel(logging.ERROR)
        self.error_logger.handlers = []

        self.main_logger.addHandler(
            self._file_handler(self.log_dir / f"{self.component_name}.log", logging.DEBUG)
        )
        self.error_logger.addHandler(self._file_handler(self.log_dir / "errors.log", logging.ERROR))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.console_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        self.main_logger.addHandler(console_handler)

    def _file_handler(self, file_path: Path, level: int) -> RotatingFileHandler:
        handler = RotatingFileHandler(
            file_path,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        return handler

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a completed operation (merge, validate, bulk update ...) with its details."""
        self.main_logger.info(f"OPERATION - {operation}: {_as_json(details or {})}")

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        if details:
            self.main_logger.debug(f"DEBUG - {message}: {_as_json(details)}")
        else:
            self.main_logger.debug(f"DEBUG - {message}")

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Record an error in errors.log.

        The context is written as JSON on the same line. When called while
        the exception is being handled, its traceback follows.
        """
        line = f"ERROR - {type(error).__name__}: {error}"
        if context:
            line += f" | {_as_json(context)}"
        if sys.exc_info()[1] is error:
            line += f"\n{traceback.format_exc().rstrip()}"
        self.error_logger.error(line)

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log an error raised by a command and format it for the terminal.

        Returns:
            ``❌ <ErrorType>: <message>``, followed by the traceback when
            show_traceback is set
        """
        self.log_error(error, context or {"source": "cli"})
        return _cli_message(error, show_traceback)


def _cli_message(error: Exception, show_traceback: bool = False) -> str:
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback:
        message += "\n\n" + "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Report a failed command and exit.

    Logs the error through the logger on ``ctx.obj``, prints the short
    message to stderr (with traceback under ``--verbose``) and calls
    sys.exit(). Never returns.
    """
    obj = ctx.obj or {}
    context = {"operation": operation, **(additional_context or {})}
    message = safe_logger(obj.get("logger")).log_cli_error(
        error, context, show_traceback=obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """ReadlogLogger stand-in that records nothing."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return _cli_message(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[ReadlogLogger]) -> ReadlogLogger:
    """Return the given logger, or a shared NullLogger for None."""
    return logger if logger is not None else _null_logger  # type: ignore[return-value]
