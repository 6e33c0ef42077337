#!/usr/bin/env python3
"""
decorators.py
--------------------
Decorators for BookManager and JournalStore methods.

- log_database_operation: start/completion/failure records in the manager's log
- handle_db_errors: SQLAlchemy failures surface as DatabaseError

Stack them with handle_db_errors outermost so failures are logged with
their original SQLAlchemy type before being translated.
"""
import time
from functools import wraps
from typing import Any, Callable, Dict

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from readlog.core.exceptions import DatabaseError
from readlog.core.logging_manager import safe_logger


def _row_count(result: Any) -> Dict[str, int]:
    if isinstance(result, (list, tuple, set, dict)):
        return {"rows": len(result)}
    return {}


def log_database_operation(operation_name: str):
    """
    Log a manager method under operation_name.

    Emits a debug record on entry, an operation record with the elapsed time
    (and the row count for collection results) on success, and an error
    record on failure. The exception is re-raised unchanged.
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            log = safe_logger(getattr(self, "logger", None))
            manager = type(self).__name__
            log.log_debug(f"Starting {operation_name}", {"manager": manager, "args": len(args)})

            started = time.perf_counter()
            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                log.log_error(e, {
                    "operation": operation_name,
                    "manager": manager,
                    "duration_seconds": round(time.perf_counter() - started, 6),
                })
                raise

            log.log_operation(f"{operation_name}_completed", {
                "manager": manager,
                "duration_seconds": round(time.perf_counter() - started, 6),
                "success": True,
                **_row_count(result),
            })
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Translate SQLAlchemy failures into DatabaseError.

    IntegrityError covers the books table's status/progress constraints and
    duplicate ids; OperationalError is what reaches callers once lock
    retries are exhausted.
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Data integrity violation: {e.orig or e}") from e
        except OperationalError as e:
            raise DatabaseError(f"Database unavailable: {e.orig or e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper
