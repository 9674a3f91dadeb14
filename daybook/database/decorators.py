#!/usr/bin/env python3
"""
decorators.py
-------------
Logging and error translation around database work.

``DatabaseOperation`` is the block form used inside manager methods,
``log_database_operation`` and ``handle_db_errors`` the decorator forms used
on DaybookDB. SQLAlchemy failures surface as DatabaseError; daybook's own
domain and validation errors pass through untouched so callers can tell
the rejection kinds apart.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from functools import wraps
from typing import Any, Callable, Dict, NoReturn, Optional

# --- Third party imports ---
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# --- Local imports ---
from daybook.core.exceptions import DatabaseError
from daybook.core.logging_manager import DaybookLogger, safe_logger


def _raise_database_error(error: SQLAlchemyError) -> NoReturn:
    if isinstance(error, IntegrityError):
        raise DatabaseError(f"Data integrity violation: {error.orig}") from error
    raise DatabaseError(f"Database operation failed: {error}") from error


class DatabaseOperation:
    """
    Time a block of manager work and log its outcome.

    Usage:
        with DatabaseOperation(self.logger, "create_period", context={"chapter_id": 3}):
            ...

    On success ``<name>_completed`` is logged with the duration. On failure
    the exception is logged with the operation name, then re-raised, as a
    DatabaseError when it came from SQLAlchemy. ``context`` is merged into
    both records.
    """

    def __init__(
        self,
        logger: Optional[DaybookLogger],
        operation_name: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger = safe_logger(logger)
        self.operation_name = operation_name
        self.context = dict(context or {})
        self._started = 0.0

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._started

    def __enter__(self) -> "DatabaseOperation":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            self.logger.log_operation(
                f"{self.operation_name}_completed",
                {"duration_seconds": self.elapsed, "success": True, **self.context},
            )
            return False

        self.logger.log_error(
            exc_val,
            {
                "operation": self.operation_name,
                "duration_seconds": self.elapsed,
                **self.context,
            },
        )
        if isinstance(exc_val, SQLAlchemyError):
            _raise_database_error(exc_val)
        return False


def log_database_operation(operation_name: str) -> Callable:
    """
    Log start, completion and failure of a method.

    The logger is read from ``self.logger``; exceptions are re-raised as is.
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = safe_logger(getattr(self, "logger", None))
            started = time.perf_counter()
            logger.log_debug(f"{operation_name} started", {"kwargs": sorted(kwargs)})
            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {"operation": operation_name, "duration_seconds": time.perf_counter() - started},
                )
                raise
            details: Dict[str, Any] = {
                "duration_seconds": time.perf_counter() - started,
                "success": True,
            }
            logger.log_operation(f"{operation_name}_completed", details)
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """Re-raise SQLAlchemy errors from ``function`` as DatabaseError."""

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except SQLAlchemyError as e:
            _raise_database_error(e)

    return wrapper
