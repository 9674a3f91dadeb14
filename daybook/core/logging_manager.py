#!/usr/bin/env python3
"""
logging_manager.py
------------------
File-backed logging for the daybook core.

Each component (database, cli, ...) gets two rotating files in the log
directory: ``<component>.log`` receives operation and debug records, and
the shared ``errors.log`` receives failures with their context, exception
details and traceback. Warnings from the component logger are mirrored to
stderr.

Records are single lines of the form ``TAG - name: {json}`` so they can be
grepped by operation name.
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

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(funcName)s:%(lineno)d] %(message)s"
CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _dump(payload: Any) -> str:
    return json.dumps(payload, default=str)


def _cli_message(error: Exception) -> str:
    return f"❌ {type(error).__name__}: {error}"


class DaybookLogger:
    """
    Per-component logger writing operation and error files.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Prefix of the logger names and of the main log file
        main_logger: Receives OPERATION and DEBUG records
        error_logger: Receives ERROR records for errors.log
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "daybook",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.main_logger = self._build_logger(
            "operations", f"{component_name}.log", logging.DEBUG, console=True
        )
        self.error_logger = self._build_logger(
            "errors", "errors.log", logging.ERROR, console=False
        )

    def _build_logger(
        self, suffix: str, file_name: str, level: int, console: bool
    ) -> logging.Logger:
        logger = logging.getLogger(f"{self.component_name}.{suffix}")
        logger.setLevel(level)
        logger.propagate = False
        # Re-creating a component logger replaces its handlers
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()

        file_handler = RotatingFileHandler(
            self.log_dir / file_name,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)

        if console:
            stream = logging.StreamHandler()
            stream.setLevel(logging.WARNING)
            stream.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
            logger.addHandler(stream)
        return logger

    def _emit(
        self, level: int, tag: str, message: str, details: Optional[Dict[str, Any]]
    ) -> None:
        line = f"{tag} - {message}"
        if details:
            line = f"{line}: {_dump(details)}"
        self.main_logger.log(level, line, stacklevel=3)

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a named operation; the payload is always written, even empty."""
        self.main_logger.info(
            f"OPERATION - {operation}: {_dump(details or {})}", stacklevel=2
        )

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.DEBUG, "DEBUG", message, details)

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Write an exception to errors.log.

        Emits the type and message, then the caller context as ``k=v`` pairs,
        the ``details`` payload of daybook errors and the active traceback.
        """
        lines = [f"ERROR - {type(error).__name__}: {error}"]
        if context:
            lines.append("Context: " + ", ".join(f"{k}={v}" for k, v in context.items()))
        details = getattr(error, "details", None)
        if details:
            lines.append(f"Details: {_dump(details)}")
        lines.append("Traceback:\n" + traceback.format_exc())

        for line in lines:
            self.error_logger.error(line, stacklevel=2)

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log an error raised by a command and build its terminal message.

        Returns:
            ``❌ Type: message``, followed by the traceback when requested
        """
        self.log_error(error, context or {"source": "cli"})
        message = _cli_message(error)
        if show_traceback:
            message = f"{message}\n\n{traceback.format_exc()}"
        return message


class NullLogger:
    """Stand-in with the DaybookLogger interface that writes nothing."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return _cli_message(error)


_NULL = NullLogger()


def safe_logger(logger: Optional[DaybookLogger]) -> DaybookLogger:
    """The given logger, or a shared NullLogger when it is None."""
    return logger if logger is not None else _NULL  # type: ignore[return-value]


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Report a failed command and terminate.

    The error goes to errors.log through the logger stored in ``ctx.obj``
    (if any); the one-line message, plus the traceback under --verbose, is
    printed to stderr. Never returns.
    """
    obj = ctx.obj or {}
    context: Dict[str, Any] = {"operation": operation, **(additional_context or {})}
    message = safe_logger(obj.get("logger")).log_cli_error(
        error, context, show_traceback=bool(obj.get("verbose", False))
    )
    click.echo(message, err=True)
    sys.exit(exit_code)
