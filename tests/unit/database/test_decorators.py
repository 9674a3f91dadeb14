"""Tests for database decorators and context managers."""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from daybook.core.exceptions import DatabaseError, PeriodOverlapError
from daybook.core.logging_manager import DaybookLogger
from daybook.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)


class TestDatabaseOperation:
    """Tests for DatabaseOperation context manager."""

    def test_successful_operation(self):
        """DatabaseOperation should log completion on success."""
        mock_logger = MagicMock(spec=DaybookLogger)

        with DatabaseOperation(mock_logger, "create_period"):
            result = 1 + 1

        assert result == 2
        mock_logger.log_operation.assert_called_once()
        call_args = mock_logger.log_operation.call_args
        assert call_args[0][0] == "create_period_completed"
        assert call_args[0][1]["success"] is True
        assert isinstance(call_args[0][1]["duration_seconds"], float)

    def test_context_is_merged(self):
        mock_logger = MagicMock(spec=DaybookLogger)

        with DatabaseOperation(mock_logger, "close_period", context={"period_id": 3}):
            pass

        details = mock_logger.log_operation.call_args[0][1]
        assert details["period_id"] == 3
        assert details["success"] is True

    def test_context_in_error_record(self):
        mock_logger = MagicMock(spec=DaybookLogger)

        with pytest.raises(PeriodOverlapError):
            with DatabaseOperation(
                mock_logger, "create_period", context={"chapter_id": 7}
            ):
                raise PeriodOverlapError()

        context = mock_logger.log_error.call_args[0][1]
        assert context["operation"] == "create_period"
        assert context["chapter_id"] == 7

    def test_none_logger(self):
        """DatabaseOperation should work with None logger (uses NullLogger)."""
        with DatabaseOperation(None, "noop"):
            pass

    def test_integrity_error_raises_database_error(self):
        mock_logger = MagicMock(spec=DaybookLogger)

        with pytest.raises(DatabaseError) as exc_info:
            with DatabaseOperation(mock_logger, "upsert_day"):
                raise IntegrityError("statement", {}, Exception("duplicate"))

        assert str(exc_info.value) == "Data integrity violation: duplicate"
        mock_logger.log_error.assert_called_once()

    def test_sqlalchemy_error_raises_database_error(self):
        mock_logger = MagicMock(spec=DaybookLogger)

        with pytest.raises(DatabaseError) as exc_info:
            with DatabaseOperation(mock_logger, "list_chapters"):
                raise SQLAlchemyError("connection failed")

        assert "Database operation failed" in str(exc_info.value)

    def test_domain_errors_propagate_unchanged(self):
        mock_logger = MagicMock(spec=DaybookLogger)

        with pytest.raises(PeriodOverlapError):
            with DatabaseOperation(mock_logger, "create_period"):
                raise PeriodOverlapError()

        mock_logger.log_error.assert_called_once()
        mock_logger.log_operation.assert_not_called()

    def test_no_log_start_by_default(self):
        mock_logger = MagicMock(spec=DaybookLogger)

        with DatabaseOperation(mock_logger, "seed"):
            pass

        mock_logger.log_debug.assert_not_called()


class _Service:
    def __init__(self, logger):
        self.logger = logger

    @log_database_operation("compute")
    def compute(self, value):
        if value < 0:
            raise ValueError("negative")
        return value * 2


class TestLogDatabaseOperation:
    """Tests for the log_database_operation method decorator."""

    def test_logs_completion(self):
        mock_logger = MagicMock(spec=DaybookLogger)
        assert _Service(mock_logger).compute(2) == 4
        assert mock_logger.log_operation.call_args[0][0] == "compute_completed"

    def test_logs_and_reraises(self):
        mock_logger = MagicMock(spec=DaybookLogger)
        with pytest.raises(ValueError):
            _Service(mock_logger).compute(-1)
        assert mock_logger.log_error.call_args[0][1]["operation"] == "compute"

    def test_without_logger(self):
        assert _Service(None).compute(3) == 6


class TestHandleDbErrors:
    """Tests for handle_db_errors."""

    def test_converts_sqlalchemy_errors(self):
        @handle_db_errors
        def failing():
            raise SQLAlchemyError("locked")

        with pytest.raises(DatabaseError, match="Database operation failed"):
            failing()

    def test_passes_other_errors(self):
        @handle_db_errors
        def failing():
            raise KeyError("x")

        with pytest.raises(KeyError):
            failing()
