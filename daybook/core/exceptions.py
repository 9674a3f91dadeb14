#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Daybook project.

This module defines a hierarchy of exceptions used throughout the project
to handle specific error conditions in the persistence layer, the period
consistency engine and the memories resolver.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all database-related errors
    ├── ValidationError - Data validation failures
    └── DomainError - Rule violations with a stable error code
        ├── NotFoundError - Referenced entity missing for the user
        ├── InUseError - Deletion blocked by dependent records
        ├── ActivePeriodExistsError - Second open period in a chapter
        ├── PeriodOverlapError - Closed ranges intersect
        ├── EventAlreadyClosedError - Closing a closed period
        ├── InvalidDateRangeError (also ValidationError)
        ├── FutureDateError (also ValidationError)
        ├── InvalidDateError (also ValidationError)
        └── RecommendationNotFoundError (also ValidationError)

Usage:
    from daybook.core.exceptions import DomainError, PeriodOverlapError

    try:
        db.periods.create_period(user_id, chapter_id, "2024-01-01", "2024-01-10")
    except PeriodOverlapError as e:
        print(e.code, e.details["existing_period_id"])
    except DomainError as e:
        print(f"Rejected: {e}")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, Optional


class DatabaseError(Exception):
    """
    Base exception for database-related errors.

    Raised when database operations fail due to connection issues,
    query errors, integrity violations, or other database problems.

    Examples:
        >>> raise DatabaseError("Connection to database failed")
        >>> raise DatabaseError("Data integrity violation: duplicate day")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing required fields
    - Type mismatches
    - Out-of-range values (e.g. mood score outside 0-10)
    - Unknown timezone names

    Examples:
        >>> raise ValidationError("Missing required field: 'title'")
        >>> raise ValidationError("Mood score must be between 0 and 10")
    """

    pass


class DomainError(Exception):
    """
    Base exception for rule violations raised by the core.

    Every domain error carries a stable machine-readable ``code`` and a
    ``details`` dictionary with enough context for callers to build a
    user-facing message.

    Attributes:
        code: Stable error code (e.g. 'PERIOD_OVERLAP')
        message: Human-readable description
        details: Context about the rejected operation
    """

    code: str = "DOMAIN_ERROR"
    default_message: str = "Operation rejected"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API-style responses."""
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(DomainError):
    """
    Referenced entity does not exist for the requesting user.

    The error code is derived from the entity name, e.g. a missing chapter
    yields ``CHAPTER_NOT_FOUND``.

    Examples:
        >>> raise NotFoundError("chapter", {"chapter_id": 4})
        >>> raise NotFoundError("mood_state")
    """

    def __init__(self, entity: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.entity = entity
        self.code = f"{entity.upper()}_NOT_FOUND"
        label = entity.replace("_", " ").capitalize()
        super().__init__(f"{label} not found", details)


class InUseError(DomainError):
    """
    Deletion blocked because other records still reference the entity.

    Examples:
        >>> raise InUseError("chapter", {"chapter_id": 4, "period_count": 2})
    """

    def __init__(self, entity: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.entity = entity
        self.code = f"{entity.upper()}_IN_USE"
        label = entity.replace("_", " ").capitalize()
        super().__init__(f"{label} is still in use and cannot be deleted", details)


class ActivePeriodExistsError(DomainError):
    """Attempted to create or leave open a second active period in a chapter."""

    code = "ACTIVE_PERIOD_EXISTS"
    default_message = "Only one active period per chapter is allowed"


class PeriodOverlapError(DomainError):
    """
    A closed range intersects an existing closed range in the same chapter.

    Details carry ``existing_period_id``, ``existing_start`` and
    ``existing_end`` of the conflicting period.
    """

    code = "PERIOD_OVERLAP"
    default_message = "Period overlaps an existing period in this chapter"


class EventAlreadyClosedError(DomainError):
    """Attempted to close a period that already has an end date."""

    code = "EVENT_ALREADY_CLOSED"
    default_message = "Period is already closed"


class InvalidDateRangeError(DomainError, ValidationError):
    """Start date is after end date."""

    code = "INVALID_DATE_RANGE"
    default_message = "start_date must be before or equal to end_date"


class FutureDateError(DomainError, ValidationError):
    """
    A supplied date lies more than one day ahead of today.

    Details carry the rejected ``date`` and the latest accepted ``max_date``.
    """

    code = "FUTURE_DATE"
    default_message = (
        "Cannot create or modify entries for dates more than one day in the future"
    )


class InvalidDateError(DomainError, ValidationError):
    """A date input could not be parsed."""

    code = "INVALID_DATE"
    default_message = "Invalid date"


class RecommendationNotFoundError(DomainError, ValidationError):
    """A recommendation key is not in the preset list; details carry ``key``."""

    code = "RECOMMENDATION_NOT_FOUND"
    default_message = "Unknown recommendation key"
