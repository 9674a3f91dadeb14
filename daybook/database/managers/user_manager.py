#!/usr/bin/env python3
"""
user_manager.py
---------------
Manages users and acts as the timezone provider for the rest of the core.

Every date a user supplies is interpreted in that user's timezone. Users
without a stored timezone (or whose stored name the tz database no longer
knows) are treated as UTC.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from daybook.core.exceptions import NotFoundError, ValidationError
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.temporal import DEFAULT_TIMEZONE, resolve_zone
from daybook.core.validators import DataValidator
from daybook.database.decorators import DatabaseOperation
from daybook.database.models import User
from .base_manager import BaseManager
from .category_manager import CategoryManager
from .mood_state_manager import MoodStateManager


class UserManager(BaseManager):
    """Manages User records."""

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        super().__init__(session, logger)

    def create(self, metadata: Dict[str, Any], seed_defaults: bool = True) -> User:
        """
        Create a user.

        Args:
            metadata: Dictionary with 'name' and optional 'timezone'
            seed_defaults: Also create the default categories and mood states

        Returns:
            Created user

        Raises:
            ValidationError: If the name is missing or the timezone is unknown
        """
        with DatabaseOperation(self.logger, "create_user"):
            DataValidator.validate_required_fields(metadata, ["name"])
            name = DataValidator.normalize_string(metadata["name"])
            if not name:
                raise ValidationError("User name cannot be empty")
            tz_name = DataValidator.normalize_timezone(metadata.get("timezone"))

            user = User(name=name, timezone=tz_name)
            self.session.add(user)
            self.session.flush()

            if seed_defaults:
                CategoryManager(self.session, self.logger).seed_defaults(user.id)
                MoodStateManager(self.session, self.logger).seed_defaults(user.id)

            safe_logger(self.logger).log_debug(
                f"Created user: {name}", {"user_id": user.id, "timezone": tz_name}
            )
            return user

    def get(self, user_id: int) -> User:
        """
        Retrieve a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self._get_by_id(User, user_id)
        if user is None:
            raise NotFoundError("user", {"user_id": user_id})
        return user

    def set_timezone(self, user_id: int, tz_name: Optional[str]) -> User:
        """
        Change the timezone of a user (None resets to UTC).

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If the timezone is unknown
        """
        with DatabaseOperation(self.logger, "set_user_timezone"):
            user = self.get(user_id)
            user.timezone = DataValidator.normalize_timezone(tz_name)
            self.session.flush()
            return user

    def get_timezone(self, user_id: int) -> str:
        """
        IANA timezone of a user, 'UTC' when unset or unknown.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.get(user_id)
        if not user.timezone:
            return DEFAULT_TIMEZONE
        return resolve_zone(user.timezone).key
