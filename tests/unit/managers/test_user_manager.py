"""
test_user_manager.py
--------------------
Unit tests for UserManager: creation, seeding and timezone handling.
"""
import pytest

from daybook.core.exceptions import NotFoundError, ValidationError
from daybook.database.models import User


class TestUserManager:
    """Tests for UserManager."""

    def test_create_with_defaults(self, user_manager, category_manager, mood_state_manager):
        user = user_manager.create({"name": "  Ada   Lovelace ", "timezone": "Europe/Berlin"})
        assert user.name == "Ada Lovelace"
        assert user.timezone == "Europe/Berlin"
        assert len(category_manager.get_all(user.id)) == 8
        assert len(mood_state_manager.get_all(user.id)) == 5

    def test_create_without_defaults(self, user_manager, category_manager):
        user = user_manager.create({"name": "Bare"}, seed_defaults=False)
        assert category_manager.get_all(user.id) == []

    def test_name_required(self, user_manager):
        with pytest.raises(ValidationError):
            user_manager.create({"name": "   "})

    def test_unknown_timezone_rejected(self, user_manager):
        with pytest.raises(ValidationError, match="Unknown timezone: Mars/Olympus"):
            user_manager.create({"name": "Ada", "timezone": "Mars/Olympus"})

    def test_missing_timezone_reads_as_utc(self, user_manager):
        user = user_manager.create({"name": "Ada"})
        assert user.timezone is None
        assert user_manager.get_timezone(user.id) == "UTC"

    def test_set_timezone(self, user_manager, user):
        user_manager.set_timezone(user.id, "America/New_York")
        assert user_manager.get_timezone(user.id) == "America/New_York"
        user_manager.set_timezone(user.id, None)
        assert user_manager.get_timezone(user.id) == "UTC"

    def test_invalid_stored_timezone_falls_back(self, user_manager, db_session, user):
        db_session.get(User, user.id).timezone = "Not/AZone"
        db_session.flush()
        assert user_manager.get_timezone(user.id) == "UTC"

    def test_unknown_user(self, user_manager):
        with pytest.raises(NotFoundError) as exc_info:
            user_manager.get(9999)
        assert exc_info.value.code == "USER_NOT_FOUND"
