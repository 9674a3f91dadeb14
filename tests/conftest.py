"""
conftest.py
-----------
Shared pytest fixtures for Daybook tests.

Provides fixtures for:
- Temporary database setup and teardown
- Manager instances bound to a test session
- A seeded user (default categories and mood states) in a fixed timezone
- A fixed reference instant for the future-date rule
"""
from datetime import datetime, timezone
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db_path(tmp_dir):
    """Temporary test database path."""
    return tmp_dir / "test.db"


# ----- Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """
    Create test database instance with schema.

    Returns a DaybookDB on a fresh SQLite file (tables created and stamped
    at the Alembic head). The engine is disposed after the test.
    """
    from daybook.database.manager import DaybookDB

    db = DaybookDB(db_path=test_db_path)
    yield db
    db.dispose()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


# ----- Manager Fixtures -----

@pytest.fixture
def user_manager(db_session):
    """Create UserManager instance for testing."""
    from daybook.database.managers import UserManager
    return UserManager(db_session)


@pytest.fixture
def category_manager(db_session):
    """Create CategoryManager instance for testing."""
    from daybook.database.managers import CategoryManager
    return CategoryManager(db_session)


@pytest.fixture
def mood_state_manager(db_session):
    """Create MoodStateManager instance for testing."""
    from daybook.database.managers import MoodStateManager
    return MoodStateManager(db_session)


@pytest.fixture
def day_manager(db_session):
    """Create DayManager instance for testing."""
    from daybook.database.managers import DayManager
    return DayManager(db_session)


@pytest.fixture
def chapter_manager(db_session):
    """Create ChapterManager instance for testing."""
    from daybook.database.managers import ChapterManager
    return ChapterManager(db_session)


@pytest.fixture
def period_manager(db_session):
    """Create PeriodManager instance for testing."""
    from daybook.database.managers import PeriodManager
    return PeriodManager(db_session)


# ----- Data Fixtures -----

@pytest.fixture
def now():
    """Fixed reference instant: 2024-06-15 12:00 UTC."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def user(user_manager):
    """User in UTC with the default categories and mood states."""
    return user_manager.create({"name": "Test User", "timezone": "UTC"})


@pytest.fixture
def other_user(user_manager):
    """A second user, used to check ownership rules."""
    return user_manager.create({"name": "Other User", "timezone": "UTC"})


@pytest.fixture
def categories(category_manager, user):
    """Default categories of the test user keyed by name."""
    return {c.name: c for c in category_manager.get_all(user.id)}


@pytest.fixture
def moods(mood_state_manager, user):
    """Default mood states of the test user keyed by name."""
    return {m.name: m for m in mood_state_manager.get_all(user.id)}


@pytest.fixture
def chapter(chapter_manager, user, categories):
    """A chapter in the Work category, formatted."""
    return chapter_manager.create_chapter(
        user.id, {"title": "First job", "category_id": categories["Work"].id}
    )
