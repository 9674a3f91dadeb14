"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Daybook database.

This package provides a modular organization of database models:
- base: Base class, UTCDateTime column type and timestamp mixin
- core: User, Category, MoodState
- chapters: Chapter, Period
- days: Day, Media

Usage:
    from daybook.database.models import Chapter, Period, Day
"""
# Base classes
from .base import Base, TimestampMixin, UTCDateTime

# Core models
from .core import Category, MoodState, User

# Chapters
from .chapters import Chapter, Period

# Days
from .days import Day, Media

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    # Core
    "User",
    "Category",
    "MoodState",
    # Chapters
    "Chapter",
    "Period",
    # Days
    "Day",
    "Media",
]
