#!/usr/bin/env python3
"""
managers package
--------------------
Modular entity managers for the Daybook database.

Each manager handles the operations of one aggregate, inheriting from
BaseManager. Managers are the store layer of the core: analytics and the
memories resolver only read through them.

Available Managers:
    BaseManager: Abstract base class with lookup and transaction helpers
    EntityManager: Config-driven manager for user reference data
    UserManager: Users and their timezone
    CategoryManager: Chapter categories (EntityManager)
    MoodStateManager: Mood states and their scores (EntityManager)
    DayManager: Days and media metadata
    ChapterManager: Chapters and chapter details
    PeriodManager: Period consistency engine

Usage:
    from daybook.database.managers import PeriodManager

    periods = PeriodManager(session, logger)
    periods.create_period(user_id, chapter_id, "2024-01-01", "2024-01-31")
"""
from .base_manager import UNSET, BaseManager
from .entity_manager import EntityManager, EntityManagerConfig
from .user_manager import UserManager
from .category_manager import CategoryManager
from .mood_state_manager import MoodStateManager
from .day_manager import DayManager
from .chapter_manager import ChapterManager
from .period_manager import PeriodManager

__all__ = [
    "UNSET",
    "BaseManager",
    "EntityManager",
    "EntityManagerConfig",
    "UserManager",
    "CategoryManager",
    "MoodStateManager",
    "DayManager",
    "ChapterManager",
    "PeriodManager",
]
