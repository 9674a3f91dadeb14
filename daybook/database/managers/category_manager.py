#!/usr/bin/env python3
"""
category_manager.py
-------------------
Manages chapter categories.

Every user starts with the eight system categories. Categories can be
added, renamed, recolored and reordered; a category cannot be deleted while
any chapter still uses it. Preset colors are offered as recommendations
the user can adopt under their own name.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from daybook.core.logging_manager import DaybookLogger
from daybook.core.validators import DataValidator
from daybook.database.models import Category, Chapter
from .entity_manager import EntityManager, EntityManagerConfig

DEFAULT_CATEGORIES = [
    {"name": "Work", "color": "#4285F4"},
    {"name": "Education", "color": "#EA4335"},
    {"name": "Relationship", "color": "#E91E63"},
    {"name": "Health", "color": "#4CAF50"},
    {"name": "Hobby", "color": "#FF9800"},
    {"name": "Travel", "color": "#00BCD4"},
    {"name": "Living", "color": "#9C27B0"},
    {"name": "Finance", "color": "#607D8B"},
]

CATEGORY_RECOMMENDATIONS = [
    {"key": "work", "color": "#3B82F6"},
    {"key": "education", "color": "#6366F1"},
    {"key": "relationship", "color": "#EC4899"},
    {"key": "health", "color": "#10B981"},
    {"key": "hobby", "color": "#F59E0B"},
    {"key": "travel", "color": "#0EA5E9"},
    {"key": "living", "color": "#8B5CF6"},
    {"key": "finance", "color": "#14B8A6"},
]

CATEGORY_CONFIG = EntityManagerConfig(
    model_class=Category,
    entity_name="category",
    scalar_fields=[
        ("name", DataValidator.normalize_string),
        ("color", DataValidator.normalize_color),
        ("order", DataValidator.normalize_int),
    ],
    required_fields=["name", "color"],
    usage=(Chapter, "category_id"),
    defaults=DEFAULT_CATEGORIES,
    recommendations=CATEGORY_RECOMMENDATIONS,
)


class CategoryManager(EntityManager):
    """Manages Category records of a user."""

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        super().__init__(session, logger, CATEGORY_CONFIG)

