#!/usr/bin/env python3
"""
mood_state_manager.py
---------------------
Manages the moods a user can assign to days.

Each mood state carries an explicit ``score`` (0-10) used by analytics and
an ``order`` used only for display. The five seeded defaults map
Great/Good/Okay/Bad/Terrible to 9/7/5/3/1. A mood state cannot be deleted
while any day uses it.
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
from daybook.database.models import Day, MoodState
from .entity_manager import EntityManager, EntityManagerConfig

DEFAULT_MOOD_STATES = [
    {"name": "Great", "color": "#4CAF50", "score": 9},
    {"name": "Good", "color": "#8BC34A", "score": 7},
    {"name": "Okay", "color": "#FFC107", "score": 5},
    {"name": "Bad", "color": "#FF9800", "score": 3},
    {"name": "Terrible", "color": "#F44336", "score": 1},
]

MOOD_RECOMMENDATIONS = [
    {"key": "great", "color": "#22C55E", "score": 9},
    {"key": "good", "color": "#84CC16", "score": 7},
    {"key": "okay", "color": "#FACC15", "score": 5},
    {"key": "bad", "color": "#F97316", "score": 3},
    {"key": "terrible", "color": "#EF4444", "score": 1},
]

MOOD_STATE_CONFIG = EntityManagerConfig(
    model_class=MoodState,
    entity_name="mood_state",
    scalar_fields=[
        ("name", DataValidator.normalize_string),
        ("color", DataValidator.normalize_color),
        ("score", DataValidator.normalize_score),
        ("order", DataValidator.normalize_int),
    ],
    required_fields=["name", "color", "score"],
    usage=(Day, "mood_state_id"),
    defaults=DEFAULT_MOOD_STATES,
    recommendations=MOOD_RECOMMENDATIONS,
)


class MoodStateManager(EntityManager):
    """Manages MoodState records of a user."""

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        super().__init__(session, logger, MOOD_STATE_CONFIG)

