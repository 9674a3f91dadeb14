#!/usr/bin/env python3
"""
validators.py
-------------
Input normalization shared by the managers and the CLI.

Each helper takes loosely typed input (CLI strings, dict payloads) and
returns the canonical value, or raises ValidationError with a message fit
for the terminal. Empty input maps to None unless the field is mandatory.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ValidationError

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

MIN_MOOD_SCORE = 0
MAX_MOOD_SCORE = 10

MAX_LOCATION_NAME = 120


class DataValidator:
    """Static normalizers for entity payloads."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """Raise ValidationError naming the first field that is absent, None or ''."""
        missing = next(
            (name for name in required_fields if data.get(name) in (None, "")), None
        )
        if missing is not None:
            raise ValidationError(f"Required field '{missing}' missing or empty")

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """Collapse runs of whitespace; blank input becomes None."""
        if value is None:
            return None
        return " ".join(str(value).split()) or None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        # bool is an int subclass but never a valid count or id
        if isinstance(value, bool):
            raise ValidationError(f"Expected an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Expected an integer, got {value!r}") from None

    @staticmethod
    def normalize_color(value: Any) -> Optional[str]:
        """'#rrggbb' in upper case, or None."""
        if value is None:
            return None
        color = str(value).strip()
        if HEX_COLOR.match(color) is None:
            raise ValidationError(f"Invalid color '{value}': expected #RRGGBB")
        return color.upper()

    @staticmethod
    def normalize_score(value: Any) -> int:
        """
        Mood score as an int between MIN_MOOD_SCORE and MAX_MOOD_SCORE.

        Raises:
            ValidationError: If missing, not an integer or out of range
        """
        score = DataValidator.normalize_int(value)
        if score is None:
            raise ValidationError("Mood score is required")
        if score < MIN_MOOD_SCORE or score > MAX_MOOD_SCORE:
            raise ValidationError(
                f"Mood score must be between {MIN_MOOD_SCORE} and {MAX_MOOD_SCORE}, "
                f"got {score}"
            )
        return score

    @staticmethod
    def normalize_timezone(value: Any) -> Optional[str]:
        """IANA zone name checked against tzdata; blank input becomes None."""
        name = DataValidator.normalize_string(value)
        if name is None:
            return None
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown timezone: {name}") from None
        return name

    @staticmethod
    def normalize_coordinate(value: Any, limit: float, label: str) -> Optional[float]:
        """
        Float within [-limit, limit]; blank input becomes None.

        Args:
            value: Candidate number or numeric string
            limit: 90 for latitude, 180 for longitude
            label: Field name used in the error message
        """
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValidationError(f"{label} must be a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} must be a number, got {value!r}") from None
        # NaN fails both comparisons
        if not -limit <= number <= limit:
            raise ValidationError(f"{label} must be between {-limit:g} and {limit:g}")
        return number

    @staticmethod
    def normalize_location_name(value: Any) -> Optional[str]:
        name = DataValidator.normalize_string(value)
        if name is not None and len(name) > MAX_LOCATION_NAME:
            raise ValidationError(
                f"Location name must be at most {MAX_LOCATION_NAME} characters"
            )
        return name
