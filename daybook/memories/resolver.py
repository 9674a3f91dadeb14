#!/usr/bin/env python3
"""
resolver.py
-----------
"On this day" memories.

Given a base date, the resolver looks one month, six months and one year
back using calendar arithmetic (dateutil's relativedelta), so a month or
year that lacks the base day clamps to its last day: 2024-03-31 minus one
month is 2024-02-29 and 2024-02-29 minus one year is 2023-02-28.

Day mode returns the historical days that carry a mood or media. Week mode
does the same for the Monday-Sunday week around the base date, reporting
how many days of each historical week were active and how much media they
hold. Nothing is returned when the base day (or week) itself is empty.
Results always follow the interval order and hold at most one entry per
interval.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from daybook.core.exceptions import ValidationError
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.temporal import (
    DateInput,
    parse_iso_date,
    subtract_interval,
    today_in,
    week_bounds,
)
from daybook.database.decorators import DatabaseOperation
from daybook.database.managers import DayManager, UserManager

MODE_DAY = "day"
MODE_WEEK = "week"
MODES = (MODE_DAY, MODE_WEEK)

# (unit, value) pairs in result order
INTERVALS: Tuple[Tuple[str, int], ...] = (("months", 1), ("months", 6), ("years", 1))


def _interval_dict(unit: str, value: int) -> Dict[str, Any]:
    return {"type": unit, "value": value}


@dataclass
class DayMemory:
    interval: Tuple[str, int]
    date: date
    mood: Optional[Dict[str, Any]]
    media_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval": _interval_dict(*self.interval),
            "date": self.date.isoformat(),
            "mood": self.mood,
            "mediaCount": self.media_count,
        }


@dataclass
class WeekMemory:
    interval: Tuple[str, int]
    week_start: date
    week_end: date
    active_days: int
    total_media: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval": _interval_dict(*self.interval),
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "activeDays": self.active_days,
            "totalMedia": self.total_media,
        }


@dataclass
class DayContext:
    base_date: date
    memories: List[DayMemory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": MODE_DAY,
            "baseDate": self.base_date.isoformat(),
            "memories": [memory.to_dict() for memory in self.memories],
        }


@dataclass
class WeekContext:
    week_start: date
    week_end: date
    memories: List[WeekMemory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": MODE_WEEK,
            "baseWeek": {
                "start": self.week_start.isoformat(),
                "end": self.week_end.isoformat(),
            },
            "memories": [memory.to_dict() for memory in self.memories],
        }


def historical_dates(base: date) -> List[Tuple[Tuple[str, int], date]]:
    """Candidate dates for each interval, in result order."""
    return [((unit, value), subtract_interval(base, unit, value)) for unit, value in INTERVALS]


class MemoryResolver:
    """
    Resolves historical memories for a user.

    Attributes:
        session: SQLAlchemy session
        logger: Optional logger
        days: Day store
        users: Timezone provider
    """

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        self.session = session
        self.logger = logger
        self.days = DayManager(session, logger)
        self.users = UserManager(session, logger)

    def _base_date(
        self, user_id: int, value: Optional[DateInput], now: Optional[datetime]
    ) -> date:
        if value is None:
            return today_in(self.users.get_timezone(user_id), now)
        return parse_iso_date(value)

    def get_on_this_day(
        self,
        user_id: int,
        day: Optional[DateInput] = None,
        now: Optional[datetime] = None,
    ) -> DayContext:
        """
        Day-mode memories for a date (today in the user's timezone by default).

        Raises:
            InvalidDateError: If the date cannot be parsed
        """
        return self.get_day_context(user_id, self._base_date(user_id, day, now))

    def get_context(
        self,
        user_id: int,
        mode: str,
        day: Optional[DateInput] = None,
        now: Optional[datetime] = None,
    ) -> Any:
        """
        Memories in 'day' or 'week' mode.

        Raises:
            ValidationError: If the mode is unknown
            InvalidDateError: If the date cannot be parsed
        """
        if mode not in MODES:
            raise ValidationError(f"Unknown memory mode '{mode}', expected one of {MODES}")
        base = self._base_date(user_id, day, now)
        if mode == MODE_DAY:
            return self.get_day_context(user_id, base)
        return self.get_week_context(user_id, base)

    def get_day_context(self, user_id: int, base: date) -> DayContext:
        """Historical days with content for a base date."""
        with DatabaseOperation(self.logger, "resolve_day_memories"):
            context = DayContext(base_date=base)
            if not self.days.has_content(user_id, base):
                return context

            targets = historical_dates(base)
            found = self.days.find_by_dates(user_id, [target for _, target in targets])

            for interval, target in targets:
                day = found.get(target)
                if day is None or not day.has_content:
                    continue
                mood = day.mood_state
                context.memories.append(
                    DayMemory(
                        interval=interval,
                        date=target,
                        mood=(
                            {"id": mood.id, "name": mood.name, "color": mood.color}
                            if mood is not None
                            else None
                        ),
                        media_count=len(day.media),
                    )
                )

            safe_logger(self.logger).log_debug(
                "Resolved day memories",
                {"base_date": base.isoformat(), "count": len(context.memories)},
            )
            return context

    def get_week_context(self, user_id: int, base: date) -> WeekContext:
        """Historical weeks with content for the week around a base date."""
        with DatabaseOperation(self.logger, "resolve_week_memories"):
            week_start, week_end = week_bounds(base)
            context = WeekContext(week_start=week_start, week_end=week_end)
            if not self.days.has_content_in_range(user_id, week_start, week_end):
                return context

            for interval, start in historical_dates(week_start):
                end = start + timedelta(days=6)
                summary = self.days.summarize_range(user_id, start, end)
                if summary["active_days"] == 0:
                    continue
                context.memories.append(
                    WeekMemory(
                        interval=interval,
                        week_start=start,
                        week_end=end,
                        active_days=summary["active_days"],
                        total_media=summary["total_media"],
                    )
                )
            return context
