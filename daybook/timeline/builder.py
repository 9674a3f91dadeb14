#!/usr/bin/env python3
"""
builder.py
----------
Timeline views over chapters and days.

A range timeline lists every period that intersects an inclusive range of
local dates together with the day records stored in it. Without explicit
bounds the range runs from one year before today through today in the
user's timezone. A week timeline covers the Monday-Sunday week around a
date and always holds seven days; dates without a record appear blank.

Periods are newest start first and carry their chapter and category.
Period dates are local 'YYYY-MM-DD' strings in the user's timezone.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from daybook.core.exceptions import InvalidDateRangeError
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.temporal import (
    DateInput,
    parse_iso_date,
    subtract_interval,
    today_in,
    week_bounds,
)
from daybook.database.decorators import DatabaseOperation
from daybook.database.managers import (
    ChapterManager,
    DayManager,
    PeriodManager,
    UserManager,
)
from daybook.database.models import Period


@dataclass
class RangeTimeline:
    start: date
    end: date
    periods: List[Dict[str, Any]] = field(default_factory=list)
    days: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.start.isoformat(),
            "to": self.end.isoformat(),
            "periods": self.periods,
            "days": self.days,
        }


@dataclass
class WeekTimeline:
    week_start: date
    week_end: date
    periods: List[Dict[str, Any]] = field(default_factory=list)
    days: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "periods": self.periods,
            "days": self.days,
        }


def format_timeline_period(period: Period, tz_name: str) -> Dict[str, Any]:
    """A chapter period with its chapter title and category."""
    chapter = period.chapter
    category = chapter.category
    entry = ChapterManager.format_period(period, tz_name)
    entry["chapter"] = {"id": chapter.id, "title": chapter.title}
    entry["category"] = {
        "id": category.id,
        "name": category.name,
        "color": category.color,
    }
    return entry


class TimelineBuilder:
    """
    Builds range and week timelines for a user.

    Attributes:
        session: SQLAlchemy session
        logger: Optional logger
        days: Day store
        periods: Period store
        users: Timezone provider
    """

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        self.session = session
        self.logger = logger
        self.days = DayManager(session, logger)
        self.periods = PeriodManager(session, logger)
        self.users = UserManager(session, logger)

    def get_timeline(
        self,
        user_id: int,
        from_date: Optional[DateInput] = None,
        to_date: Optional[DateInput] = None,
        now: Optional[datetime] = None,
    ) -> RangeTimeline:
        """
        Periods and stored days of an inclusive date range.

        Args:
            user_id: Owning user
            from_date: First date; one year before today when omitted
            to_date: Last date; today in the user's timezone when omitted
            now: Reference instant for the defaults

        Raises:
            InvalidDateError: If a bound cannot be parsed
            InvalidDateRangeError: If from_date is after to_date
        """
        with DatabaseOperation(self.logger, "build_timeline"):
            tz_name = self.users.get_timezone(user_id)
            today = today_in(tz_name, now)
            start = (
                parse_iso_date(from_date)
                if from_date is not None
                else subtract_interval(today, "years", 1)
            )
            end = parse_iso_date(to_date) if to_date is not None else today
            if start > end:
                raise InvalidDateRangeError(
                    details={"from": start.isoformat(), "to": end.isoformat()}
                )

            timeline = RangeTimeline(
                start=start,
                end=end,
                periods=self._periods(user_id, start, end, tz_name),
                days=[
                    DayManager.format_day(day)
                    for day in self.days.list_range(user_id, start, end)
                ],
            )
            safe_logger(self.logger).log_debug(
                "Built timeline",
                {
                    "from": start.isoformat(),
                    "to": end.isoformat(),
                    "periods": len(timeline.periods),
                    "days": len(timeline.days),
                },
            )
            return timeline

    def get_week_timeline(
        self,
        user_id: int,
        day: Optional[DateInput] = None,
        now: Optional[datetime] = None,
    ) -> WeekTimeline:
        """
        Periods and all seven days of the week around a date.

        Args:
            user_id: Owning user
            day: Any date of the week; today in the user's timezone when omitted
            now: Reference instant for the default

        Raises:
            InvalidDateError: If the date cannot be parsed
        """
        with DatabaseOperation(self.logger, "build_week_timeline"):
            tz_name = self.users.get_timezone(user_id)
            base = parse_iso_date(day) if day is not None else today_in(tz_name, now)
            monday, sunday = week_bounds(base)

            stored = {d.date: d for d in self.days.list_range(user_id, monday, sunday)}
            days = []
            for offset in range(7):
                current = monday + timedelta(days=offset)
                record = stored.get(current)
                days.append(
                    DayManager.format_day(record)
                    if record is not None
                    else DayManager.blank_day(current)
                )

            return WeekTimeline(
                week_start=monday,
                week_end=sunday,
                periods=self._periods(user_id, monday, sunday, tz_name),
                days=days,
            )

    def _periods(
        self, user_id: int, start: date, end: date, tz_name: str
    ) -> List[Dict[str, Any]]:
        return [
            format_timeline_period(period, tz_name)
            for period in self.periods.find_in_range(user_id, start, end)
        ]
