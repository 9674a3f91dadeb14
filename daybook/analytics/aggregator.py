#!/usr/bin/env python3
"""
aggregator.py
-------------
Mood overview report for a single user.

compute_mood_overview() is a pure function over already-loaded records;
MoodAnalytics.get_mood_overview() loads those records through the database
managers and converts period instants to local dates in the user's
timezone before delegating.

Report sections:
    - total days with a mood and their average score
    - mood distribution (count and rounded percentage per mood)
    - best and worst category by average mood inside their periods
    - the last 30 days of scores
    - weekday insights (from 14 scored days on)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from daybook.core.logging_manager import DaybookLogger
from daybook.core.temporal import to_local_date, today_in
from daybook.database.decorators import handle_db_errors, log_database_operation
from daybook.database.managers import (
    CategoryManager,
    ChapterManager,
    DayManager,
    MoodStateManager,
    PeriodManager,
    UserManager,
)
from .mood_score import (
    build_mood_score_map,
    compute_average_mood_score,
    scored_days_count,
)
from .weekday_insights import DaySample, WeekdayInsights, compute_weekday_insights

TREND_WINDOW_DAYS = 30

LocalRange = Tuple[date, Optional[date]]


@dataclass
class CategoryRanges:
    """A category and the local date ranges of all its chapters' periods."""

    category_id: int
    name: str
    ranges: List[LocalRange] = field(default_factory=list)


@dataclass
class MoodDistributionItem:
    mood_id: int
    mood_name: str
    color: str
    count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "moodId": self.mood_id,
            "moodName": self.mood_name,
            "color": self.color,
            "count": self.count,
            "percentage": self.percentage,
        }


@dataclass
class CategoryMoodSummary:
    category_id: int
    name: str
    average_mood_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "name": self.name,
            "averageMoodScore": self.average_mood_score,
        }


@dataclass
class TrendPoint:
    date: date
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "score": self.score}


@dataclass
class MoodOverview:
    """The mood overview report."""

    total_days_with_mood: int
    average_mood_score: float
    mood_distribution: List[MoodDistributionItem]
    best_category: Optional[CategoryMoodSummary]
    worst_category: Optional[CategoryMoodSummary]
    trend_last_30_days: List[TrendPoint]
    weekday_insights: Optional[WeekdayInsights]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDaysWithMood": self.total_days_with_mood,
            "averageMoodScore": self.average_mood_score,
            "moodDistribution": [item.to_dict() for item in self.mood_distribution],
            "bestCategory": self.best_category.to_dict() if self.best_category else None,
            "worstCategory": (
                self.worst_category.to_dict() if self.worst_category else None
            ),
            "trendLast30Days": [point.to_dict() for point in self.trend_last_30_days],
            "weekdayInsights": (
                self.weekday_insights.to_dict() if self.weekday_insights else None
            ),
        }


# ----- Pure computations -----


def compute_mood_distribution(
    mood_days: Sequence[Any], mood_states: Mapping[int, Any]
) -> List[MoodDistributionItem]:
    """
    Count and percentage per observed mood, most frequent first.

    Ties keep the order in which the moods were first seen.
    """
    counts: Dict[int, int] = {}
    for day in mood_days:
        if day.mood_state_id is None:
            continue
        counts[day.mood_state_id] = counts.get(day.mood_state_id, 0) + 1

    total = len(mood_days)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    items = []
    for mood_id, count in ranked:
        mood = mood_states.get(mood_id)
        items.append(
            MoodDistributionItem(
                mood_id=mood_id,
                mood_name=mood.name if mood is not None else "",
                color=mood.color if mood is not None else "",
                count=count,
                percentage=round(count / total * 100) if total else 0,
            )
        )
    return items


def _in_any_range(day: date, ranges: Iterable[Tuple[date, date]]) -> bool:
    return any(start <= day <= end for start, end in ranges)


def compute_category_extremes(
    categories: Sequence[CategoryRanges],
    mood_days: Sequence[Any],
    score_map: Mapping[int, int],
    today: date,
) -> Tuple[Optional[CategoryMoodSummary], Optional[CategoryMoodSummary]]:
    """
    Best and worst category by average mood inside their period ranges.

    Open ranges run through today. Categories without periods or without a
    scored day inside their ranges are skipped. The worst category is None
    when fewer than two categories qualify.
    """
    summaries: List[CategoryMoodSummary] = []
    for category in categories:
        if not category.ranges:
            continue
        closed = [(start, end if end is not None else today) for start, end in category.ranges]
        inside = [day for day in mood_days if _in_any_range(day.date, closed)]
        if scored_days_count(inside, score_map) == 0:
            continue
        summaries.append(
            CategoryMoodSummary(
                category_id=category.category_id,
                name=category.name,
                average_mood_score=compute_average_mood_score(inside, score_map),
            )
        )

    if not summaries:
        return None, None

    ordered = sorted(summaries, key=lambda s: -s.average_mood_score)
    best = ordered[0]
    worst = ordered[-1] if len(ordered) > 1 else None
    return best, worst


def compute_trend(
    mood_days: Sequence[Any], score_map: Mapping[int, int], today: date
) -> List[TrendPoint]:
    """Scored days from today minus 30 days through today; zero scores are dropped."""
    start = today - timedelta(days=TREND_WINDOW_DAYS)
    points = []
    for day in sorted(mood_days, key=lambda d: d.date):
        if not start <= day.date <= today:
            continue
        score = score_map.get(day.mood_state_id, 0)
        if score > 0:
            points.append(TrendPoint(day.date, score))
    return points


def compute_activity_scores(
    media_counts: Mapping[date, int], period_bounds: Iterable[LocalRange]
) -> Dict[date, int]:
    """Media count plus periods starting or ending on each date."""
    activity: Dict[date, int] = dict(media_counts)
    for start, end in period_bounds:
        activity[start] = activity.get(start, 0) + 1
        if end is not None:
            activity[end] = activity.get(end, 0) + 1
    return activity


def compute_mood_overview(
    mood_states: Sequence[Any],
    mood_days: Sequence[Any],
    categories: Sequence[CategoryRanges],
    media_counts: Mapping[date, int],
    period_bounds: Sequence[LocalRange],
    today: date,
) -> MoodOverview:
    """
    Build the mood overview from loaded records.

    Args:
        mood_states: The user's mood states (id, name, color, score)
        mood_days: Days with a mood (date, mood_state_id)
        categories: Categories with local period ranges
        media_counts: Media count per local date
        period_bounds: Local (start, end) of every period of the user
        today: Today in the user's timezone

    Returns:
        MoodOverview report
    """
    score_map = build_mood_score_map(mood_states)
    moods_by_id = {mood.id: mood for mood in mood_states}

    best, worst = compute_category_extremes(categories, mood_days, score_map, today)
    activity = compute_activity_scores(media_counts, period_bounds)

    samples = []
    for day in sorted(mood_days, key=lambda d: d.date):
        score = score_map.get(day.mood_state_id)
        if score is None or score < 0:
            continue
        samples.append(DaySample(day.date, score, activity.get(day.date, 0)))

    return MoodOverview(
        total_days_with_mood=len(mood_days),
        average_mood_score=compute_average_mood_score(mood_days, score_map),
        mood_distribution=compute_mood_distribution(mood_days, moods_by_id),
        best_category=best,
        worst_category=worst,
        trend_last_30_days=compute_trend(mood_days, score_map, today),
        weekday_insights=compute_weekday_insights(samples),
    )


# ----- Database-backed entry point -----


class MoodAnalytics:
    """
    Loads a user's records and produces the mood overview.

    Attributes:
        logger: Optional logger for analytics runs
    """

    def __init__(self, logger: Optional[DaybookLogger] = None) -> None:
        self.logger = logger

    @handle_db_errors
    @log_database_operation("get_mood_overview")
    def get_mood_overview(
        self, session: Session, user_id: int, today: Optional[date] = None
    ) -> MoodOverview:
        """
        Mood overview of a user.

        Args:
            session: Active SQLAlchemy session
            user_id: User to report on
            today: Override of today's date (defaults to today in the user's tz)

        Raises:
            NotFoundError: If the user does not exist
        """
        tz_name = UserManager(session, self.logger).get_timezone(user_id)
        if today is None:
            today = today_in(tz_name)

        mood_states = MoodStateManager(session, self.logger).get_all(user_id)
        days = DayManager(session, self.logger)
        mood_days = days.list_with_mood(user_id)
        media_counts = days.list_with_media_counts(user_id)

        def local_range(period: Any) -> LocalRange:
            return (
                to_local_date(period.start_date, tz_name),
                to_local_date(period.end_date, tz_name)
                if period.end_date is not None
                else None,
            )

        chapters_by_category = ChapterManager(session, self.logger).list_by_category(
            user_id
        )
        categories = [
            CategoryRanges(
                category_id=category.id,
                name=category.name,
                ranges=[
                    local_range(period)
                    for chapter in chapters_by_category.get(category.id, [])
                    for period in chapter.periods
                ],
            )
            for category in CategoryManager(session, self.logger).get_all(user_id)
        ]
        period_bounds = [
            local_range(period)
            for period in PeriodManager(session, self.logger).list_for_user(user_id)
        ]

        return compute_mood_overview(
            mood_states=mood_states,
            mood_days=mood_days,
            categories=categories,
            media_counts=media_counts,
            period_bounds=period_bounds,
            today=today,
        )
