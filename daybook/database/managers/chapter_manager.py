#!/usr/bin/env python3
"""
chapter_manager.py
------------------
Manages chapters, the titled stretches of a user's life.

A chapter belongs to a category and owns an ordered list of periods. This
manager handles the chapter record itself; period dates are only ever
written by PeriodManager. A chapter cannot be deleted while it still owns
any period.

Key Features:
    - Create, update, list and delete chapters
    - Format chapters with period dates in the user's timezone
    - Chapter details: mood statistics, media and per-period density over
      the days covered by the chapter's periods
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

# --- Local imports ---
from daybook.analytics.mood_score import build_mood_score_map, compute_average_mood_score
from daybook.core.exceptions import InUseError, ValidationError
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.temporal import to_local_date, to_local_iso, today_in
from daybook.core.validators import DataValidator
from daybook.database.decorators import DatabaseOperation
from daybook.database.models import Category, Chapter, Day, MoodState, Period
from .base_manager import BaseManager
from .day_manager import DayManager
from .user_manager import UserManager


class ChapterManager(BaseManager):
    """Manages Chapter records."""

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        super().__init__(session, logger)
        self.users = UserManager(session, logger)

    # -------------------------------------------------------------------------
    # Store queries
    # -------------------------------------------------------------------------

    def get(self, user_id: int, chapter_id: int) -> Chapter:
        """
        Retrieve a chapter owned by user_id.

        Raises:
            NotFoundError: If absent or owned by another user
        """
        return self._get_owned(Chapter, chapter_id, user_id, "chapter")

    def count_periods(self, chapter_id: int) -> int:
        """Number of periods owned by a chapter."""
        return self._count(Period, chapter_id=chapter_id)

    def list_chapters(self, user_id: int) -> List[Dict[str, Any]]:
        """All chapters of a user, most recently updated first, formatted."""
        with DatabaseOperation(self.logger, "list_chapters"):
            tz_name = self.users.get_timezone(user_id)
            stmt = (
                select(Chapter)
                .options(selectinload(Chapter.periods), selectinload(Chapter.category))
                .where(Chapter.user_id == user_id)
                .order_by(Chapter.updated_at.desc(), Chapter.id.desc())
            )
            return [self.format(c, tz_name) for c in self.session.scalars(stmt)]

    def get_chapter(self, user_id: int, chapter_id: int) -> Dict[str, Any]:
        """A single chapter, formatted."""
        chapter = self.get(user_id, chapter_id)
        return self.format(chapter, self.users.get_timezone(user_id))

    def list_by_category(self, user_id: int) -> Dict[int, List[Chapter]]:
        """Chapters of a user grouped by category id."""
        stmt = (
            select(Chapter)
            .options(selectinload(Chapter.periods))
            .where(Chapter.user_id == user_id)
        )
        grouped: Dict[int, List[Chapter]] = {}
        for chapter in self.session.scalars(stmt):
            grouped.setdefault(chapter.category_id, []).append(chapter)
        return grouped

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_chapter(self, user_id: int, metadata: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a chapter.

        Args:
            user_id: Owning user
            metadata: 'title', 'category_id' and optional 'description'

        Raises:
            ValidationError: If title or category is missing
            NotFoundError: If the category does not belong to the user
        """
        with DatabaseOperation(self.logger, "create_chapter"):
            DataValidator.validate_required_fields(metadata, ["title", "category_id"])
            title = DataValidator.normalize_string(metadata["title"])
            if not title:
                raise ValidationError("Chapter title cannot be empty")
            category_id = DataValidator.normalize_int(metadata["category_id"])
            self._get_owned(Category, category_id, user_id, "category")

            chapter = Chapter(
                user_id=user_id,
                category_id=category_id,
                title=title,
                description=DataValidator.normalize_string(metadata.get("description")),
            )
            self.session.add(chapter)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Created chapter: {title}", {"chapter_id": chapter.id}
            )
            return self.format(chapter, self.users.get_timezone(user_id))

    def update_chapter(
        self, user_id: int, chapter_id: int, metadata: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Update title, description or category of a chapter.

        Only keys present in metadata are changed.

        Raises:
            NotFoundError: If the chapter or new category is not the user's
        """
        with DatabaseOperation(self.logger, "update_chapter"):
            chapter = self.get(user_id, chapter_id)

            if metadata.get("category_id") is not None:
                category_id = DataValidator.normalize_int(metadata["category_id"])
                if category_id != chapter.category_id:
                    self._get_owned(Category, category_id, user_id, "category")
                    chapter.category_id = category_id
            if "title" in metadata:
                title = DataValidator.normalize_string(metadata["title"])
                if not title:
                    raise ValidationError("Chapter title cannot be empty")
                chapter.title = title
            if "description" in metadata:
                chapter.description = DataValidator.normalize_string(metadata["description"])

            self.session.flush()
            self.session.expire(chapter)
            return self.format(chapter, self.users.get_timezone(user_id))

    def delete_chapter(self, user_id: int, chapter_id: int) -> None:
        """
        Delete a chapter that owns no periods.

        Raises:
            NotFoundError: If the chapter does not belong to the user
            InUseError: If the chapter still owns periods
        """
        with DatabaseOperation(self.logger, "delete_chapter"):
            chapter = self.get(user_id, chapter_id)
            period_count = self.count_periods(chapter_id)
            if period_count > 0:
                raise InUseError(
                    "chapter", {"chapter_id": chapter_id, "period_count": period_count}
                )
            self.session.delete(chapter)
            self.session.flush()

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------

    def get_chapter_details(
        self, user_id: int, chapter_id: int, now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        A chapter with statistics over the days its periods cover.

        Days count when their date falls inside any period; open periods run
        through today in the user's timezone.

        Returns:
            The formatted chapter plus 'moodStats', 'media', 'totalDays',
            'totalMedia' and 'analytics'
        """
        with DatabaseOperation(self.logger, "get_chapter_details"):
            tz_name = self.users.get_timezone(user_id)
            chapter = self.get(user_id, chapter_id)
            today = today_in(tz_name, now)

            ranges = self._local_ranges(chapter.periods, tz_name, today)
            days: List[Day] = []
            if ranges:
                earliest = min(start for start, _ in ranges)
                latest = max(end for _, end in ranges)
                if earliest <= latest:
                    candidates = DayManager(self.session, self.logger).list_range(
                        user_id, earliest, latest
                    )
                    days = [
                        day
                        for day in candidates
                        if any(start <= day.date <= end for start, end in ranges)
                    ]

            mood_counts: Dict[int, Dict[str, Any]] = {}
            for day in days:
                mood = day.mood_state
                if mood is None:
                    continue
                entry = mood_counts.setdefault(
                    mood.id, {"name": mood.name, "color": mood.color, "count": 0}
                )
                entry["count"] += 1

            total_mood_days = sum(entry["count"] for entry in mood_counts.values())
            ranked = sorted(mood_counts.items(), key=lambda item: -item[1]["count"])

            def percentage(count: int) -> int:
                return round(count / total_mood_days * 100) if total_mood_days else 0

            media = [DayManager.format_media(m) for day in days for m in day.media]
            score_map = build_mood_score_map(
                self.session.scalars(select(MoodState).where(MoodState.user_id == user_id))
            )

            density = []
            for start, end in ranges:
                active_days = sum(
                    1 for day in days if start <= day.date <= end and day.has_content
                )
                density.append(
                    {
                        "start": start.isoformat(),
                        "end": end.isoformat(),
                        "activeDays": active_days,
                    }
                )

            result = self.format(chapter, tz_name)
            result.update(
                {
                    "moodStats": [
                        {
                            "moodName": entry["name"],
                            "moodColor": entry["color"],
                            "count": entry["count"],
                            "percentage": percentage(entry["count"]),
                        }
                        for _, entry in ranked
                    ],
                    "media": media,
                    "totalDays": len(days),
                    "totalMedia": len(media),
                    "analytics": {
                        "totalPeriods": len(chapter.periods),
                        "totalDays": len(days),
                        "totalMedia": len(media),
                        "averageMoodScore": compute_average_mood_score(days, score_map),
                        "moodDistribution": [
                            {
                                "moodId": mood_id,
                                "moodName": entry["name"],
                                "color": entry["color"],
                                "count": entry["count"],
                                "percentage": percentage(entry["count"]),
                            }
                            for mood_id, entry in ranked
                        ],
                        "density": density,
                    },
                }
            )
            return result

    @staticmethod
    def _local_ranges(
        periods: List[Period], tz_name: str, today: date
    ) -> List[Tuple[date, date]]:
        """Inclusive local-date ranges of periods, in chapter order."""
        return [
            (
                to_local_date(period.start_date, tz_name),
                to_local_date(period.end_date, tz_name)
                if not period.is_active
                else today,
            )
            for period in periods
        ]

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    @staticmethod
    def format_period(period: Period, tz_name: str) -> Dict[str, Any]:
        """Serialize a period with dates as local 'YYYY-MM-DD' strings."""
        return {
            "id": period.id,
            "startDate": to_local_iso(period.start_date, tz_name),
            "endDate": to_local_iso(period.end_date, tz_name),
            "isActive": period.is_active,
            "comment": period.comment,
            "createdAt": period.created_at.isoformat(),
        }

    @classmethod
    def format(cls, chapter: Chapter, tz_name: str) -> Dict[str, Any]:
        """Serialize a chapter and its periods (most recent start first)."""
        category = chapter.category
        active = chapter.active_period
        return {
            "id": chapter.id,
            "title": chapter.title,
            "description": chapter.description,
            "category": {
                "id": category.id,
                "name": category.name,
                "color": category.color,
            },
            "periods": [cls.format_period(p, tz_name) for p in chapter.periods],
            "activePeriodId": active.id if active is not None else None,
            "createdAt": chapter.created_at.isoformat(),
            "updatedAt": chapter.updated_at.isoformat(),
        }
