#!/usr/bin/env python3
"""
day_manager.py
--------------
Manages daily records and their media metadata.

A Day is keyed by (user, calendar date) and created on first write. Writes
follow the future-date rule: nothing may be recorded for a date more than
one day ahead of today in the user's timezone. Reads are the day store used
by analytics, chapter details and the memories resolver.

Key Features:
    - Upsert mood / main media for a date
    - Attach and detach media metadata
    - Location name and coordinates per day
    - Range, mood-only and media-count queries
    - Content checks for single dates and ranges
    - camelCase day and media payloads
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

# --- Third party imports ---
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

# --- Local imports ---
from daybook.core.exceptions import InvalidDateRangeError, NotFoundError
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.temporal import DateInput, assert_not_too_far_in_future, parse_iso_date
from daybook.core.validators import DataValidator
from daybook.database.decorators import DatabaseOperation
from daybook.database.models import Day, Media, MoodState
from .base_manager import UNSET, BaseManager
from .user_manager import UserManager


class DayManager(BaseManager):
    """Manages Day and Media records."""

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        super().__init__(session, logger)
        self.users = UserManager(session, logger)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert(
        self,
        user_id: int,
        day_date: DateInput,
        mood_state_id: Any = UNSET,
        main_media_id: Any = UNSET,
        now: Optional[datetime] = None,
    ) -> Day:
        """
        Create or update the day record for a date.

        Args:
            user_id: Owning user
            day_date: Calendar date
            mood_state_id: New mood (None clears it; omitted keeps it)
            main_media_id: New main media (None clears it; omitted keeps it)
            now: Reference instant for the future-date rule

        Returns:
            The day record

        Raises:
            InvalidDateError: If the date cannot be parsed
            FutureDateError: If the date is after tomorrow
            NotFoundError: If the mood state or media does not belong to the user
        """
        with DatabaseOperation(self.logger, "upsert_day"):
            tz_name = self.users.get_timezone(user_id)
            target = assert_not_too_far_in_future(day_date, tz_name, now)

            if mood_state_id is not UNSET and mood_state_id is not None:
                self._get_owned(MoodState, mood_state_id, user_id, "mood_state")

            day = self._get_or_create_day(user_id, target)

            if mood_state_id is not UNSET:
                day.mood_state_id = mood_state_id

            if main_media_id is not UNSET:
                if main_media_id is not None:
                    media = self._get_by_id(Media, main_media_id)
                    if media is None or media.day_id != day.id:
                        raise NotFoundError("media", {"media_id": main_media_id})
                day.main_media_id = main_media_id

            self.session.flush()
            self.session.expire(day, ["mood_state", "main_media"])
            safe_logger(self.logger).log_debug(
                "Upserted day",
                {"user_id": user_id, "date": target.isoformat(), "day_id": day.id},
            )
            return day

    def add_media(
        self,
        user_id: int,
        day_date: DateInput,
        metadata: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> Media:
        """
        Attach media metadata to a date, creating the day if needed.

        Args:
            user_id: Owning user
            day_date: Calendar date
            metadata: 'storage_key', 'file_name', optional 'content_type', 'size'
            now: Reference instant for the future-date rule

        Returns:
            The created media record
        """
        with DatabaseOperation(self.logger, "add_media"):
            DataValidator.validate_required_fields(metadata, ["storage_key", "file_name"])
            tz_name = self.users.get_timezone(user_id)
            target = assert_not_too_far_in_future(day_date, tz_name, now)

            day = self._get_or_create_day(user_id, target)
            media = Media(
                storage_key=str(metadata["storage_key"]),
                file_name=DataValidator.normalize_string(metadata["file_name"]),
                content_type=DataValidator.normalize_string(metadata.get("content_type")),
                size=DataValidator.normalize_int(metadata.get("size")) or 0,
            )
            day.media.append(media)
            self.session.flush()
            return media

    def remove_media(self, user_id: int, media_id: int) -> None:
        """
        Detach and delete a media record.

        Clears the day's main media pointer when it referenced this media.

        Raises:
            NotFoundError: If the media does not belong to the user
        """
        with DatabaseOperation(self.logger, "remove_media"):
            media = self._get_by_id(Media, media_id)
            if media is None or media.day.user_id != user_id:
                raise NotFoundError("media", {"media_id": media_id})

            day = media.day
            if day.main_media_id == media.id:
                day.main_media_id = None
                self.session.flush()

            day.media.remove(media)
            self.session.flush()

    def update_location(
        self,
        user_id: int,
        day_date: DateInput,
        location_name: Any = UNSET,
        latitude: Any = UNSET,
        longitude: Any = UNSET,
        now: Optional[datetime] = None,
    ) -> Day:
        """
        Set or clear where a day was spent.

        Each field follows the upsert convention: omitted keeps the stored
        value, None clears it. A location does not give the day content.

        Raises:
            FutureDateError: If the date is after tomorrow
            ValidationError: If the name is too long or a coordinate out of range
        """
        with DatabaseOperation(self.logger, "update_location"):
            tz_name = self.users.get_timezone(user_id)
            target = assert_not_too_far_in_future(day_date, tz_name, now)

            changes: Dict[str, Any] = {}
            if location_name is not UNSET:
                changes["location_name"] = DataValidator.normalize_location_name(
                    location_name
                )
            if latitude is not UNSET:
                changes["latitude"] = DataValidator.normalize_coordinate(
                    latitude, 90, "latitude"
                )
            if longitude is not UNSET:
                changes["longitude"] = DataValidator.normalize_coordinate(
                    longitude, 180, "longitude"
                )

            day = self._get_or_create_day(user_id, target)
            for key, value in changes.items():
                setattr(day, key, value)
            self.session.flush()
            safe_logger(self.logger).log_debug(
                "Updated day location",
                {"date": target.isoformat(), "fields": sorted(changes)},
            )
            return day

    def _get_or_create_day(self, user_id: int, target: date) -> Day:
        day = self.get(user_id, target)
        if day is None:
            day = Day(user_id=user_id, date=target)
            self.session.add(day)
            self.session.flush()
        return day

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, user_id: int, day_date: DateInput) -> Optional[Day]:
        """Day record of a date, or None."""
        target = parse_iso_date(day_date)
        return self.session.scalar(
            select(Day).where(Day.user_id == user_id, Day.date == target)
        )

    def list_range(
        self, user_id: int, from_date: DateInput, to_date: DateInput
    ) -> List[Day]:
        """
        Days between two dates inclusive, oldest first.

        Raises:
            InvalidDateRangeError: If from_date is after to_date
        """
        start = parse_iso_date(from_date)
        end = parse_iso_date(to_date)
        if start > end:
            raise InvalidDateRangeError(
                details={"from": start.isoformat(), "to": end.isoformat()}
            )
        stmt = (
            select(Day)
            .options(selectinload(Day.media), selectinload(Day.mood_state))
            .where(Day.user_id == user_id, Day.date >= start, Day.date <= end)
            .order_by(Day.date)
        )
        return list(self.session.scalars(stmt).all())

    def list_with_mood(self, user_id: int) -> List[Day]:
        """All days of the user that carry a mood, oldest first."""
        stmt = (
            select(Day)
            .options(selectinload(Day.mood_state))
            .where(Day.user_id == user_id, Day.mood_state_id.is_not(None))
            .order_by(Day.date)
        )
        return list(self.session.scalars(stmt).all())

    def list_with_media_counts(
        self,
        user_id: int,
        from_date: Optional[DateInput] = None,
        to_date: Optional[DateInput] = None,
    ) -> Dict[date, int]:
        """
        Media count per date for days with at least one media.

        Args:
            user_id: Owning user
            from_date: Optional inclusive lower bound
            to_date: Optional inclusive upper bound
        """
        stmt = (
            select(Day.date, func.count(Media.id))
            .join(Media, Media.day_id == Day.id)
            .where(Day.user_id == user_id)
            .group_by(Day.date)
        )
        if from_date is not None:
            stmt = stmt.where(Day.date >= parse_iso_date(from_date))
        if to_date is not None:
            stmt = stmt.where(Day.date <= parse_iso_date(to_date))
        return {row[0]: int(row[1]) for row in self.session.execute(stmt)}

    def find_by_dates(self, user_id: int, dates: Iterable[DateInput]) -> Dict[date, Day]:
        """Days for a set of dates, keyed by date (missing dates are absent)."""
        targets = {parse_iso_date(d) for d in dates}
        if not targets:
            return {}
        stmt = (
            select(Day)
            .options(selectinload(Day.media), selectinload(Day.mood_state))
            .where(Day.user_id == user_id, Day.date.in_(targets))
        )
        return {day.date: day for day in self.session.scalars(stmt)}

    def has_content(self, user_id: int, day_date: DateInput) -> bool:
        """True when the date has a mood or media."""
        day = self.get(user_id, day_date)
        return day is not None and day.has_content

    def has_content_in_range(
        self, user_id: int, from_date: DateInput, to_date: DateInput
    ) -> bool:
        """True when any date of the inclusive range has a mood or media."""
        return any(day.has_content for day in self.list_range(user_id, from_date, to_date))

    def summarize_range(
        self, user_id: int, from_date: DateInput, to_date: DateInput
    ) -> Dict[str, int]:
        """
        Activity summary of an inclusive range.

        Returns:
            {'active_days': days with content, 'total_media': media count}
        """
        days = self.list_range(user_id, from_date, to_date)
        return {
            "active_days": sum(1 for day in days if day.has_content),
            "total_media": sum(len(day.media) for day in days),
        }

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    @staticmethod
    def format_media(media: Media) -> Dict[str, Any]:
        return {
            "id": media.id,
            "storageKey": media.storage_key,
            "fileName": media.file_name,
            "contentType": media.content_type,
            "size": media.size,
            "createdAt": media.created_at.isoformat(),
        }

    @classmethod
    def format_day(cls, day: Day) -> Dict[str, Any]:
        """Serialize a day with its mood, location and media."""
        mood = day.mood_state
        return {
            "id": day.id,
            "date": day.date.isoformat(),
            "mood": (
                {"id": mood.id, "name": mood.name, "color": mood.color, "score": mood.score}
                if mood is not None
                else None
            ),
            "mainMediaId": day.main_media_id,
            "locationName": day.location_name,
            "latitude": day.latitude,
            "longitude": day.longitude,
            "media": [cls.format_media(m) for m in day.media],
        }

    @staticmethod
    def blank_day(day_date: date) -> Dict[str, Any]:
        """Placeholder in format_day's shape for a date without a record."""
        return {
            "id": None,
            "date": day_date.isoformat(),
            "mood": None,
            "mainMediaId": None,
            "locationName": None,
            "latitude": None,
            "longitude": None,
            "media": [],
        }
