#!/usr/bin/env python3
"""
period_manager.py
-----------------
Temporal consistency engine for chapter periods.

PeriodManager is the only writer of period date ranges. Every mutation
re-validates the chapter's invariants before writing:

    1. start <= end whenever end is set
    2. at most one open (end = None) period per chapter
    3. no two closed periods of a chapter overlap, where overlap is
       ``start < other_end and other_start < end``; periods that merely
       touch on a shared boundary day are accepted
    4. no date more than one day ahead of today in the user's timezone

Dates arrive as 'YYYY-MM-DD' strings (or date objects) interpreted in the
owning user's timezone and are stored as that local midnight in UTC. The
read-check-write sequence runs inside run_in_transaction with the chapter
row locked, so two concurrent mutations of one chapter cannot both pass
validation.

Every mutation returns the owning chapter re-read from the database and
formatted with dates expressed in the user's timezone.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Any, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload

# --- Local imports ---
from daybook.core.exceptions import (
    ActivePeriodExistsError,
    EventAlreadyClosedError,
    InvalidDateRangeError,
    NotFoundError,
    PeriodOverlapError,
)
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.temporal import (
    DateInput,
    assert_not_too_far_in_future,
    local_midnight_utc,
    to_local_iso,
)
from daybook.core.validators import DataValidator
from daybook.database.decorators import DatabaseOperation
from daybook.database.models import Chapter, Period
from .base_manager import UNSET, BaseManager
from .chapter_manager import ChapterManager
from .user_manager import UserManager


class PeriodManager(BaseManager):
    """Creates, updates, closes and deletes chapter periods."""

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        super().__init__(session, logger)
        self.users = UserManager(session, logger)
        self.chapters = ChapterManager(session, logger)

    # -------------------------------------------------------------------------
    # Store queries
    # -------------------------------------------------------------------------

    def get(self, user_id: int, period_id: int) -> Period:
        """
        Retrieve a period owned (through its chapter) by user_id.

        Raises:
            NotFoundError: If absent or owned by another user
        """
        period = self._get_by_id(Period, period_id)
        if period is None or period.chapter.user_id != user_id:
            raise NotFoundError("period", {"period_id": period_id})
        return period

    def find_closed_periods(
        self, chapter_id: int, exclude_id: Optional[int] = None
    ) -> List[Period]:
        """Closed periods of a chapter, optionally excluding one period."""
        stmt = select(Period).where(
            Period.chapter_id == chapter_id, Period.end_date.is_not(None)
        )
        if exclude_id is not None:
            stmt = stmt.where(Period.id != exclude_id)
        return list(self.session.scalars(stmt.order_by(Period.start_date)).all())

    def find_active_period(
        self, chapter_id: int, exclude_id: Optional[int] = None
    ) -> Optional[Period]:
        """The open period of a chapter, optionally excluding one period."""
        stmt = select(Period).where(
            Period.chapter_id == chapter_id, Period.end_date.is_(None)
        )
        if exclude_id is not None:
            stmt = stmt.where(Period.id != exclude_id)
        return self.session.scalars(stmt).first()

    def list_for_user(self, user_id: int) -> List[Period]:
        """All periods of all chapters of a user."""
        stmt = (
            select(Period)
            .join(Chapter, Chapter.id == Period.chapter_id)
            .where(Chapter.user_id == user_id)
            .order_by(Period.start_date)
        )
        return list(self.session.scalars(stmt).all())

    def find_in_range(
        self, user_id: int, from_date: DateInput, to_date: DateInput
    ) -> List[Period]:
        """
        Periods of a user that intersect an inclusive range of local dates.

        A period intersects when it starts on or before to_date and is
        either open or ends on or after from_date. Newest start first, with
        chapter and category loaded.
        """
        tz_name = self.users.get_timezone(user_id)
        lower = local_midnight_utc(from_date, tz_name)
        upper = local_midnight_utc(to_date, tz_name)
        stmt = (
            select(Period)
            .join(Chapter, Chapter.id == Period.chapter_id)
            .options(joinedload(Period.chapter).joinedload(Chapter.category))
            .where(
                Chapter.user_id == user_id,
                Period.start_date <= upper,
                or_(Period.end_date.is_(None), Period.end_date >= lower),
            )
            .order_by(Period.start_date.desc(), Period.id.desc())
        )
        return list(self.session.scalars(stmt).unique().all())

    # -------------------------------------------------------------------------
    # Invariant checks
    # -------------------------------------------------------------------------

    def _assert_no_active_period(
        self, chapter_id: int, exclude_id: Optional[int] = None
    ) -> None:
        if self.find_active_period(chapter_id, exclude_id) is not None:
            raise ActivePeriodExistsError(details={"chapter_id": chapter_id})

    def _assert_no_overlap(
        self,
        chapter_id: int,
        start: datetime,
        end: Optional[datetime],
        exclude_id: Optional[int] = None,
    ) -> None:
        # Open ranges are governed by the active-period rule only
        if end is None:
            return
        for existing in self.find_closed_periods(chapter_id, exclude_id):
            if start < existing.end_date and existing.start_date < end:
                raise PeriodOverlapError(
                    details={
                        "existing_period_id": existing.id,
                        "existing_start": existing.start_date.isoformat(),
                        "existing_end": existing.end_date.isoformat(),
                    }
                )

    @staticmethod
    def _assert_range(
        start: datetime, end: Optional[datetime], tz_name: str
    ) -> None:
        if end is not None and start > end:
            raise InvalidDateRangeError(
                details={
                    "start_date": to_local_iso(start, tz_name),
                    "end_date": to_local_iso(end, tz_name),
                }
            )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_period(
        self,
        user_id: int,
        chapter_id: int,
        start: DateInput,
        end: Optional[DateInput] = None,
        comment: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Add a period to a chapter.

        Args:
            user_id: Owning user
            chapter_id: Target chapter
            start: First day (inclusive)
            end: Last day (inclusive); None creates the active period
            comment: Optional free text
            now: Reference instant for the future-date rule

        Returns:
            The refreshed chapter, formatted

        Raises:
            NotFoundError: If the chapter does not belong to the user
            FutureDateError: If start is after tomorrow
            InvalidDateRangeError: If start is after end
            ActivePeriodExistsError: If end is None and an open period exists
            PeriodOverlapError: If the closed range overlaps a closed period
        """
        with DatabaseOperation(
            self.logger, "create_period", context={"chapter_id": chapter_id}
        ):
            tz_name = self.users.get_timezone(user_id)
            self.chapters.get(user_id, chapter_id)

            assert_not_too_far_in_future(start, tz_name, now)
            start_utc = local_midnight_utc(start, tz_name)
            end_utc = local_midnight_utc(end, tz_name) if end is not None else None
            self._assert_range(start_utc, end_utc, tz_name)

            def write() -> Period:
                if end_utc is None:
                    self._assert_no_active_period(chapter_id)
                self._assert_no_overlap(chapter_id, start_utc, end_utc)

                period = Period(
                    chapter_id=chapter_id,
                    start_date=start_utc,
                    end_date=end_utc,
                    comment=DataValidator.normalize_string(comment),
                )
                self.session.add(period)
                return period

            period = self.run_in_transaction(write, lock=(Chapter, chapter_id))
            safe_logger(self.logger).log_debug(
                "Created period",
                {"period_id": period.id, "chapter_id": chapter_id},
            )
            return self._refreshed_chapter(user_id, chapter_id)

    def update_period(
        self,
        user_id: int,
        period_id: int,
        start: Any = UNSET,
        end: Any = UNSET,
        comment: Any = UNSET,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Change the dates or comment of a period.

        Omitted arguments keep their stored values; ``end=None`` reopens the
        period. The future-date rule applies to each supplied date, and the
        active-period and overlap rules are re-checked excluding the period
        itself.

        Returns:
            The refreshed owning chapter, formatted
        """
        with DatabaseOperation(
            self.logger, "update_period", context={"period_id": period_id}
        ):
            tz_name = self.users.get_timezone(user_id)
            period = self.get(user_id, period_id)
            chapter_id = period.chapter_id

            if start is not UNSET:
                assert_not_too_far_in_future(start, tz_name, now)
            if end is not UNSET and end is not None:
                assert_not_too_far_in_future(end, tz_name, now)

            new_start = (
                local_midnight_utc(start, tz_name) if start is not UNSET else period.start_date
            )
            if end is UNSET:
                new_end = period.end_date
            elif end is None:
                new_end = None
            else:
                new_end = local_midnight_utc(end, tz_name)
            self._assert_range(new_start, new_end, tz_name)

            def write() -> Period:
                if new_end is None:
                    self._assert_no_active_period(chapter_id, exclude_id=period_id)
                self._assert_no_overlap(chapter_id, new_start, new_end, exclude_id=period_id)

                period.start_date = new_start
                period.end_date = new_end
                if comment is not UNSET:
                    period.comment = DataValidator.normalize_string(comment)
                return period

            self.run_in_transaction(write, lock=(Chapter, chapter_id))
            return self._refreshed_chapter(user_id, chapter_id)

    def close_period(
        self, user_id: int, period_id: int, end: DateInput
    ) -> Dict[str, Any]:
        """
        Set the end date of the active period.

        Raises:
            NotFoundError: If the period does not belong to the user
            EventAlreadyClosedError: If the period already has an end date
            InvalidDateRangeError: If end is before the start
            PeriodOverlapError: If the closed range overlaps a closed period
        """
        with DatabaseOperation(
            self.logger, "close_period", context={"period_id": period_id}
        ):
            tz_name = self.users.get_timezone(user_id)
            period = self.get(user_id, period_id)
            if not period.is_active:
                raise EventAlreadyClosedError(details={"period_id": period_id})

            chapter_id = period.chapter_id
            end_utc = local_midnight_utc(end, tz_name)
            self._assert_range(period.start_date, end_utc, tz_name)

            def write() -> Period:
                self._assert_no_overlap(
                    chapter_id, period.start_date, end_utc, exclude_id=period_id
                )
                period.end_date = end_utc
                return period

            self.run_in_transaction(write, lock=(Chapter, chapter_id))
            return self._refreshed_chapter(user_id, chapter_id)

    def delete_period(self, user_id: int, period_id: int) -> None:
        """
        Delete a period unconditionally.

        Raises:
            NotFoundError: If the period does not belong to the user
        """
        with DatabaseOperation(
            self.logger, "delete_period", context={"period_id": period_id}
        ):
            period = self.get(user_id, period_id)
            chapter = period.chapter
            self.session.delete(period)
            self.session.flush()
            self.session.expire(chapter, ["periods"])

    def _refreshed_chapter(self, user_id: int, chapter_id: int) -> Dict[str, Any]:
        chapter = self.chapters.get(user_id, chapter_id)
        self.session.expire(chapter)
        return self.chapters.format(chapter, self.users.get_timezone(user_id))
