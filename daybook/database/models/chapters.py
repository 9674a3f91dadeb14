"""
Chapter Models
--------------

Named stretches of a user's life and the date ranges they cover.

Models:
    - Chapter: Titled group of periods under a category
    - Period: One date range of a chapter; a null end means "still active"

Period boundaries are stored as the owning user's local midnight expressed
in UTC. The consistency rules (ordering, single active period, no overlap)
are enforced by PeriodManager, not by the schema.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UTCDateTime, utc_now

if TYPE_CHECKING:
    from .core import Category, User


class Chapter(Base, TimestampMixin):
    """
    A chapter ("event group") of the user's life.

    Attributes:
        id: Primary key
        user_id: Owning user
        category_id: Category reference
        title: Chapter title
        description: Optional free text

    Relationships:
        periods: Periods of this chapter, most recent start first
    """

    __tablename__ = "chapters"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    user: Mapped["User"] = relationship("User", back_populates="chapters")
    category: Mapped["Category"] = relationship("Category", back_populates="chapters")
    periods: Mapped[List["Period"]] = relationship(
        "Period",
        back_populates="chapter",
        order_by="Period.start_date.desc()",
    )

    @property
    def active_period(self) -> Optional["Period"]:
        """The open period of this chapter, if any."""
        for period in self.periods:
            if period.is_active:
                return period
        return None

    def __repr__(self) -> str:
        return f"<Chapter(id={self.id}, title='{self.title}')>"


class Period(Base):
    """
    A date range belonging to a chapter.

    Attributes:
        id: Primary key
        chapter_id: Owning chapter
        start_date: Local midnight of the first day, as UTC
        end_date: Local midnight of the last day, as UTC; None while active
        comment: Optional free text
        created_at: Creation timestamp
    """

    __tablename__ = "periods"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    chapter_id: Mapped[int] = mapped_column(
        ForeignKey("chapters.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    start_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, nullable=False
    )

    chapter: Mapped["Chapter"] = relationship("Chapter", back_populates="periods")

    @property
    def is_active(self) -> bool:
        """True while the period has no end date."""
        return self.end_date is None

    def __repr__(self) -> str:
        return (
            f"<Period(id={self.id}, chapter_id={self.chapter_id}, "
            f"start={self.start_date}, end={self.end_date})>"
        )
