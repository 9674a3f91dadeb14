"""
Day Models
----------

Daily records and their attached media metadata.

Models:
    - Day: One record per user per calendar date
    - Media: Metadata of a file attached to a day (content lives elsewhere)

Days are created implicitly the first time a mood or media is set for a
date. A day "has content" when it carries a mood or at least one media; a
location alone does not count.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UTCDateTime, utc_now

if TYPE_CHECKING:
    from .core import MoodState, User


class Day(Base, TimestampMixin):
    """
    A single calendar day of a user.

    Attributes:
        id: Primary key
        user_id: Owning user
        date: Calendar date (unique per user)
        mood_state_id: Optional mood of the day
        main_media_id: Optional pointer to the highlighted media
        location_name: Optional place name (at most 120 characters)
        latitude: Optional latitude in degrees
        longitude: Optional longitude in degrees

    Relationships:
        mood_state: Many-to-one with MoodState
        media: One-to-many with Media (deleted with the day)
        main_media: Many-to-one with Media
    """

    __tablename__ = "days"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_day_user_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    mood_state_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("mood_states.id", ondelete="RESTRICT"), index=True
    )
    main_media_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey(
            "media.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_days_main_media_id",
        )
    )
    location_name: Mapped[Optional[str]] = mapped_column(String(120))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    user: Mapped["User"] = relationship("User", back_populates="days")
    mood_state: Mapped[Optional["MoodState"]] = relationship(
        "MoodState", back_populates="days"
    )
    media: Mapped[List["Media"]] = relationship(
        "Media",
        back_populates="day",
        foreign_keys="Media.day_id",
        cascade="all, delete-orphan",
        order_by="Media.created_at",
    )
    main_media: Mapped[Optional["Media"]] = relationship(
        "Media", foreign_keys=[main_media_id], post_update=True
    )

    @property
    def has_content(self) -> bool:
        """True when the day has a mood or any media."""
        return self.mood_state_id is not None or len(self.media) > 0

    def __repr__(self) -> str:
        return f"<Day(id={self.id}, date={self.date}, mood_state_id={self.mood_state_id})>"


class Media(Base):
    """
    Metadata of a file attached to a day.

    Attributes:
        id: Primary key
        day_id: Owning day
        storage_key: Key of the object in external storage
        file_name: Original file name
        content_type: MIME type
        size: Size in bytes
        created_at: Upload timestamp
    """

    __tablename__ = "media"
    __table_args__ = (CheckConstraint("size >= 0", name="ck_media_positive_size"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    day_id: Mapped[int] = mapped_column(
        ForeignKey("days.id", ondelete="CASCADE"), nullable=False, index=True
    )
    storage_key: Mapped[str] = mapped_column(String(512), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[Optional[str]] = mapped_column(String(100))
    size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, nullable=False
    )

    day: Mapped["Day"] = relationship(
        "Day", back_populates="media", foreign_keys=[day_id]
    )

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, day_id={self.day_id}, file_name='{self.file_name}')>"
