"""
Core Models
------------

Per-user reference data for the Daybook database.

Models:
    - User: Owner of every other record, carries the IANA timezone
    - Category: Grouping for chapters (Work, Health, ...)
    - MoodState: A selectable daily mood with an explicit numeric score

Mood states keep ``score`` (used by analytics) and ``order`` (used for
display) as independent columns.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .chapters import Chapter
    from .days import Day


# ----- User -----
class User(Base, TimestampMixin):
    """
    Application user.

    Attributes:
        id: Primary key
        name: Display name
        timezone: IANA timezone name; None means UTC

    Relationships:
        categories: One-to-many with Category
        mood_states: One-to-many with MoodState
        chapters: One-to-many with Chapter
        days: One-to-many with Day
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[Optional[str]] = mapped_column(String(64))

    categories: Mapped[List["Category"]] = relationship(
        "Category", back_populates="user", cascade="all, delete-orphan"
    )
    mood_states: Mapped[List["MoodState"]] = relationship(
        "MoodState", back_populates="user", cascade="all, delete-orphan"
    )
    chapters: Mapped[List["Chapter"]] = relationship(
        "Chapter", back_populates="user", cascade="all, delete-orphan"
    )
    days: Mapped[List["Day"]] = relationship(
        "Day", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', timezone={self.timezone})>"


# ----- Category -----
class Category(Base, TimestampMixin):
    """
    Category a chapter belongs to.

    Attributes:
        id: Primary key
        user_id: Owning user
        name: Category name (unique per user)
        color: '#RRGGBB' display color
        is_system: True for seeded defaults
        order: Display position
    """

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_category_user_name"),
        CheckConstraint("name != ''", name="ck_category_non_empty_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="categories")
    chapters: Mapped[List["Chapter"]] = relationship(
        "Chapter", back_populates="category"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


# ----- Mood State -----
class MoodState(Base, TimestampMixin):
    """
    A mood a user can assign to a day.

    Attributes:
        id: Primary key
        user_id: Owning user
        name: Label shown to the user
        color: '#RRGGBB' display color
        score: Numeric value used by analytics (0-10)
        is_system: True for seeded defaults
        order: Display position, unrelated to score
    """

    __tablename__ = "mood_states"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_mood_state_user_name"),
        CheckConstraint("score >= 0 AND score <= 10", name="ck_mood_state_score_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="mood_states")
    days: Mapped[List["Day"]] = relationship("Day", back_populates="mood_state")

    def __repr__(self) -> str:
        return f"<MoodState(id={self.id}, name='{self.name}', score={self.score})>"
