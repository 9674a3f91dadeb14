"""
Base Classes and Column Types
-----------------------------

Foundational ORM classes for the Daybook database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - UTCDateTime: DateTime column that always round-trips aware UTC values
    - TimestampMixin: created_at / updated_at columns

Period boundaries are absolute instants. SQLite has no timezone-aware
storage, so UTCDateTime normalizes every value to UTC on the way in and
re-attaches UTC on the way out; comparisons in Python then never mix naive
and aware datetimes.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone
from typing import Any, Optional

# --- Third party ---
from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# --- Column types ---
class UTCDateTime(TypeDecorator):
    """
    Timezone-aware DateTime stored as UTC.

    Naive values are assumed to already be UTC. On SQLite the stored value
    is naive UTC text; on backends with timestamptz the aware value is
    passed through.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: Optional[datetime], dialect: Dialect
    ) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(
        self, value: Optional[Any], dialect: Dialect
    ) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    pass


# --- Timestamps ---
class TimestampMixin:
    """
    Mixin adding creation and modification timestamps.

    Attributes:
        created_at: When the row was inserted
        updated_at: When the row was last modified
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, nullable=False, doc="Creation timestamp"
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        doc="Last modification timestamp",
    )
