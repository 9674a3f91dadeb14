#!/usr/bin/env python3
"""
temporal.py
-------------------
Timezone-scoped calendar helpers.

Periods are stored as absolute instants: the owning user's local midnight
converted to UTC. Day records are stored as plain calendar dates. This
module converts between the two representations and implements the
calendar arithmetic used by the memories resolver.

Key Features:
    - Parse 'YYYY-MM-DD' strings (or date objects) strictly
    - Local midnight -> UTC instant, and back to a local calendar date
    - "Today" in an arbitrary timezone, with an injectable clock
    - The one-day-ahead future date rule
    - Calendar-unit subtraction that clamps to the end of the month

Usage:
    start = local_midnight_utc("2024-03-10", "Europe/Berlin")
    to_local_iso(start, "Europe/Berlin")  # '2024-03-10'
    subtract_interval(date(2024, 3, 31), "months", 1)  # date(2024, 2, 29)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# --- Third party imports ---
from dateutil.relativedelta import relativedelta

# --- Local imports ---
from .exceptions import FutureDateError, InvalidDateError

DEFAULT_TIMEZONE = "UTC"
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateInput = Union[str, date, datetime]


def resolve_zone(tz_name: Optional[str]) -> ZoneInfo:
    """
    Resolve an IANA name to a ZoneInfo, falling back to UTC.

    Unknown names fall back to UTC too: a stored timezone that the host's
    tz database no longer knows must not make every read fail.
    """
    try:
        return ZoneInfo(tz_name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(DEFAULT_TIMEZONE)


def parse_iso_date(value: DateInput) -> date:
    """
    Parse a date-only input.

    Args:
        value: 'YYYY-MM-DD' string, date, or datetime (its date part is used)

    Returns:
        Calendar date

    Raises:
        InvalidDateError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if ISO_DATE.match(text):
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
    raise InvalidDateError(details={"date": str(value)})


def ensure_utc(instant: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def local_midnight_utc(value: DateInput, tz_name: Optional[str]) -> datetime:
    """
    Interpret a date in a timezone as the UTC instant of its local midnight.

    Args:
        value: Date-only input
        tz_name: IANA timezone of the owning user

    Returns:
        Timezone-aware UTC datetime
    """
    day = parse_iso_date(value)
    local = datetime.combine(day, time.min, tzinfo=resolve_zone(tz_name))
    return local.astimezone(timezone.utc)


def to_local_date(instant: datetime, tz_name: Optional[str]) -> date:
    """Inverse of local_midnight_utc: the calendar date of an instant in tz."""
    return ensure_utc(instant).astimezone(resolve_zone(tz_name)).date()


def to_local_iso(instant: Optional[datetime], tz_name: Optional[str]) -> Optional[str]:
    """Format an instant as a local 'YYYY-MM-DD' string (None passes through)."""
    if instant is None:
        return None
    return to_local_date(instant, tz_name).isoformat()


def now_utc() -> datetime:
    """Current UTC instant."""
    return datetime.now(timezone.utc)


def today_in(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
    """
    Today's calendar date in a timezone.

    Args:
        tz_name: IANA timezone
        now: Optional reference instant (defaults to the current time)
    """
    reference = ensure_utc(now) if now is not None else now_utc()
    return reference.astimezone(resolve_zone(tz_name)).date()


def assert_not_too_far_in_future(
    value: DateInput, tz_name: Optional[str], now: Optional[datetime] = None
) -> date:
    """
    Reject dates more than one day ahead of today in the given timezone.

    Returns:
        The parsed date

    Raises:
        InvalidDateError: If the value cannot be parsed
        FutureDateError: If the date is after tomorrow
    """
    target = parse_iso_date(value)
    max_date = today_in(tz_name, now) + timedelta(days=1)
    if target > max_date:
        raise FutureDateError(
            details={"date": target.isoformat(), "max_date": max_date.isoformat()}
        )
    return target


def subtract_interval(base: date, unit: str, value: int) -> date:
    """
    Subtract calendar months or years, clamping to the last valid day.

    2024-03-31 minus one month is 2024-02-29; 2024-02-29 minus one year
    is 2023-02-28.

    Args:
        base: Starting date
        unit: 'months' or 'years'
        value: Number of units

    Raises:
        ValueError: If the unit is not supported
    """
    if unit not in ("months", "years"):
        raise ValueError(f"Unsupported interval unit: {unit}")
    return base - relativedelta(**{unit: value})


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the ISO week containing day."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)
