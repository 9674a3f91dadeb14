"""
test_resolver.py
----------------
Unit tests for the memories resolver: calendar-clamped look-back dates,
day mode and week mode.
"""
from datetime import date

import pytest

from daybook.core.exceptions import InvalidDateError, ValidationError
from daybook.memories import MemoryResolver
from daybook.memories.resolver import historical_dates


@pytest.fixture
def resolver(db_session):
    """MemoryResolver bound to the test session."""
    return MemoryResolver(db_session)


@pytest.fixture
def record(day_manager, user, moods, now):
    """Helper writing a mood and/or media for a date of the test user."""

    def _record(day, mood=None, media=0):
        if mood is not None:
            day_manager.upsert(user.id, day, mood_state_id=moods[mood].id, now=now)
        for i in range(media):
            day_manager.add_media(
                user.id,
                day,
                {"storage_key": f"{day}/{i}", "file_name": f"{i}.jpg"},
                now=now,
            )

    return _record


class TestHistoricalDates:
    """Look-back dates clamp to the last day of shorter months."""

    @pytest.mark.parametrize(
        "base, expected",
        [
            (date(2024, 2, 29), [date(2024, 1, 29), date(2023, 8, 29), date(2023, 2, 28)]),
            (date(2024, 3, 31), [date(2024, 2, 29), date(2023, 9, 30), date(2023, 3, 31)]),
            (date(2024, 1, 31), [date(2023, 12, 31), date(2023, 7, 31), date(2023, 1, 31)]),
        ],
    )
    def test_clamping(self, base, expected):
        assert [target for _, target in historical_dates(base)] == expected

    def test_interval_order(self):
        intervals = [interval for interval, _ in historical_dates(date(2024, 5, 5))]
        assert intervals == [("months", 1), ("months", 6), ("years", 1)]


class TestDayMode:
    """Tests for day-mode memories."""

    def test_empty_base_day_returns_nothing(self, resolver, record, user):
        record("2024-02-29", mood="Good")
        context = resolver.get_context(user.id, "day", "2024-03-31")
        assert context.memories == []

    def test_memories_in_interval_order(self, resolver, record, user):
        record("2024-03-31", mood="Okay")
        record("2023-03-31", mood="Bad")
        record("2023-09-30", media=2)
        record("2024-02-29", mood="Great", media=1)

        context = resolver.get_context(user.id, "day", "2024-03-31")
        assert [m.date for m in context.memories] == [
            date(2024, 2, 29),
            date(2023, 9, 30),
            date(2023, 3, 31),
        ]
        first, second, _ = context.memories
        assert first.mood["name"] == "Great"
        assert first.media_count == 1
        assert second.mood is None
        assert second.media_count == 2

    def test_days_without_content_skipped(self, resolver, record, day_manager, user, now):
        record("2024-03-31", mood="Okay")
        day_manager.upsert(user.id, "2024-02-29", mood_state_id=None, now=now)
        record("2023-03-31", mood="Good")

        context = resolver.get_context(user.id, "day", "2024-03-31")
        assert [m.interval for m in context.memories] == [("years", 1)]

    def test_to_dict(self, resolver, record, user):
        record("2024-03-31", mood="Okay")
        record("2024-02-29", mood="Great")

        data = resolver.get_context(user.id, "day", "2024-03-31").to_dict()
        assert data["type"] == "day"
        assert data["baseDate"] == "2024-03-31"
        assert data["memories"][0]["interval"] == {"type": "months", "value": 1}
        assert data["memories"][0]["date"] == "2024-02-29"
        assert data["memories"][0]["mediaCount"] == 0

    def test_default_base_date_is_today(self, resolver, user, now):
        context = resolver.get_on_this_day(user.id, now=now)
        assert context.base_date == date(2024, 6, 15)

    def test_other_users_days_ignored(self, resolver, record, user, other_user):
        record("2024-03-31", mood="Okay")
        record("2024-02-29", mood="Great")
        assert resolver.get_context(other_user.id, "day", "2024-03-31").memories == []


class TestWeekMode:
    """Tests for week-mode memories."""

    def test_week_memories(self, resolver, record, user):
        record("2024-06-11", mood="Good")
        record("2024-05-12", mood="Great")
        record("2024-05-13", media=2)
        record("2023-06-15", mood="Bad")

        context = resolver.get_context(user.id, "week", "2024-06-12")
        assert (context.week_start, context.week_end) == (date(2024, 6, 10), date(2024, 6, 16))
        assert [(m.interval, m.active_days, m.total_media) for m in context.memories] == [
            (("months", 1), 2, 2),
            (("years", 1), 1, 0),
        ]
        assert context.memories[0].week_start == date(2024, 5, 10)
        assert context.memories[0].week_end == date(2024, 5, 16)

    def test_empty_week_returns_nothing(self, resolver, record, user):
        record("2024-05-12", mood="Great")
        context = resolver.get_context(user.id, "week", "2024-06-12")
        assert context.memories == []
        assert context.to_dict()["baseWeek"] == {"start": "2024-06-10", "end": "2024-06-16"}


class TestErrors:
    """Invalid input."""

    def test_unknown_mode(self, resolver, user):
        with pytest.raises(ValidationError, match="Unknown memory mode"):
            resolver.get_context(user.id, "month", "2024-03-31")

    def test_invalid_date(self, resolver, user):
        with pytest.raises(InvalidDateError):
            resolver.get_context(user.id, "day", "2024-13-01")
