"""
test_chapter_manager.py
-----------------------
Unit tests for ChapterManager: chapter CRUD, the period deletion guard and
chapter details over the days covered by the chapter's periods.
"""
import pytest

from daybook.core.exceptions import InUseError, NotFoundError, ValidationError


class TestChapterCrud:
    """Tests for create, update, list and delete."""

    def test_create(self, chapter, categories):
        assert chapter["title"] == "First job"
        assert chapter["category"]["id"] == categories["Work"].id
        assert chapter["category"]["name"] == "Work"
        assert chapter["periods"] == []
        assert chapter["description"] is None
        assert chapter["activePeriodId"] is None
        assert {"createdAt", "updatedAt"} <= set(chapter)

    def test_create_requires_title(self, chapter_manager, user, categories):
        with pytest.raises(ValidationError):
            chapter_manager.create_chapter(
                user.id, {"title": "", "category_id": categories["Work"].id}
            )

    def test_create_with_foreign_category(self, chapter_manager, other_user, categories):
        with pytest.raises(NotFoundError) as exc_info:
            chapter_manager.create_chapter(
                other_user.id, {"title": "Nope", "category_id": categories["Work"].id}
            )
        assert exc_info.value.code == "CATEGORY_NOT_FOUND"

    def test_update(self, chapter_manager, user, chapter, categories):
        updated = chapter_manager.update_chapter(
            user.id,
            chapter["id"],
            {"title": "Second job", "description": "Startup", "category_id": categories["Education"].id},
        )
        assert updated["title"] == "Second job"
        assert updated["description"] == "Startup"
        assert updated["category"]["name"] == "Education"

    def test_update_keeps_missing_keys(self, chapter_manager, user, chapter):
        updated = chapter_manager.update_chapter(user.id, chapter["id"], {"description": "x"})
        assert updated["title"] == "First job"

    def test_list_most_recent_first(self, chapter_manager, user, chapter, categories):
        second = chapter_manager.create_chapter(
            user.id, {"title": "Marathon", "category_id": categories["Health"].id}
        )
        ids = [c["id"] for c in chapter_manager.list_chapters(user.id)]
        assert ids == [second["id"], chapter["id"]]

    def test_list_scoped_to_user(self, chapter_manager, other_user, chapter):
        assert chapter_manager.list_chapters(other_user.id) == []

    def test_list_by_category(self, chapter_manager, user, chapter, categories):
        grouped = chapter_manager.list_by_category(user.id)
        assert [c.id for c in grouped[categories["Work"].id]] == [chapter["id"]]

    def test_delete_without_periods(self, chapter_manager, user, chapter):
        chapter_manager.delete_chapter(user.id, chapter["id"])
        with pytest.raises(NotFoundError):
            chapter_manager.get_chapter(user.id, chapter["id"])

    def test_delete_with_periods_rejected(self, chapter_manager, period_manager, user, chapter, now):
        period_manager.create_period(user.id, chapter["id"], "2024-01-01", "2024-01-05", now=now)
        period_manager.create_period(user.id, chapter["id"], "2024-02-01", now=now)

        with pytest.raises(InUseError) as exc_info:
            chapter_manager.delete_chapter(user.id, chapter["id"])
        assert exc_info.value.code == "CHAPTER_IN_USE"
        assert exc_info.value.details == {"chapter_id": chapter["id"], "period_count": 2}


class TestChapterDetails:
    """Tests for ChapterManager.get_chapter_details()."""

    @pytest.fixture
    def populated(self, period_manager, day_manager, user, chapter, moods, now):
        period_manager.create_period(user.id, chapter["id"], "2024-01-01", "2024-01-10", now=now)
        period_manager.create_period(user.id, chapter["id"], "2024-06-01", now=now)

        day_manager.upsert(user.id, "2024-01-05", mood_state_id=moods["Great"].id, now=now)
        day_manager.upsert(user.id, "2024-01-08", mood_state_id=moods["Good"].id, now=now)
        day_manager.upsert(user.id, "2024-03-01", mood_state_id=moods["Terrible"].id, now=now)
        day_manager.upsert(user.id, "2024-06-10", mood_state_id=moods["Great"].id, now=now)
        day_manager.add_media(
            user.id,
            "2024-06-12",
            {"storage_key": "k/1", "file_name": "beach.jpg", "size": 10},
            now=now,
        )
        return chapter["id"]

    def test_mood_stats(self, chapter_manager, user, populated, now):
        details = chapter_manager.get_chapter_details(user.id, populated, now=now)
        assert details["moodStats"] == [
            {"moodName": "Great", "moodColor": "#4CAF50", "count": 2, "percentage": 67},
            {"moodName": "Good", "moodColor": "#8BC34A", "count": 1, "percentage": 33},
        ]

    def test_days_outside_periods_ignored(self, chapter_manager, user, populated, now):
        details = chapter_manager.get_chapter_details(user.id, populated, now=now)
        assert details["totalDays"] == 4
        names = [s["moodName"] for s in details["moodStats"]]
        assert "Terrible" not in names

    def test_media_and_average(self, chapter_manager, user, populated, now):
        details = chapter_manager.get_chapter_details(user.id, populated, now=now)
        assert details["totalMedia"] == 1
        assert details["media"][0]["fileName"] == "beach.jpg"
        assert details["analytics"]["averageMoodScore"] == 8.3
        assert details["analytics"]["totalPeriods"] == 2

    def test_density_per_period(self, chapter_manager, user, populated, now):
        details = chapter_manager.get_chapter_details(user.id, populated, now=now)
        assert details["analytics"]["density"] == [
            {"start": "2024-06-01", "end": "2024-06-15", "activeDays": 2},
            {"start": "2024-01-01", "end": "2024-01-10", "activeDays": 2},
        ]

    def test_chapter_without_periods(self, chapter_manager, user, chapter, now):
        details = chapter_manager.get_chapter_details(user.id, chapter["id"], now=now)
        assert details["moodStats"] == []
        assert details["totalDays"] == 0
        assert details["analytics"]["averageMoodScore"] == 0

    def test_mood_distribution(self, chapter_manager, user, moods, populated, now):
        details = chapter_manager.get_chapter_details(user.id, populated, now=now)
        assert details["analytics"]["moodDistribution"][0] == {
            "moodId": moods["Great"].id,
            "moodName": "Great",
            "color": "#4CAF50",
            "count": 2,
            "percentage": 67,
        }

    def test_payload_keys_are_camel_case(self, chapter_manager, user, populated, now):
        details = chapter_manager.get_chapter_details(user.id, populated, now=now)
        payloads = [details, details["analytics"], *details["periods"], *details["media"]]
        for payload in payloads:
            assert not [key for key in payload if "_" in key]
