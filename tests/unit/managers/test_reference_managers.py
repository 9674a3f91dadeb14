"""
test_reference_managers.py
--------------------------
Unit tests for the config-driven reference entity managers.

Tests CategoryManager and MoodStateManager: default seeding, creation with
validation, unique names per user, updates, the in-use deletion guard and
preset recommendations.
"""
import pytest

from daybook.core.exceptions import (
    DatabaseError,
    InUseError,
    NotFoundError,
    RecommendationNotFoundError,
    ValidationError,
)
from daybook.database.managers.category_manager import (
    CATEGORY_RECOMMENDATIONS,
    DEFAULT_CATEGORIES,
)
from daybook.database.managers.mood_state_manager import (
    DEFAULT_MOOD_STATES,
    MOOD_RECOMMENDATIONS,
)


class TestCategoryManager:
    """Tests for CategoryManager."""

    def test_defaults_seeded_in_order(self, category_manager, user):
        names = [c.name for c in category_manager.get_all(user.id)]
        assert names == [d["name"] for d in DEFAULT_CATEGORIES]

    def test_defaults_marked_system(self, categories):
        assert all(c.is_system for c in categories.values())

    def test_seeding_is_idempotent(self, category_manager, user):
        assert category_manager.seed_defaults(user.id) == []
        assert len(category_manager.get_all(user.id)) == len(DEFAULT_CATEGORIES)

    def test_create_appends_to_order(self, category_manager, user):
        created = category_manager.create(user.id, {"name": "Music", "color": "#a1b2c3"})
        assert created.color == "#A1B2C3"
        assert created.is_system is False
        assert created.order == len(DEFAULT_CATEGORIES)
        assert category_manager.get_all(user.id)[-1].id == created.id

    def test_create_requires_color(self, category_manager, user):
        with pytest.raises(ValidationError, match="Required field 'color'"):
            category_manager.create(user.id, {"name": "Music"})

    def test_create_rejects_bad_color(self, category_manager, user):
        with pytest.raises(ValidationError, match="Invalid color"):
            category_manager.create(user.id, {"name": "Music", "color": "red"})

    def test_duplicate_name_rejected(self, category_manager, user):
        with pytest.raises(DatabaseError, match="category already exists: Work"):
            category_manager.create(user.id, {"name": "Work", "color": "#000000"})

    def test_same_name_for_other_user(self, category_manager, user, other_user):
        created = category_manager.create(
            other_user.id, {"name": "Music", "color": "#000000"}
        )
        assert created.user_id == other_user.id
        category_manager.create(user.id, {"name": "Music", "color": "#000000"})

    def test_update(self, category_manager, user, categories):
        updated = category_manager.update(
            user.id, categories["Hobby"].id, {"name": "Hobbies", "color": "#123abc"}
        )
        assert (updated.name, updated.color) == ("Hobbies", "#123ABC")

    def test_update_to_existing_name_rejected(self, category_manager, user, categories):
        with pytest.raises(DatabaseError):
            category_manager.update(user.id, categories["Hobby"].id, {"name": "Work"})

    def test_get_other_users_category(self, category_manager, other_user, categories):
        with pytest.raises(NotFoundError) as exc_info:
            category_manager.get(other_user.id, categories["Work"].id)
        assert exc_info.value.code == "CATEGORY_NOT_FOUND"
        assert category_manager.exists(other_user.id, categories["Work"].id) is False

    def test_delete_unused(self, category_manager, user, categories):
        category_manager.delete(user.id, categories["Finance"].id)
        assert not category_manager.exists(user.id, categories["Finance"].id)

    def test_delete_in_use_rejected(self, category_manager, user, categories, chapter):
        work_id = categories["Work"].id
        with pytest.raises(InUseError) as exc_info:
            category_manager.delete(user.id, work_id)
        assert exc_info.value.code == "CATEGORY_IN_USE"
        assert exc_info.value.details == {"category_id": work_id, "usage_count": 1}


class TestMoodStateManager:
    """Tests for MoodStateManager."""

    def test_default_scores(self, moods):
        assert {name: m.score for name, m in moods.items()} == {
            d["name"]: d["score"] for d in DEFAULT_MOOD_STATES
        }

    def test_create(self, mood_state_manager, user):
        created = mood_state_manager.create(
            user.id, {"name": "Calm", "color": "#00ff00", "score": 6}
        )
        assert created.score == 6
        assert created.order == len(DEFAULT_MOOD_STATES)

    @pytest.mark.parametrize("score", [0, 10])
    def test_score_bounds_accepted(self, mood_state_manager, user, score):
        created = mood_state_manager.create(
            user.id, {"name": f"Edge {score}", "color": "#000000", "score": score}
        )
        assert created.score == score

    @pytest.mark.parametrize("score", [-1, 11])
    def test_score_out_of_range(self, mood_state_manager, user, score):
        with pytest.raises(ValidationError, match="between 0 and 10"):
            mood_state_manager.create(
                user.id, {"name": "Off", "color": "#000000", "score": score}
            )

    def test_score_required(self, mood_state_manager, user):
        with pytest.raises(ValidationError, match="Required field 'score'"):
            mood_state_manager.create(user.id, {"name": "Off", "color": "#000000"})

    def test_update_score(self, mood_state_manager, user, moods):
        updated = mood_state_manager.update(user.id, moods["Okay"].id, {"score": 4})
        assert updated.score == 4
        assert updated.name == "Okay"

    def test_delete_in_use_rejected(self, mood_state_manager, day_manager, user, moods, now):
        day_manager.upsert(user.id, "2024-06-01", mood_state_id=moods["Good"].id, now=now)
        with pytest.raises(InUseError) as exc_info:
            mood_state_manager.delete(user.id, moods["Good"].id)
        assert exc_info.value.code == "MOOD_STATE_IN_USE"

    def test_delete_unused(self, mood_state_manager, user, moods):
        mood_state_manager.delete(user.id, moods["Terrible"].id)
        names = [m.name for m in mood_state_manager.get_all(user.id)]
        assert "Terrible" not in names


class TestRecommendations:
    """Tests for creating entities from preset recommendations."""

    def test_category_presets(self, category_manager):
        presets = category_manager.list_recommendations()
        assert [p["key"] for p in presets] == [
            "work", "education", "relationship", "health",
            "hobby", "travel", "living", "finance",
        ]
        assert presets[0] == {"key": "work", "color": "#3B82F6"}

    def test_listing_is_a_copy(self, category_manager):
        category_manager.list_recommendations()[0]["color"] = "#000000"
        assert CATEGORY_RECOMMENDATIONS[0]["color"] == "#3B82F6"

    def test_mood_presets(self, mood_state_manager):
        presets = {p["key"]: p for p in mood_state_manager.list_recommendations()}
        assert presets["great"] == {"key": "great", "color": "#22C55E", "score": 9}
        assert presets["terrible"]["score"] == 1
        assert len(presets) == len(MOOD_RECOMMENDATIONS)

    def test_create_category_from_preset(self, category_manager, user):
        count = len(category_manager.get_all(user.id))
        created = category_manager.create_from_recommendation(user.id, "travel", "Trips")
        assert created.name == "Trips"
        assert created.color == "#0EA5E9"
        assert created.order == count
        assert created.is_system is False

    def test_create_mood_from_preset(self, mood_state_manager, user):
        created = mood_state_manager.create_from_recommendation(user.id, "good", "Fine")
        assert (created.color, created.score) == ("#84CC16", 7)
        assert created.order == len(DEFAULT_MOOD_STATES)

    def test_unknown_key(self, category_manager, user):
        with pytest.raises(RecommendationNotFoundError) as exc_info:
            category_manager.create_from_recommendation(user.id, "sailing", "Boats")
        assert exc_info.value.code == "RECOMMENDATION_NOT_FOUND"
        assert exc_info.value.details == {"key": "sailing"}
        assert str(exc_info.value) == "Unknown recommendation key"

    def test_mood_key_not_valid_for_category(self, category_manager, user):
        with pytest.raises(RecommendationNotFoundError):
            category_manager.create_from_recommendation(user.id, "great", "Great times")

    def test_name_still_unique(self, category_manager, user):
        with pytest.raises(DatabaseError, match="already exists"):
            category_manager.create_from_recommendation(user.id, "work", "Work")

    def test_name_required(self, mood_state_manager, user):
        with pytest.raises(ValidationError, match="Required field 'name'"):
            mood_state_manager.create_from_recommendation(user.id, "okay", "")
