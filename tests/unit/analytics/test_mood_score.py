"""
test_mood_score.py
------------------
Unit tests for mood score mapping and averaging.
"""
from types import SimpleNamespace

from daybook.analytics.mood_score import (
    build_mood_score_map,
    compute_average_mood_score,
    resolve_score,
    scored_days_count,
)


def _day(mood_state_id):
    return SimpleNamespace(mood_state_id=mood_state_id)


MOODS = [
    SimpleNamespace(id=1, score=9),
    SimpleNamespace(id=2, score=3),
    SimpleNamespace(id=3, score=0),
]


class TestScoreMap:
    """Tests for build_mood_score_map() and resolve_score()."""

    def test_from_objects(self):
        assert build_mood_score_map(MOODS) == {1: 9, 2: 3, 3: 0}

    def test_from_dicts(self):
        assert build_mood_score_map([{"id": 7, "score": 5}]) == {7: 5}

    def test_resolve(self):
        score_map = build_mood_score_map(MOODS)
        assert resolve_score(score_map, 1) == 9
        assert resolve_score(score_map, 99) == 0
        assert resolve_score(score_map, None) == 0


class TestAverage:
    """Tests for compute_average_mood_score()."""

    def test_rounded_to_one_decimal(self):
        score_map = build_mood_score_map(MOODS)
        days = [_day(1), _day(1), _day(1), _day(2), _day(2)]
        assert compute_average_mood_score(days, score_map) == 6.6

    def test_empty_is_zero(self):
        assert compute_average_mood_score([], {}) == 0

    def test_days_without_mood_ignored(self):
        score_map = build_mood_score_map(MOODS)
        days = [_day(1), _day(None), _day(42)]
        assert compute_average_mood_score(days, score_map) == 9
        assert scored_days_count(days, score_map) == 1

    def test_zero_score_counts(self):
        score_map = build_mood_score_map(MOODS)
        assert compute_average_mood_score([_day(1), _day(3)], score_map) == 4.5
        assert scored_days_count([_day(3)], score_map) == 1
