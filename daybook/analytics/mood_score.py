#!/usr/bin/env python3
"""
mood_score.py
-------------
Mood scoring utilities.

Analytics always use the explicit ``score`` column of a mood state. The
display ``order`` of a mood state is never a proxy for intensity.

Days are any objects exposing ``mood_state_id`` (ORM Day rows or plain
namespaces in tests). A mood state id missing from the score map resolves
to 0, which marks "no meaningful mapping".
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, Iterable, List, Mapping, Optional

ScoreMap = Dict[int, int]


def build_mood_score_map(mood_states: Iterable[Any]) -> ScoreMap:
    """
    Build the id -> score lookup.

    Args:
        mood_states: Objects (or dicts) with ``id`` and ``score``

    Returns:
        Dictionary mapping mood state id to score
    """
    score_map: ScoreMap = {}
    for mood in mood_states:
        if isinstance(mood, Mapping):
            score_map[mood["id"]] = mood["score"]
        else:
            score_map[mood.id] = mood.score
    return score_map


def resolve_score(score_map: Mapping[int, int], mood_state_id: Optional[int]) -> int:
    """Score of a mood state id, 0 when unmapped or None."""
    if mood_state_id is None:
        return 0
    return score_map.get(mood_state_id, 0)


def _collect_scores(days: Iterable[Any], score_map: Mapping[int, int]) -> List[int]:
    scores = []
    for day in days:
        mood_state_id = getattr(day, "mood_state_id", None)
        if mood_state_id is None:
            continue
        score = score_map.get(mood_state_id)
        if score is not None and score >= 0:
            scores.append(score)
    return scores


def compute_average_mood_score(days: Iterable[Any], score_map: Mapping[int, int]) -> float:
    """
    Average score of the mood-bearing days, rounded to one decimal.

    Days without a mood or with an unmapped mood are ignored. Returns 0 when
    no day qualifies; use scored_days_count() to tell that case apart from
    a genuine average of 0.

    Example:
        Three days scored 9 and two scored 3 average to 6.6.
    """
    scores = _collect_scores(days, score_map)
    if not scores:
        return 0
    return round(sum(scores) / len(scores), 1)


def scored_days_count(days: Iterable[Any], score_map: Mapping[int, int]) -> int:
    """Number of days that contribute to compute_average_mood_score()."""
    return len(_collect_scores(days, score_map))
