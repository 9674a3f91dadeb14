#!/usr/bin/env python3
"""
weekday_insights.py
-------------------
Weekday behavioral patterns derived from mood-bearing days.

Weekdays are numbered 0=Monday ... 6=Sunday. Input samples are local
calendar dates with a mood score and an activity score (media count plus
periods starting or ending that day).

Derived insights:
    - best / worst mood day        (weekdays with >= 3 samples)
    - most / least active day      (weekdays with >= 3 samples)
    - most unstable day            (weekdays with >= 5 samples, population SD)
    - recovery index               (rebound on the day after a trough)
    - burnout pattern              (multi-week decline with busy workdays)

Every insight degrades to None when no weekday qualifies; the 14-day gate
in compute_weekday_insights() is the only hard threshold.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import statistics
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

# ----- Thresholds -----
MIN_TOTAL_DAYS = 14
MIN_WEEKDAY_ENTRIES = 3
MIN_VOLATILITY_ENTRIES = 5
MIN_RECOVERY_OCCURRENCES = 2
TROUGH_PERCENTILE = 0.25
RECOVERY_DELTA = 2
BURNOUT_WINDOW_WEEKS = 4
MIN_BURNOUT_WEEKS = 3
DECLINE_SLOPE = -0.25
WORKDAYS = range(0, 5)


@dataclass
class DaySample:
    """A mood-bearing day: local date, mood score and activity score."""

    date: date
    score: float
    activity_score: float = 0


@dataclass
class WeekdayStats:
    """Aggregates of one weekday."""

    weekday: int
    average_score: float
    sample_size: int
    average_activity: float
    standard_deviation: float


@dataclass
class MoodDayInsight:
    weekday: int
    average_score: float
    sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekday": self.weekday,
            "averageScore": self.average_score,
            "sampleSize": self.sample_size,
        }


@dataclass
class ActivityInsight:
    weekday: int
    average_activity_score: float
    sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekday": self.weekday,
            "averageActivityScore": self.average_activity_score,
            "sampleSize": self.sample_size,
        }


@dataclass
class VolatilityInsight:
    weekday: int
    standard_deviation: float
    sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekday": self.weekday,
            "standardDeviation": self.standard_deviation,
            "sampleSize": self.sample_size,
        }


@dataclass
class RecoveryInsight:
    weekday: int
    recovery_rate: float
    recovery_events: int
    total_occurrences: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekday": self.weekday,
            "recoveryRate": self.recovery_rate,
            "recoveryEvents": self.recovery_events,
            "totalOccurrences": self.total_occurrences,
        }


@dataclass
class BurnoutInsight:
    detected: bool
    type: Optional[str] = None
    confidence: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"detected": self.detected}
        if self.type is not None:
            payload["type"] = self.type
        if self.confidence is not None:
            payload["confidence"] = self.confidence
        return payload


@dataclass
class WeekdayInsights:
    """All weekday insights of a user."""

    best_mood_day: Optional[MoodDayInsight]
    worst_mood_day: Optional[MoodDayInsight]
    most_active_day: Optional[ActivityInsight]
    least_active_day: Optional[ActivityInsight]
    most_unstable_day: Optional[VolatilityInsight]
    recovery_index: Optional[RecoveryInsight]
    burnout_pattern: Optional[BurnoutInsight]

    def to_dict(self) -> Dict[str, Any]:
        def dump(item: Any) -> Optional[Dict[str, Any]]:
            return item.to_dict() if item is not None else None

        return {
            "bestMoodDay": dump(self.best_mood_day),
            "worstMoodDay": dump(self.worst_mood_day),
            "mostActiveDay": dump(self.most_active_day),
            "leastActiveDay": dump(self.least_active_day),
            "mostUnstableDay": dump(self.most_unstable_day),
            "recoveryIndex": dump(self.recovery_index),
            "burnoutPattern": dump(self.burnout_pattern),
        }


def _round1(value: float) -> float:
    return round(value, 1)


def _round2(value: float) -> float:
    return round(value, 2)


def group_by_weekday(samples: Iterable[DaySample]) -> Dict[int, List[DaySample]]:
    """Samples keyed by weekday (0=Monday)."""
    groups: Dict[int, List[DaySample]] = {}
    for sample in samples:
        groups.setdefault(sample.date.weekday(), []).append(sample)
    return groups


def compute_weekday_stats(samples: Iterable[DaySample]) -> List[WeekdayStats]:
    """Per-weekday aggregates for every weekday with at least one sample."""
    stats = []
    for weekday, entries in sorted(group_by_weekday(samples).items()):
        scores = [s.score for s in entries]
        stats.append(
            WeekdayStats(
                weekday=weekday,
                average_score=statistics.fmean(scores),
                sample_size=len(entries),
                average_activity=statistics.fmean(s.activity_score for s in entries),
                standard_deviation=statistics.pstdev(scores),
            )
        )
    return stats


def _extremes(
    stats: Sequence[WeekdayStats], key: str, min_samples: int
) -> Tuple[Optional[WeekdayStats], Optional[WeekdayStats]]:
    """Highest and lowest weekday on an attribute; ties go to the earliest weekday."""
    qualified = [s for s in stats if s.sample_size >= min_samples]
    if not qualified:
        return None, None
    highest = min(qualified, key=lambda s: (-getattr(s, key), s.weekday))
    lowest = min(qualified, key=lambda s: (getattr(s, key), s.weekday))
    return highest, lowest


def compute_best_worst_mood_day(
    samples: Iterable[DaySample],
) -> Tuple[Optional[MoodDayInsight], Optional[MoodDayInsight]]:
    """Weekdays with the highest and lowest average mood score."""
    best, worst = _extremes(
        compute_weekday_stats(samples), "average_score", MIN_WEEKDAY_ENTRIES
    )
    if best is None or worst is None:
        return None, None
    return (
        MoodDayInsight(best.weekday, _round1(best.average_score), best.sample_size),
        MoodDayInsight(worst.weekday, _round1(worst.average_score), worst.sample_size),
    )


def compute_activity_days(
    samples: Iterable[DaySample],
) -> Tuple[Optional[ActivityInsight], Optional[ActivityInsight]]:
    """Weekdays with the highest and lowest average activity score."""
    most, least = _extremes(
        compute_weekday_stats(samples), "average_activity", MIN_WEEKDAY_ENTRIES
    )
    if most is None or least is None:
        return None, None
    return (
        ActivityInsight(most.weekday, _round1(most.average_activity), most.sample_size),
        ActivityInsight(least.weekday, _round1(least.average_activity), least.sample_size),
    )


def compute_most_unstable_day(
    samples: Iterable[DaySample],
) -> Optional[VolatilityInsight]:
    """Weekday with the highest population standard deviation of mood."""
    most, _ = _extremes(
        compute_weekday_stats(samples), "standard_deviation", MIN_VOLATILITY_ENTRIES
    )
    if most is None:
        return None
    return VolatilityInsight(
        most.weekday, _round2(most.standard_deviation), most.sample_size
    )


def compute_recovery_index(samples: Sequence[DaySample]) -> Optional[RecoveryInsight]:
    """
    Weekday on which the user most reliably bounces back after a low day.

    A trough is a day scoring at or below the 25th percentile of all scores.
    Whenever a trough is followed by a sample on the next calendar day, the
    weekday of that following day records one occurrence, and a recovery
    event when the score rose by at least RECOVERY_DELTA. Weekdays with at
    least MIN_RECOVERY_OCCURRENCES compete on rate, then event count, then
    the earliest weekday.
    """
    if len(samples) < 2:
        return None

    threshold = statistics.quantiles(
        [s.score for s in samples], n=4, method="inclusive"
    )[0]
    by_date = {s.date: s for s in samples}

    tallies: Dict[int, List[int]] = {}
    for sample in sorted(samples, key=lambda s: s.date):
        if sample.score > threshold:
            continue
        following = by_date.get(sample.date + timedelta(days=1))
        if following is None:
            continue
        tally = tallies.setdefault(following.date.weekday(), [0, 0])
        tally[1] += 1
        if following.score - sample.score >= RECOVERY_DELTA:
            tally[0] += 1

    candidates = [
        (weekday, events, total)
        for weekday, (events, total) in tallies.items()
        if total >= MIN_RECOVERY_OCCURRENCES
    ]
    if not candidates:
        return None

    weekday, events, total = min(
        candidates, key=lambda c: (-(c[1] / c[2]), -c[1], c[0])
    )
    return RecoveryInsight(
        weekday=weekday,
        recovery_rate=_round2(events / total),
        recovery_events=events,
        total_occurrences=total,
    )


def _slope(points: Sequence[Tuple[float, float]]) -> float:
    """Least-squares slope of (x, y) points."""
    mean_x = statistics.fmean(x for x, _ in points)
    mean_y = statistics.fmean(y for _, y in points)
    numerator = sum((x - mean_x) * (y - mean_y) for x, y in points)
    denominator = sum((x - mean_x) ** 2 for x, _ in points)
    return numerator / denominator if denominator else 0.0


def compute_burnout_pattern(samples: Sequence[DaySample]) -> Optional[BurnoutInsight]:
    """
    Flag a sustained mood decline that coincides with busy workdays.

    The window is the last BURNOUT_WINDOW_WEEKS ISO weeks holding data. A
    decline is sustained when the least-squares slope of the weekly mean
    scores is at most DECLINE_SLOPE points per week and the last week ends
    below the first. Workday activity is elevated when its mean inside the
    window exceeds the mean activity before the window (or, without any
    history, the weekend mean inside the window).

    Returns:
        None with fewer than MIN_BURNOUT_WEEKS data weeks, otherwise a
        BurnoutInsight (detected or not)
    """
    weeks: Dict[date, List[DaySample]] = {}
    for sample in samples:
        monday = sample.date - timedelta(days=sample.date.weekday())
        weeks.setdefault(monday, []).append(sample)

    window_mondays = sorted(weeks)[-BURNOUT_WINDOW_WEEKS:]
    if len(window_mondays) < MIN_BURNOUT_WEEKS:
        return None

    first_monday = window_mondays[0]
    points = [
        (
            (monday - first_monday).days / 7,
            statistics.fmean(s.score for s in weeks[monday]),
        )
        for monday in window_mondays
    ]
    slope = _slope(points)
    declining = slope <= DECLINE_SLOPE and points[-1][1] < points[0][1]
    if not declining:
        return BurnoutInsight(detected=False)

    window = [s for monday in window_mondays for s in weeks[monday]]
    history = [s for s in samples if s.date < first_monday]
    workday_activity = [s.activity_score for s in window if s.date.weekday() in WORKDAYS]
    if history:
        baseline_values = [s.activity_score for s in history]
    else:
        baseline_values = [
            s.activity_score for s in window if s.date.weekday() not in WORKDAYS
        ]
    if not workday_activity or not baseline_values:
        return BurnoutInsight(detected=False)

    workday_mean = statistics.fmean(workday_activity)
    baseline = statistics.fmean(baseline_values)
    if workday_mean <= baseline:
        return BurnoutInsight(detected=False)

    lift = (workday_mean - baseline) / baseline if baseline > 0 else 1.0
    confidence = 0.6 * min(1.0, abs(slope)) + 0.4 * min(1.0, lift)
    return BurnoutInsight(
        detected=True,
        type="work_stress_pattern",
        confidence=_round2(max(0.0, min(1.0, confidence))),
    )


def compute_weekday_insights(samples: Sequence[DaySample]) -> Optional[WeekdayInsights]:
    """
    All weekday insights, or None below MIN_TOTAL_DAYS samples.

    Args:
        samples: Mood-bearing days with a non-negative score
    """
    if len(samples) < MIN_TOTAL_DAYS:
        return None

    best, worst = compute_best_worst_mood_day(samples)
    most_active, least_active = compute_activity_days(samples)
    return WeekdayInsights(
        best_mood_day=best,
        worst_mood_day=worst,
        most_active_day=most_active,
        least_active_day=least_active,
        most_unstable_day=compute_most_unstable_day(samples),
        recovery_index=compute_recovery_index(samples),
        burnout_pattern=compute_burnout_pattern(samples),
    )
