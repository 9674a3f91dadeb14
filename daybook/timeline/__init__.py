"""
Chapter periods and day records laid out over a date range.

Usage:
    from daybook.timeline import TimelineBuilder

    TimelineBuilder(session).get_week_timeline(user_id, "2024-06-12")
"""
from .builder import RangeTimeline, TimelineBuilder, WeekTimeline

__all__ = ["RangeTimeline", "TimelineBuilder", "WeekTimeline"]
