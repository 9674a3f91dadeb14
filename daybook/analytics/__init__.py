"""
Mood analytics for Daybook.

Modules:
    mood_score: score lookup and averaging
    weekday_insights: per-weekday behavioral patterns
    aggregator: mood overview report (MoodAnalytics)

The pure modules carry no database dependency; ``aggregator`` loads its
input through the database managers.
"""
