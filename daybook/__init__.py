"""
Daybook
-------
Personal life-journal core: chapters of a life and the periods they span,
daily moods and media, mood analytics and "on this day" memories.
"""
__version__ = "0.1.0"
