"""
Historical "on this day" memories for Daybook.

Usage:
    from daybook.memories import MemoryResolver

    MemoryResolver(session).get_on_this_day(user_id, "2024-03-31")
"""
from .resolver import MemoryResolver

__all__ = ["MemoryResolver"]
