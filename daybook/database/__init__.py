#!/usr/bin/env python3
"""
Daybook Database Package
------------------------
Persistence layer of the Daybook core.

This package provides:
- ORM models (users, categories, mood states, chapters, periods, days, media)
- Entity managers, including the period consistency engine
- DaybookDB: engine, session scope and Alembic schema management
- Logging and error-normalizing decorators
"""

from .manager import DaybookDB
from daybook.core.exceptions import DatabaseError, ValidationError
from .managers.base_manager import HasId
from .decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)

__all__ = [
    # Main manager
    "DaybookDB",
    # Exceptions
    "DatabaseError",
    "ValidationError",
    # Decorators
    "DatabaseOperation",
    "log_database_operation",
    "handle_db_errors",
    # Protocols
    "HasId",
]
