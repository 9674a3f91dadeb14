#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the Daybook project.

All paths are Path objects. User data lives under a single home directory
that defaults to ``~/.daybook`` and can be relocated with the
``DAYBOOK_HOME`` environment variable:

    DAYBOOK_HOME/
    ├── data/          # SQLite database
    └── logs/          # Application logs

The Alembic migration environment ships inside the package.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_home() -> Path:
    """
    Determine the Daybook home directory.

    Returns:
        Path from DAYBOOK_HOME if set, otherwise ~/.daybook
    """
    override = os.environ.get("DAYBOOK_HOME")
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".daybook"


# ----- Package directory -----
PACKAGE_DIR: Path = Path(__file__).resolve().parent.parent

# --- Database ---
MIGRATIONS_DIR = PACKAGE_DIR / "migrations"

# ----- User directories -----
ROOT: Path = _get_home()
DATA_DIR = ROOT / "data"
DB_PATH = DATA_DIR / "daybook.db"

# ---- Logs ----
LOG_DIR = ROOT / "logs"
