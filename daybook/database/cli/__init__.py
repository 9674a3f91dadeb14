#!/usr/bin/env python3
"""
Daybook CLI
-----------

Command-line interface over the Daybook core.

This module provides the main CLI group and shared context setup for all
commands. Every command acts on behalf of one user, selected with
``--user-id`` (or the DAYBOOK_USER_ID environment variable).

Command Structure:
    - Setup (init, status)
    - Users (user add, user timezone)
    - Reference data (category ..., mood ..., with preset recommendations)
    - Chapters & periods (chapter ..., period add|update|close|delete)
    - Days (day set, day show, day media, day location)
    - Reports (stats overview, memories day|week)
    - Timeline (timeline range, timeline week)

Usage:
    # Create the database and a first user
    daybook init
    daybook user add "Ada" --timezone Europe/Berlin

    # Open a chapter with an active period
    daybook chapter add "New job" --category-id 1
    daybook period add 1 --start 2024-01-08

    # Reports
    daybook stats overview --format yaml
    daybook memories week --date 2024-06-12
"""
import logging
from pathlib import Path

import click

from daybook.core.exceptions import DatabaseError, DomainError, ValidationError
from daybook.core.paths import DB_PATH, LOG_DIR
from daybook.database.manager import DaybookDB

# Failures reported through handle_cli_error
CLI_ERRORS = (DatabaseError, DomainError, ValidationError)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--user-id",
    type=int,
    default=1,
    envvar="DAYBOOK_USER_ID",
    show_default=True,
    help="User the command acts for",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, user_id, verbose):
    """Daybook: chapters, periods, moods and memories."""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["user_id"] = user_id
    ctx.obj["verbose"] = verbose


def get_db(ctx) -> DaybookDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        db = DaybookDB(
            db_path=ctx.obj["db_path"],
            log_dir=ctx.obj["log_dir"],
        )
        ctx.obj["db"] = db
        ctx.obj["logger"] = db.logger
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, status  # noqa: E402
from .users import user  # noqa: E402
from .reference import category, mood  # noqa: E402
from .chapters import chapter, period  # noqa: E402
from .days import day  # noqa: E402
from .reports import memories, stats  # noqa: E402
from .timeline import timeline  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(status)

# Register command groups
cli.add_command(user)
cli.add_command(category)
cli.add_command(mood)
cli.add_command(chapter)
cli.add_command(period)
cli.add_command(day)
cli.add_command(stats)
cli.add_command(memories)
cli.add_command(timeline)
