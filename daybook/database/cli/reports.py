"""
Report Commands
---------------

Commands:
    - stats overview: Mood overview (distribution, categories, trend, weekdays)
    - memories day: "On this day" memories for a date
    - memories week: Memories for the week around a date
"""
import click

from daybook.analytics.aggregator import MoodAnalytics
from daybook.core.logging_manager import handle_cli_error
from daybook.memories import MemoryResolver
from daybook.memories.resolver import MODE_DAY, MODE_WEEK
from . import CLI_ERRORS, get_db
from .output import echo_structured, format_option


@click.group()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Mood statistics."""
    pass


@stats.command("overview")
@format_option
@click.pass_context
def stats_overview(ctx, output_format):
    """Mood overview of the current user."""
    user_id = ctx.obj["user_id"]
    try:
        db = get_db(ctx)
        with db.session_scope() as session:
            overview = MoodAnalytics(db.logger).get_mood_overview(session, user_id)
        echo_structured(overview.to_dict(), output_format)

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "stats_overview", additional_context={"user_id": user_id})


@click.group()
@click.pass_context
def memories(ctx: click.Context) -> None:
    """Look back one month, six months and one year."""
    pass


def _show_memories(ctx: click.Context, mode: str, day_date, output_format: str) -> None:
    user_id = ctx.obj["user_id"]
    try:
        db = get_db(ctx)
        with db.session_scope() as session:
            context = MemoryResolver(session, db.logger).get_context(
                user_id, mode, day_date
            )
        echo_structured(context.to_dict(), output_format)

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx,
            e,
            f"memories_{mode}",
            additional_context={"user_id": user_id, "date": day_date},
        )


@memories.command("day")
@click.option("--date", "day_date", default=None, help="Base date (default: today)")
@format_option
@click.pass_context
def memories_day(ctx, day_date, output_format):
    """Memories of a single date."""
    _show_memories(ctx, MODE_DAY, day_date, output_format)


@memories.command("week")
@click.option("--date", "day_date", default=None, help="Any date of the base week")
@format_option
@click.pass_context
def memories_week(ctx, day_date, output_format):
    """Memories of the week around a date."""
    _show_memories(ctx, MODE_WEEK, day_date, output_format)
