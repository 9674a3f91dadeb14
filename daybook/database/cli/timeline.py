"""
Timeline Commands
-----------------

Commands:
    - timeline range: Periods and days between two dates (last year by default)
    - timeline week: Periods and all seven days of a Monday-Sunday week
"""
import click

from daybook.core.logging_manager import handle_cli_error
from daybook.timeline import TimelineBuilder
from . import CLI_ERRORS, get_db
from .output import echo_structured, format_option


@click.group()
@click.pass_context
def timeline(ctx: click.Context) -> None:
    """Chapters and days laid out over time."""
    pass


@timeline.command("range")
@click.option("--from", "from_date", default=None, help="First day (YYYY-MM-DD)")
@click.option("--to", "to_date", default=None, help="Last day (YYYY-MM-DD)")
@format_option
@click.pass_context
def timeline_range(ctx, from_date, to_date, output_format):
    """Periods and days of a date range."""
    try:
        db = get_db(ctx)
        with db.session_scope() as session:
            result = TimelineBuilder(session, db.logger).get_timeline(
                ctx.obj["user_id"], from_date, to_date
            )
        echo_structured(result.to_dict(), output_format)

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx,
            e,
            "timeline_range",
            additional_context={"from": from_date, "to": to_date},
        )


@timeline.command("week")
@click.option("--date", "day_date", default=None, help="Any day of the week (default: today)")
@format_option
@click.pass_context
def timeline_week(ctx, day_date, output_format):
    """Periods and days of the week around a date."""
    try:
        db = get_db(ctx)
        with db.session_scope() as session:
            result = TimelineBuilder(session, db.logger).get_week_timeline(
                ctx.obj["user_id"], day_date
            )
        echo_structured(result.to_dict(), output_format)

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "timeline_week", additional_context={"date": day_date})
