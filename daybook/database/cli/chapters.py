"""
Chapter & Period Commands
-------------------------

Commands:
    - chapter list: List chapters with their periods
    - chapter add: Create a chapter
    - chapter show: Chapter details (mood stats, media, density)
    - chapter delete: Delete a chapter without periods
    - period add: Add a period (omit --end for the active period)
    - period update: Change dates or comment of a period
    - period close: Set the end date of the active period
    - period delete: Delete a period

Dates are 'YYYY-MM-DD' in the user's timezone.
"""
from typing import Any, Dict

import click

from daybook.core.logging_manager import handle_cli_error
from daybook.database.managers import UNSET
from . import CLI_ERRORS, get_db
from .output import echo_structured, format_option


def _echo_chapter(chapter: Dict[str, Any]) -> None:
    category = chapter["category"]
    click.echo(f"\n📖 [{chapter['id']}] {chapter['title']} ({category['name']})")
    if chapter["description"]:
        click.echo(f"   {chapter['description']}")
    for period in chapter["periods"]:
        end = "active" if period["isActive"] else period["endDate"]
        comment = f" - {period['comment']}" if period["comment"] else ""
        click.echo(f"   • [{period['id']}] {period['startDate']} → {end}{comment}")


# ----- Chapters -----
@click.group()
@click.pass_context
def chapter(ctx: click.Context) -> None:
    """Manage chapters."""
    pass


@chapter.command("list")
@click.pass_context
def chapter_list(ctx):
    """List chapters, most recently updated first."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            chapters = db.chapters.list_chapters(ctx.obj["user_id"])
            if not chapters:
                click.echo("No chapters.")
                return
            for item in chapters:
                _echo_chapter(item)

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "chapter_list")


@chapter.command("add")
@click.argument("title")
@click.option("--category-id", type=int, required=True, help="Category of the chapter")
@click.option("--description", default=None, help="Optional description")
@click.pass_context
def chapter_add(ctx, title, category_id, description):
    """Create a chapter."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            created = db.chapters.create_chapter(
                ctx.obj["user_id"],
                {"title": title, "category_id": category_id, "description": description},
            )
            click.echo(f"✅ Created chapter {created['id']}: {created['title']}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "chapter_add", additional_context={"title": title})


@chapter.command("show")
@click.argument("chapter_id", type=int)
@format_option
@click.pass_context
def chapter_show(ctx, chapter_id, output_format):
    """Show a chapter with mood statistics and media."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            details = db.chapters.get_chapter_details(ctx.obj["user_id"], chapter_id)
        echo_structured(details, output_format)

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "chapter_show", additional_context={"chapter_id": chapter_id}
        )


@chapter.command("delete")
@click.argument("chapter_id", type=int)
@click.pass_context
def chapter_delete(ctx, chapter_id):
    """Delete a chapter that has no periods."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            db.chapters.delete_chapter(ctx.obj["user_id"], chapter_id)
            click.echo(f"🗑️  Deleted chapter {chapter_id}")

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "chapter_delete", additional_context={"chapter_id": chapter_id}
        )


# ----- Periods -----
@click.group()
@click.pass_context
def period(ctx: click.Context) -> None:
    """Manage chapter periods."""
    pass


@period.command("add")
@click.argument("chapter_id", type=int)
@click.option("--start", required=True, help="First day (YYYY-MM-DD)")
@click.option("--end", default=None, help="Last day; omit for the active period")
@click.option("--comment", default=None, help="Optional comment")
@click.pass_context
def period_add(ctx, chapter_id, start, end, comment):
    """Add a period to a chapter."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            updated = db.periods.create_period(
                ctx.obj["user_id"], chapter_id, start, end, comment
            )
            click.echo("✅ Period added")
            _echo_chapter(updated)

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx,
            e,
            "period_add",
            additional_context={"chapter_id": chapter_id, "start": start, "end": end},
        )


@period.command("update")
@click.argument("period_id", type=int)
@click.option("--start", default=None, help="New first day")
@click.option("--end", default=None, help="New last day")
@click.option("--reopen", is_flag=True, help="Clear the end date")
@click.option("--comment", default=None, help="New comment")
@click.pass_context
def period_update(ctx, period_id, start, end, reopen, comment):
    """Change the dates or comment of a period."""
    try:
        if reopen and end:
            raise click.UsageError("--end and --reopen are mutually exclusive")

        changes: Dict[str, Any] = {
            "start": start if start is not None else UNSET,
            "end": None if reopen else (end if end is not None else UNSET),
            "comment": comment if comment is not None else UNSET,
        }
        db = get_db(ctx)
        with db.session_scope():
            updated = db.periods.update_period(ctx.obj["user_id"], period_id, **changes)
            click.echo("✅ Period updated")
            _echo_chapter(updated)

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "period_update", additional_context={"period_id": period_id}
        )


@period.command("close")
@click.argument("period_id", type=int)
@click.option("--end", required=True, help="Last day (YYYY-MM-DD)")
@click.pass_context
def period_close(ctx, period_id, end):
    """Close the active period of a chapter."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            updated = db.periods.close_period(ctx.obj["user_id"], period_id, end)
            click.echo("✅ Period closed")
            _echo_chapter(updated)

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx,
            e,
            "period_close",
            additional_context={"period_id": period_id, "end": end},
        )


@period.command("delete")
@click.argument("period_id", type=int)
@click.pass_context
def period_delete(ctx, period_id):
    """Delete a period."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            db.periods.delete_period(ctx.obj["user_id"], period_id)
            click.echo(f"🗑️  Deleted period {period_id}")

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "period_delete", additional_context={"period_id": period_id}
        )
