"""
User Commands
-------------

Commands:
    - user add: Create a user (seeds default categories and moods)
    - user timezone: Change a user's timezone
"""
import click

from daybook.core.logging_manager import handle_cli_error
from . import CLI_ERRORS, get_db


@click.group()
@click.pass_context
def user(ctx: click.Context) -> None:
    """Manage users."""
    pass


@user.command("add")
@click.argument("name")
@click.option("--timezone", "tz_name", default=None, help="IANA timezone (default: UTC)")
@click.option(
    "--no-defaults", is_flag=True, help="Skip the default categories and mood states"
)
@click.pass_context
def user_add(ctx, name, tz_name, no_defaults):
    """Create a user."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            created = db.users.create(
                {"name": name, "timezone": tz_name}, seed_defaults=not no_defaults
            )
            click.echo(
                f"✅ Created user {created.id}: {created.name} "
                f"({created.timezone or 'UTC'})"
            )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "user_add", additional_context={"name": name})


@user.command("timezone")
@click.argument("tz_name", required=False)
@click.pass_context
def user_timezone(ctx, tz_name):
    """Show or change the timezone of the current user."""
    user_id = ctx.obj["user_id"]
    try:
        db = get_db(ctx)
        with db.session_scope():
            if tz_name:
                db.users.set_timezone(user_id, tz_name)
                click.echo(f"✅ Timezone set to {tz_name}")
            else:
                click.echo(db.users.get_timezone(user_id))

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "user_timezone", additional_context={"user_id": user_id}
        )
