"""
Setup Commands
--------------

Database initialization and schema status.

Commands:
    - init: Create (or migrate) the database schema
    - status: Show the Alembic revision of the database
"""
import click

from daybook.core.logging_manager import handle_cli_error
from . import CLI_ERRORS, get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the database (creates tables or runs pending migrations)."""
    try:
        click.echo("🚀 Initializing Daybook database...")
        db = get_db(ctx)
        click.echo(f"🗄️  Database: {db.db_path}")
        click.echo("✅ Database ready!")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "init")


@click.command()
@click.pass_context
def status(ctx):
    """Show current migration status."""
    try:
        db = get_db(ctx)
        history = db.get_migration_history()

        if "error" in history:
            click.echo(f"❌ {history['error']}", err=True)
            ctx.exit(1)

        click.echo(f"📍 Current revision: {history['current_revision'] or 'none'}")
        click.echo(f"📊 Status: {history['status']}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "status")
