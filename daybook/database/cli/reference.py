"""
Reference Data Commands
-----------------------

Categories and mood states of the current user.

Commands:
    - category list | add | delete | recommendations | add-recommended
    - mood list | add | delete | recommendations | add-recommended
"""
import click

from daybook.core.logging_manager import handle_cli_error
from . import CLI_ERRORS, get_db


# ----- Categories -----
@click.group()
@click.pass_context
def category(ctx: click.Context) -> None:
    """Manage chapter categories."""
    pass


@category.command("list")
@click.pass_context
def category_list(ctx):
    """List categories in display order."""
    user_id = ctx.obj["user_id"]
    try:
        db = get_db(ctx)
        with db.session_scope():
            categories = db.categories.get_all(user_id)
            if not categories:
                click.echo("No categories.")
                return

            click.echo(f"\n🏷️  Categories ({len(categories)}):\n")
            for item in categories:
                marker = " (system)" if item.is_system else ""
                click.echo(f"  {item.id:4d}  {item.color}  {item.name}{marker}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "category_list")


@category.command("add")
@click.argument("name")
@click.option("--color", required=True, help="Color as #RRGGBB")
@click.pass_context
def category_add(ctx, name, color):
    """Create a category."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            created = db.categories.create(
                ctx.obj["user_id"], {"name": name, "color": color}
            )
            click.echo(f"✅ Created category {created.id}: {created.name}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "category_add", additional_context={"name": name})


@category.command("delete")
@click.argument("category_id", type=int)
@click.pass_context
def category_delete(ctx, category_id):
    """Delete a category no chapter uses."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            db.categories.delete(ctx.obj["user_id"], category_id)
            click.echo(f"🗑️  Deleted category {category_id}")

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "category_delete", additional_context={"category_id": category_id}
        )


@category.command("recommendations")
@click.pass_context
def category_recommendations(ctx):
    """List preset category colors."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            for preset in db.categories.list_recommendations():
                click.echo(f"  {preset['color']}  {preset['key']}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "category_recommendations")


@category.command("add-recommended")
@click.argument("key")
@click.argument("name")
@click.pass_context
def category_add_recommended(ctx, key, name):
    """Create a category NAME with the preset color KEY."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            created = db.categories.create_from_recommendation(
                ctx.obj["user_id"], key, name
            )
            click.echo(f"✅ Created category {created.id}: {created.name} ({created.color})")

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "category_add_recommended", additional_context={"key": key}
        )


# ----- Mood states -----
@click.group()
@click.pass_context
def mood(ctx: click.Context) -> None:
    """Manage mood states."""
    pass


@mood.command("list")
@click.pass_context
def mood_list(ctx):
    """List mood states with their scores."""
    user_id = ctx.obj["user_id"]
    try:
        db = get_db(ctx)
        with db.session_scope():
            moods = db.mood_states.get_all(user_id)
            if not moods:
                click.echo("No mood states.")
                return

            click.echo(f"\n🙂 Mood states ({len(moods)}):\n")
            for item in moods:
                click.echo(
                    f"  {item.id:4d}  {item.color}  {item.name:<12} score {item.score}"
                )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "mood_list")


@mood.command("add")
@click.argument("name")
@click.option("--color", required=True, help="Color as #RRGGBB")
@click.option("--score", type=int, required=True, help="Score between 0 and 10")
@click.pass_context
def mood_add(ctx, name, color, score):
    """Create a mood state."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            created = db.mood_states.create(
                ctx.obj["user_id"], {"name": name, "color": color, "score": score}
            )
            click.echo(f"✅ Created mood {created.id}: {created.name} ({created.score})")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "mood_add", additional_context={"name": name})


@mood.command("delete")
@click.argument("mood_state_id", type=int)
@click.pass_context
def mood_delete(ctx, mood_state_id):
    """Delete a mood state no day uses."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            db.mood_states.delete(ctx.obj["user_id"], mood_state_id)
            click.echo(f"🗑️  Deleted mood state {mood_state_id}")

    except CLI_ERRORS as e:
        handle_cli_error(
            ctx, e, "mood_delete", additional_context={"mood_state_id": mood_state_id}
        )


@mood.command("recommendations")
@click.pass_context
def mood_recommendations(ctx):
    """List preset mood colors and scores."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            for preset in db.mood_states.list_recommendations():
                click.echo(
                    f"  {preset['color']}  {preset['key']:<12} score {preset['score']}"
                )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "mood_recommendations")


@mood.command("add-recommended")
@click.argument("key")
@click.argument("name")
@click.pass_context
def mood_add_recommended(ctx, key, name):
    """Create a mood state NAME with the preset color and score KEY."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            created = db.mood_states.create_from_recommendation(
                ctx.obj["user_id"], key, name
            )
            click.echo(f"✅ Created mood {created.id}: {created.name} ({created.score})")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "mood_add_recommended", additional_context={"key": key})
