"""
Day Commands
------------

Commands:
    - day set: Set or clear the mood of a date
    - day show: Show a date's mood and media
    - day media: Attach media metadata to a date
    - day location: Set or clear where a date was spent
"""
import click

from daybook.core.logging_manager import handle_cli_error
from daybook.database.managers import UNSET
from . import CLI_ERRORS, get_db


@click.group()
@click.pass_context
def day(ctx: click.Context) -> None:
    """Record daily moods and media."""
    pass


@day.command("set")
@click.argument("day_date")
@click.option("--mood", "mood_state_id", type=int, default=None, help="Mood state id")
@click.option("--clear-mood", is_flag=True, help="Remove the mood of the day")
@click.pass_context
def day_set(ctx, day_date, mood_state_id, clear_mood):
    """Set the mood of a date (YYYY-MM-DD)."""
    try:
        if clear_mood and mood_state_id is not None:
            raise click.UsageError("--mood and --clear-mood are mutually exclusive")
        if clear_mood:
            value = None
        elif mood_state_id is not None:
            value = mood_state_id
        else:
            value = UNSET

        db = get_db(ctx)
        with db.session_scope():
            record = db.days.upsert(ctx.obj["user_id"], day_date, mood_state_id=value)
            mood = record.mood_state
            click.echo(
                f"✅ {record.date.isoformat()}: {mood.name if mood else 'no mood'}"
            )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "day_set", additional_context={"date": day_date})


@day.command("show")
@click.argument("day_date")
@click.pass_context
def day_show(ctx, day_date):
    """Show the record of a date."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            record = db.days.get(ctx.obj["user_id"], day_date)
            if record is None:
                click.echo(f"No record for {day_date}")
                return

            mood = record.mood_state
            click.echo(f"\n📅 {record.date.isoformat()}")
            click.echo(f"🙂 Mood: {mood.name if mood else '-'}")
            if record.location_name or record.latitude is not None:
                coords = (
                    f" ({record.latitude}, {record.longitude})"
                    if record.latitude is not None
                    else ""
                )
                click.echo(f"📍 Location: {record.location_name or '-'}{coords}")
            click.echo(f"🖼️  Media: {len(record.media)}")
            for media in record.media:
                star = " ★" if media.id == record.main_media_id else ""
                click.echo(f"  • [{media.id}] {media.file_name}{star}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "day_show", additional_context={"date": day_date})


@day.command("media")
@click.argument("day_date")
@click.argument("storage_key")
@click.option("--file-name", required=True, help="Original file name")
@click.option("--content-type", default=None, help="MIME type")
@click.option("--size", type=int, default=0, help="Size in bytes")
@click.option("--main", "make_main", is_flag=True, help="Make it the day's main media")
@click.pass_context
def day_media(ctx, day_date, storage_key, file_name, content_type, size, make_main):
    """Attach media metadata to a date."""
    user_id = ctx.obj["user_id"]
    try:
        db = get_db(ctx)
        with db.session_scope():
            media = db.days.add_media(
                user_id,
                day_date,
                {
                    "storage_key": storage_key,
                    "file_name": file_name,
                    "content_type": content_type,
                    "size": size,
                },
            )
            if make_main:
                db.days.upsert(user_id, day_date, main_media_id=media.id)
            click.echo(f"✅ Attached media {media.id} to {day_date}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "day_media", additional_context={"date": day_date})


@day.command("location")
@click.argument("day_date")
@click.option("--name", "location_name", default=None, help="Place name")
@click.option("--lat", "latitude", type=float, default=None, help="Latitude (-90..90)")
@click.option("--lon", "longitude", type=float, default=None, help="Longitude (-180..180)")
@click.option("--clear", is_flag=True, help="Remove name and coordinates")
@click.pass_context
def day_location(ctx, day_date, location_name, latitude, longitude, clear):
    """Set or clear the location of a date."""
    try:
        given = {
            "location_name": location_name,
            "latitude": latitude,
            "longitude": longitude,
        }
        if clear and any(value is not None for value in given.values()):
            raise click.UsageError("--clear cannot be combined with --name, --lat or --lon")
        if clear:
            changes = dict.fromkeys(given)
        else:
            changes = {key: value for key, value in given.items() if value is not None}
        if not clear and not changes:
            raise click.UsageError("Give --name, --lat, --lon or --clear")

        db = get_db(ctx)
        with db.session_scope():
            record = db.days.update_location(ctx.obj["user_id"], day_date, **changes)
            place = record.location_name or "no location"
            click.echo(f"✅ {record.date.isoformat()}: {place}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "day_location", additional_context={"date": day_date})
