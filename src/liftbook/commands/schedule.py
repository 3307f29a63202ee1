"""Workout scheduling commands."""

import click

from ..db import ScheduleRepository
from ..errors import NotFoundError
from .base import (
    async_command,
    db_path_from,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    parse_date,
)


@click.group()
@click.pass_context
def schedule(ctx):
    """Plan routines on calendar dates."""
    ensure_initialized(ctx)


@schedule.command()
@click.argument("routine_id")
@click.argument("day")
@click.pass_context
@async_command
async def add(ctx, routine_id: str, day: str):
    """Schedule ROUTINE_ID on DAY (YYYY-MM-DD or 'today')."""
    on = parse_date(day)
    repo = ScheduleRepository(db_path_from(ctx))

    try:
        schedule_id = await repo.schedule(routine_id, on)
    except NotFoundError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Scheduled for {on.isoformat()} ({schedule_id})")


@schedule.command(name="list")
@click.argument("day", required=False)
@click.pass_context
@async_command
async def list_scheduled(ctx, day: str | None):
    """List planned workouts, for one DAY or for every planned date."""
    repo = ScheduleRepository(db_path_from(ctx))

    days = [parse_date(day)] if day else await repo.get_scheduled_dates()
    rows = []
    for on in days:
        for entry in await repo.list_for_date(on):
            rows.append([entry.id, on.isoformat(), entry.routine_name or ""])

    if not rows:
        echo_info("Nothing scheduled")
        return

    click.echo()
    click.echo(format_table(["ID", "Date", "Routine"], rows))


@schedule.command()
@click.argument("schedule_id", required=False)
@click.option("--date", "day", help="Remove every entry on this date instead")
@click.pass_context
@async_command
async def delete(ctx, schedule_id: str | None, day: str | None):
    """Remove a schedule entry (or all entries on --date)."""
    repo = ScheduleRepository(db_path_from(ctx))

    if day:
        removed = await repo.delete_for_date(parse_date(day))
        echo_success(f"Removed {removed} entr{'y' if removed == 1 else 'ies'}")
        return

    if not schedule_id:
        echo_error("Give a schedule ID or --date")
        ctx.exit(1)

    if not await repo.get(schedule_id):
        echo_error(f"Scheduled workout {schedule_id} not found")
        ctx.exit(1)

    await repo.delete(schedule_id)
    echo_success(f"Schedule entry {schedule_id} deleted")
