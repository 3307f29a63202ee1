"""Workout history commands."""

import click

from ..config import DEFAULT_HISTORY_LIMIT, LAST_SETS_LIMIT
from ..db import ExerciseRepository, HistoryRepository, PhotoRepository, WorkoutRepository
from .base import (
    async_command,
    db_path_from,
    echo_error,
    echo_info,
    ensure_initialized,
    format_duration,
    format_table,
    format_weight,
    parse_date,
)


@click.group()
@click.pass_context
def history(ctx):
    """Review completed workouts."""
    ensure_initialized(ctx)


@history.command()
@click.option("--limit", "-n", type=int, default=DEFAULT_HISTORY_LIMIT, show_default=True)
@click.pass_context
@async_command
async def dates(ctx, limit: int):
    """List days with completed workouts, newest first."""
    repo = HistoryRepository(db_path_from(ctx))

    days = await repo.get_workout_dates()
    if not days:
        echo_info("No completed workouts yet")
        return

    for day in days[:limit]:
        click.echo(day.strftime("%Y-%m-%d  %A"))


@history.command(name="list")
@click.option("--limit", "-n", type=int, default=DEFAULT_HISTORY_LIMIT, show_default=True)
@click.pass_context
@async_command
async def list_history(ctx, limit: int):
    """List the most recent completed workouts."""
    repo = HistoryRepository(db_path_from(ctx))

    sessions = await repo.get_workout_history(limit)
    if not sessions:
        echo_info("No completed workouts yet")
        return

    rows = [
        [
            s.id,
            s.started_at.strftime("%Y-%m-%d %H:%M"),
            s.name,
            format_duration(s.duration_seconds),
        ]
        for s in sessions
    ]
    click.echo()
    click.echo(format_table(["ID", "Started", "Workout", "Duration"], rows))


@history.command()
@click.argument("day")
@click.pass_context
@async_command
async def day(ctx, day: str):
    """Summarise the workouts completed on DAY (YYYY-MM-DD or 'today')."""
    db_path = db_path_from(ctx)
    on = parse_date(day)

    summaries = await HistoryRepository(db_path).get_workout_summaries_for_date(on)
    if not summaries:
        echo_info(f"No completed workouts on {on.isoformat()}")
        return

    photo_counts = await PhotoRepository(db_path).count_for_date(on)
    rows = [
        [
            s.id,
            s.name,
            format_duration(s.duration),
            str(s.exercise_count),
            str(s.total_sets),
            format_weight(s.total_volume),
            str(photo_counts.get(s.id, 0)),
        ]
        for s in summaries
    ]
    click.echo()
    click.echo(
        format_table(
            ["ID", "Workout", "Duration", "Exercises", "Sets", "Volume", "Photos"], rows
        )
    )


@history.command()
@click.argument("workout_id")
@click.pass_context
@async_command
async def summary(ctx, workout_id: str):
    """Show one workout with every logged set."""
    db_path = db_path_from(ctx)

    stats = await HistoryRepository(db_path).get_workout_summary(workout_id)
    if not stats:
        echo_error(f"Workout {workout_id} not found")
        ctx.exit(1)

    session = await WorkoutRepository(db_path).get(workout_id)
    click.echo()
    click.echo("=" * 60)
    click.echo(f"{stats.name}  ({stats.started_at.strftime('%Y-%m-%d %H:%M')})")
    click.echo("=" * 60)
    click.echo(f"Status: {session.status.value}")
    click.echo(f"Duration: {format_duration(stats.duration)}")
    click.echo(
        f"Exercises: {stats.exercise_count}  Sets: {stats.total_sets}  "
        f"Volume: {format_weight(stats.total_volume)}"
    )
    if session.notes:
        click.echo(f"Notes: {session.notes}")

    for exercise in await WorkoutRepository(db_path).get_exercises(workout_id):
        if not exercise.sets:
            continue
        click.echo()
        click.echo(exercise.exercise.name if exercise.exercise else exercise.exercise_id)
        for logged in exercise.sets:
            kind = f" [{logged.set_type.value}]" if logged.set_type.value != "normal" else ""
            rpe = f" RPE {logged.rpe:g}" if logged.rpe is not None else ""
            click.echo(
                f"  {logged.set_number}. {format_weight(logged.weight)} x {logged.reps}{rpe}{kind}"
            )

    photos = await PhotoRepository(db_path).list_for_session(workout_id)
    if photos:
        click.echo()
        click.echo("Photos:")
        for photo in photos:
            click.echo(f"  {photo.file_path}")


@history.command()
@click.argument("exercise_name")
@click.option("--limit", "-n", type=int, default=LAST_SETS_LIMIT, show_default=True)
@click.pass_context
@async_command
async def last(ctx, exercise_name: str, limit: int):
    """Show the most recent sets logged for an exercise."""
    db_path = db_path_from(ctx)

    exercise = await ExerciseRepository(db_path).get_by_name(exercise_name)
    if not exercise:
        echo_error(f"Unknown exercise '{exercise_name}'")
        ctx.exit(1)

    previous = await HistoryRepository(db_path).get_last_workout_for_exercise(
        exercise.id, limit=limit
    )
    if not previous:
        echo_info(f"No history for {exercise.name}")
        return

    rows = [
        [str(p.set_number), format_weight(p.weight), str(p.reps), format_weight(p.volume)]
        for p in previous
    ]
    click.echo()
    click.echo(exercise.name)
    click.echo(format_table(["Set", "Weight", "Reps", "Volume"], rows))


@history.command()
@click.pass_context
@async_command
async def photos(ctx):
    """List progress photos, newest workout first."""
    gallery = await PhotoRepository(db_path_from(ctx)).list_progress_photos()
    if not gallery:
        echo_info("No progress photos yet")
        return

    rows = [
        [
            p.workout_date.strftime("%Y-%m-%d") if p.workout_date else "N/A",
            p.workout_name or "",
            p.file_path,
        ]
        for p in gallery
    ]
    click.echo()
    click.echo(format_table(["Date", "Workout", "Photo"], rows))
