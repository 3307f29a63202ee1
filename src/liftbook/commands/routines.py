"""Routine template commands."""

import re

import click

from ..config import DEFAULT_REST_SECONDS
from ..db import ExerciseRepository, RoutineRepository
from ..errors import InvariantViolation, NotFoundError
from ..models import RoutineExerciseInput, RoutineSetInput, group_by_supersets
from .base import (
    async_command,
    db_path_from,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    format_weight,
)

# SETSxREPS[@WEIGHT][+GROUP], e.g. "3x5@60" or "3x12+A"
PRESCRIPTION_RE = re.compile(
    r"^(?P<sets>\d+)x(?P<reps>\d+)"
    r"(?:@(?P<weight>\d+(?:\.\d+)?))?"
    r"(?:\+(?P<group>\w+))?$",
    re.IGNORECASE,
)


def parse_exercise_option(value: str) -> tuple[str, int, int, float | None, str | None]:
    """Split ``"NAME:SETSxREPS[@WEIGHT][+GROUP]"`` into its parts.

    Returns:
        (exercise name, set count, target reps, target weight, superset group)
    """
    name, sep, prescription = value.rpartition(":")
    match = PRESCRIPTION_RE.match(prescription.strip())
    if not sep or not name.strip() or not match:
        raise click.BadParameter(
            f"'{value}' should look like 'Barbell Bench Press:3x5@60'"
        )
    weight = match.group("weight")
    return (
        name.strip(),
        int(match.group("sets")),
        int(match.group("reps")),
        float(weight) if weight is not None else None,
        match.group("group"),
    )


@click.group()
@click.pass_context
def routines(ctx):
    """Manage routine templates."""
    ensure_initialized(ctx)


@routines.command(name="list")
@click.pass_context
@async_command
async def list_routines(ctx):
    """List routines, most recently updated first."""
    repo = RoutineRepository(db_path_from(ctx))

    all_routines = await repo.list_all()
    if not all_routines:
        echo_info("No routines found. Create one with 'liftbook routines create'")
        return

    rows = []
    for routine in all_routines:
        updated = routine.updated_at.strftime("%Y-%m-%d") if routine.updated_at else "N/A"
        rows.append([routine.id, routine.name, updated])

    click.echo()
    click.echo(format_table(["ID", "Name", "Updated"], rows))
    click.echo()
    click.echo(f"Total: {len(all_routines)} routine(s)")


@routines.command()
@click.argument("routine_id")
@click.pass_context
@async_command
async def show(ctx, routine_id: str):
    """Show a routine with its exercises and target sets."""
    repo = RoutineRepository(db_path_from(ctx))

    routine = await repo.get_with_exercises(routine_id)
    if not routine:
        echo_error(f"Routine {routine_id} not found")
        ctx.exit(1)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Routine: {routine.name}")
    click.echo("=" * 60)
    click.echo(f"{len(routine.exercises)} exercise(s), {routine.total_sets} set(s)")

    for group in group_by_supersets(routine.exercises):
        click.echo()
        if group.is_superset:
            click.echo(f"Superset {group.superset_group_id}:")
        for exercise in group.exercises:
            indent = "  " if group.is_superset else ""
            click.echo(
                f"{indent}{exercise.order + 1}. {exercise.display_name}"
                f"  (rest {exercise.rest_seconds}s)"
            )
            if exercise.notes:
                click.echo(f"{indent}   {exercise.notes}")
            for target in exercise.sets:
                click.echo(
                    f"{indent}   Set {target.set_number}: {target.target_reps} reps"
                    f" @ {format_weight(target.target_weight)}"
                    + (f" [{target.set_type.value}]" if target.set_type.value != "normal" else "")
                )


@routines.command()
@click.argument("name")
@click.option(
    "--exercise",
    "-e",
    "exercise_options",
    multiple=True,
    required=True,
    help="NAME:SETSxREPS[@WEIGHT][+GROUP], repeat in order",
)
@click.option(
    "--rest",
    type=int,
    default=DEFAULT_REST_SECONDS,
    show_default=True,
    help="Rest between sets in seconds",
)
@click.pass_context
@async_command
async def create(ctx, name: str, exercise_options: tuple[str, ...], rest: int):
    """Create a routine.

    Example:

        liftbook routines create "Push Day" -e "Barbell Bench Press:3x5@60"
        -e "Cable Fly:3x12+A" -e "Tricep Pushdown:3x12+A"
    """
    db_path = db_path_from(ctx)
    library = ExerciseRepository(db_path)
    repo = RoutineRepository(db_path)

    inputs = []
    for order, value in enumerate(exercise_options):
        exercise_name, set_count, reps, weight, group = parse_exercise_option(value)
        exercise = await library.get_by_name(exercise_name)
        if exercise is None:
            echo_error(f"Unknown exercise '{exercise_name}'. See 'liftbook exercises list'")
            ctx.exit(1)
        inputs.append(
            RoutineExerciseInput(
                exercise_id=exercise.id,
                order=order,
                rest_seconds=rest,
                superset_group_id=group,
                sets=[
                    RoutineSetInput(set_number=n, target_reps=reps, target_weight=weight)
                    for n in range(1, set_count + 1)
                ],
            )
        )

    try:
        routine_id = await repo.create(name, inputs)
    except (NotFoundError, InvariantViolation) as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Created routine '{name.strip()}' ({routine_id})")


@routines.command()
@click.argument("routine_id")
@click.argument("name")
@click.pass_context
@async_command
async def rename(ctx, routine_id: str, name: str):
    """Rename a routine."""
    repo = RoutineRepository(db_path_from(ctx))

    try:
        await repo.rename(routine_id, name)
    except (NotFoundError, InvariantViolation) as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Routine renamed to '{name.strip()}'")


@routines.command()
@click.argument("routine_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, routine_id: str, force: bool):
    """Delete a routine. Logged workouts are kept."""
    repo = RoutineRepository(db_path_from(ctx))

    routine = await repo.get_with_exercises(routine_id)
    if not routine:
        echo_error(f"Routine {routine_id} not found")
        ctx.exit(1)

    if not force:
        click.echo(f"Routine: {routine.name}")
        if not click.confirm("Are you sure you want to delete this routine?"):
            echo_info("Cancelled")
            return

    await repo.delete(routine_id)
    echo_success(f"Routine {routine_id} deleted")
