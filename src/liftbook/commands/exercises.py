"""Exercise library commands."""

import click

from ..db import ExerciseRepository
from ..errors import InvariantViolation, NotFoundError
from ..models import EquipmentType, ExerciseCategory
from .base import (
    async_command,
    db_path_from,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
)


@click.group()
@click.pass_context
def exercises(ctx):
    """Browse and manage the exercise library."""
    ensure_initialized(ctx)


@exercises.command(name="list")
@click.option(
    "--category",
    "-c",
    type=click.Choice([c.value for c in ExerciseCategory]),
    help="Only show one muscle group",
)
@click.option("--search", "-s", "query", help="Filter by name")
@click.option("--custom", is_flag=True, help="Only show custom exercises")
@click.pass_context
@async_command
async def list_exercises(ctx, category: str | None, query: str | None, custom: bool):
    """List exercises in the library."""
    repo = ExerciseRepository(db_path_from(ctx))

    if custom:
        found = await repo.list_custom()
    elif query:
        found = await repo.search(query)
    elif category:
        found = await repo.get_by_category(ExerciseCategory(category))
    else:
        found = await repo.list_all()

    if category and (custom or query):
        found = [e for e in found if e.category.value == category]

    if not found:
        echo_info("No exercises found")
        return

    rows = [
        [e.id, e.name, e.category.value, e.equipment.value, "yes" if e.is_custom else ""]
        for e in found
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Category", "Equipment", "Custom"], rows))
    click.echo()
    click.echo(f"Total: {len(found)} exercise(s)")


@exercises.command()
@click.argument("name")
@click.option(
    "--category",
    "-c",
    type=click.Choice([c.value for c in ExerciseCategory]),
    required=True,
    help="Muscle group",
)
@click.option(
    "--equipment",
    "-e",
    type=click.Choice([e.value for e in EquipmentType]),
    default=EquipmentType.OTHER.value,
    show_default=True,
    help="Equipment used",
)
@click.pass_context
@async_command
async def add(ctx, name: str, category: str, equipment: str):
    """Add a custom exercise."""
    repo = ExerciseRepository(db_path_from(ctx))

    try:
        exercise_id = await repo.create_custom(name, category, equipment)
    except InvariantViolation as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Added '{name.strip()}' ({exercise_id})")


@exercises.command()
@click.argument("exercise_id")
@click.pass_context
@async_command
async def delete(ctx, exercise_id: str):
    """Delete a custom exercise that is not in use."""
    repo = ExerciseRepository(db_path_from(ctx))

    try:
        await repo.delete_custom(exercise_id)
    except (NotFoundError, InvariantViolation) as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Exercise {exercise_id} deleted")
