"""Active workout commands."""

import click
import questionary

from ..errors import InvariantViolation, NotFoundError, WorkoutConflictError
from ..models import ProgressTrend, SetType, WorkoutPhase, compare_to_last
from ..services import WorkoutFlow
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_duration,
    format_weight,
    make_flow,
)

TREND_MARKERS = {
    ProgressTrend.UP: click.style("up", fg="green"),
    ProgressTrend.DOWN: click.style("down", fg="red"),
    ProgressTrend.SAME: "same",
    ProgressTrend.FIRST: "new",
}


async def _load_flow(ctx: click.Context) -> WorkoutFlow:
    flow = make_flow(ctx)
    await flow.restore()
    return flow


async def _print_status(flow: WorkoutFlow) -> None:
    state = flow.state
    click.echo()
    click.echo("=" * 50)
    click.echo(f"Workout: {state.workout_name}")
    click.echo("=" * 50)
    click.echo(f"Status: {state.get_phase_display()}")
    click.echo(f"Elapsed: {format_duration(flow.get_elapsed_seconds())}")
    if state.phase is WorkoutPhase.PENDING_RESUME:
        remaining = state.resume_seconds_remaining()
        click.echo(f"Resume window: {format_duration(remaining)} left")

    click.echo()
    for index, exercise in enumerate(await flow.get_exercises()):
        marker = ">" if index == state.current_exercise_index else " "
        name = exercise.exercise.name if exercise.exercise else exercise.exercise_id
        click.echo(f"{marker} {index + 1}. {name}")
        for logged in exercise.sets:
            rpe = f" RPE {logged.rpe:g}" if logged.rpe is not None else ""
            click.echo(
                f"      Set {logged.set_number}: {format_weight(logged.weight)} x {logged.reps}{rpe}"
            )

    if state.phase is WorkoutPhase.IN_PROGRESS:
        click.echo()
        click.echo(
            f"Next: exercise {state.current_exercise_index + 1}, set {state.current_set_number}"
        )


async def _ask_conflict(conflict: WorkoutConflictError) -> str | None:
    """Ask whether to keep the active workout or abandon it."""
    return await questionary.select(
        f"'{conflict.workout_name}' is still active. What do you want to do?",
        choices=[
            questionary.Choice("Continue the current workout", "continue"),
            questionary.Choice("Abandon it and start the new one", "abandon"),
        ],
    ).ask_async()


@click.group()
@click.pass_context
def workout(ctx):
    """Run a workout: start, log sets, complete.

    Example usage:

        liftbook workout start <routine-id>
        liftbook workout log 60 5
        liftbook workout next
        liftbook workout complete --notes "Felt strong"
    """
    ensure_initialized(ctx)


@workout.command()
@click.argument("routine_id")
@click.option("--scheduled", "scheduled_id", help="Schedule entry this workout fulfils")
@click.option(
    "--abandon-current",
    is_flag=True,
    help="Abandon a workout already in progress without asking",
)
@click.pass_context
@async_command
async def start(ctx, routine_id: str, scheduled_id: str | None, abandon_current: bool):
    """Start a workout from a routine."""
    flow = await _load_flow(ctx)

    while True:
        try:
            session = await flow.start(routine_id, scheduled_id)
            break
        except WorkoutConflictError as conflict:
            choice = "abandon" if abandon_current else await _ask_conflict(conflict)
            if choice is None:
                echo_info("Cancelled")
                return
            if choice == "continue":
                echo_info(f"Continuing '{conflict.workout_name}'")
                await _print_status(flow)
                return
            await flow.abandon()
            echo_warning(f"Abandoned '{conflict.workout_name}'")
        except NotFoundError as e:
            echo_error(str(e))
            ctx.exit(1)

    echo_success(f"Started '{session.name}' ({session.id})")
    await _print_status(flow)


@workout.command()
@click.pass_context
@async_command
async def status(ctx):
    """Show the active workout."""
    flow = await _load_flow(ctx)

    if not flow.state.is_active:
        echo_info("No active workout. Start one with 'liftbook workout start'")
        return

    await _print_status(flow)


@workout.command(name="log")
@click.argument("weight", type=float)
@click.argument("reps", type=int)
@click.option("--exercise", "-x", "exercise_number", type=int, help="Exercise number (default: current)")
@click.option("--set", "-s", "set_number", type=int, help="Set number (default: next)")
@click.option("--rpe", type=float, help="Rate of perceived exertion, 1-10")
@click.option(
    "--type",
    "-t",
    "set_type",
    type=click.Choice([t.value for t in SetType]),
    default=SetType.NORMAL.value,
    show_default=True,
)
@click.pass_context
@async_command
async def log_set(
    ctx,
    weight: float,
    reps: int,
    exercise_number: int | None,
    set_number: int | None,
    rpe: float | None,
    set_type: str,
):
    """Log a completed set: WEIGHT x REPS."""
    flow = await _load_flow(ctx)

    if flow.state.phase is not WorkoutPhase.IN_PROGRESS:
        echo_error("No workout is in progress")
        ctx.exit(1)

    exercises = await flow.get_exercises()
    index = (
        exercise_number - 1
        if exercise_number is not None
        else flow.state.current_exercise_index
    )
    if not 0 <= index < len(exercises):
        echo_error(f"Exercise number must be between 1 and {len(exercises)}")
        ctx.exit(1)
    exercise = exercises[index]

    if index != flow.state.current_exercise_index:
        flow.select_exercise(index)

    try:
        logged = await flow.log_set(
            exercise.id, weight, reps, rpe, SetType(set_type), set_number
        )
    except (NotFoundError, InvariantViolation) as e:
        echo_error(str(e))
        ctx.exit(1)

    previous = {
        p.set_number: p for p in await flow.get_previous_sets(exercise.exercise_id)
    }
    trend = compare_to_last(weight, reps, previous.get(logged.set_number))
    name = exercise.exercise.name if exercise.exercise else exercise.exercise_id
    echo_success(
        f"{name} set {logged.set_number}: {format_weight(weight)} x {reps}  {TREND_MARKERS[trend]}"
    )


@workout.command(name="next")
@click.argument("exercise_number", type=int, required=False)
@click.pass_context
@async_command
async def next_exercise(ctx, exercise_number: int | None):
    """Move to the next exercise (or to EXERCISE_NUMBER)."""
    flow = await _load_flow(ctx)

    if flow.state.phase is not WorkoutPhase.IN_PROGRESS:
        echo_error("No workout is in progress")
        ctx.exit(1)

    exercises = await flow.get_exercises()
    index = (
        exercise_number - 1
        if exercise_number is not None
        else flow.state.current_exercise_index + 1
    )
    if not 0 <= index < len(exercises):
        echo_info("That was the last exercise. Finish with 'liftbook workout complete'")
        return

    flow.select_exercise(index)
    exercise = exercises[index]
    name = exercise.exercise.name if exercise.exercise else exercise.exercise_id
    click.echo(f"Now on {index + 1}. {name}")

    last_weight = flow.get_last_weight(exercise.exercise_id)
    if last_weight is not None:
        click.echo(f"  Last weight used: {format_weight(last_weight)}")
    previous = await flow.get_previous_sets(exercise.exercise_id)
    if previous:
        click.echo(
            "  Last time: "
            + ", ".join(f"{format_weight(p.weight)}x{p.reps}" for p in previous)
        )


@workout.command()
@click.option("--notes", "-n", help="Notes for this workout")
@click.option(
    "--photo",
    "-p",
    "photos",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Progress photo to attach (repeatable)",
)
@click.pass_context
@async_command
async def complete(ctx, notes: str | None, photos: tuple[str, ...]):
    """Complete the active workout."""
    flow = await _load_flow(ctx)

    try:
        summary = await flow.complete(notes, photos)
    except InvariantViolation as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Workout '{summary.name}' completed")
    click.echo(f"  Duration: {format_duration(summary.duration)}")
    click.echo(f"  Exercises: {summary.exercise_count}")
    click.echo(f"  Sets: {summary.total_sets}")
    click.echo(f"  Volume: {format_weight(summary.total_volume)}")
    if photos:
        click.echo(f"  Photos: {len(photos)}")
    click.echo()
    echo_info(
        f"Changed your mind? 'liftbook workout resume' within "
        f"{format_duration(flow.state.resume_seconds_remaining())}"
    )


@workout.command()
@click.pass_context
@async_command
async def resume(ctx):
    """Reopen a just-completed workout."""
    flow = await _load_flow(ctx)

    if not flow.resume():
        echo_error("Nothing to resume (the resume window has closed)")
        ctx.exit(1)

    echo_success(f"Resumed '{flow.state.workout_name}'")


@workout.command()
@click.pass_context
@async_command
async def finish(ctx):
    """Stop tracking a completed workout without waiting for the window."""
    flow = await _load_flow(ctx)

    if flow.state.phase is not WorkoutPhase.PENDING_RESUME:
        echo_error("No completed workout to finish")
        ctx.exit(1)

    name = flow.state.workout_name
    flow.finish()
    echo_success(f"Finished '{name}'")


@workout.command()
@click.option("--keep", is_flag=True, help="Keep the logged sets, marked abandoned")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def abandon(ctx, keep: bool, force: bool):
    """Abandon the active workout."""
    flow = await _load_flow(ctx)

    if not flow.state.is_active:
        echo_error("No workout is active")
        ctx.exit(1)

    name = flow.state.workout_name
    if not force and flow.state.phase is WorkoutPhase.IN_PROGRESS:
        click.echo(f"Workout: {name}")
        if not click.confirm("Are you sure you want to abandon this workout?"):
            echo_info("Cancelled")
            return

    await flow.abandon(discard=not keep)
    echo_success(f"Abandoned '{name}'")
