"""CLI entry point for liftbook."""

import sys
from pathlib import Path

import click

from . import __version__
from .commands import exercises, history, init, routines, schedule, workout
from .commands.base import echo_error
from .config import DATA_DIR_ENV, configure_logging
from .errors import StorageError


@click.group()
@click.version_option(version=__version__, prog_name="liftbook")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=DATA_DIR_ENV,
    help="Directory holding the database and state files",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress (same as --log-level INFO)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.pass_context
def main(ctx, data_dir: Path | None, verbose: bool, log_level: str):
    """liftbook: a local strength-training log.

    Build routines from the exercise library, run workouts set by set and
    look back at your history.

    Example usage:

        # Initialize the database
        liftbook init

        # Create a routine and train it
        liftbook routines create "Push Day" -e "Barbell Bench Press:3x5@60"
        liftbook workout start <routine-id>
        liftbook workout log 60 5
        liftbook workout complete

        # Review
        liftbook history dates
    """
    configure_logging("INFO" if verbose and log_level.upper() == "WARNING" else log_level)
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


# Register commands
main.add_command(init)
main.add_command(exercises)
main.add_command(routines)
main.add_command(workout)
main.add_command(history)
main.add_command(schedule)


def run():
    """Run the CLI."""
    try:
        main()
    except StorageError as e:
        echo_error(f"Storage failure: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
