"""Shared CLI utilities."""

import asyncio
from datetime import date
from functools import wraps
from pathlib import Path

import click

from ..config import ACTIVE_WORKOUT_FILENAME, INPUT_MEMORY_FILENAME, get_data_dir
from ..db import get_db_path
from ..services import ActiveWorkoutStore, InputMemory, WorkoutFlow


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def data_dir_from(ctx: click.Context) -> Path:
    """Data directory chosen on the root command (or the default)."""
    obj = ctx.find_root().obj or {}
    return get_data_dir(obj.get("data_dir"))


def db_path_from(ctx: click.Context) -> Path:
    return get_db_path(data_dir_from(ctx))


def make_flow(ctx: click.Context) -> WorkoutFlow:
    """Build a WorkoutFlow whose files all live in the selected data directory."""
    data_dir = data_dir_from(ctx)
    return WorkoutFlow(
        db_path=get_db_path(data_dir),
        store=ActiveWorkoutStore(data_dir / ACTIVE_WORKOUT_FILENAME),
        memory=InputMemory(data_dir / INPUT_MEMORY_FILENAME),
    )


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    if not db_path_from(ctx).exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Database not initialized. Run 'liftbook init' first."
        )
        ctx.exit(1)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD argument ('today' is accepted)."""
    if value == "today":
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got '{value}'") from None


def format_duration(seconds: int) -> str:
    """Format seconds as M:SS or H:MM:SS."""
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_weight(weight: float | None) -> str:
    if weight is None:
        return "-"
    return f"{weight:g}"


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(line.rstrip() for line in lines)
