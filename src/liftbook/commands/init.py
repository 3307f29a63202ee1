"""Initialize project command."""

import click

from ..db import get_db_path, init_db
from .base import async_command, data_dir_from, echo_info, echo_success


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the liftbook data directory and database.

    This creates the data directory and initializes the SQLite database
    with the required schema and the built-in exercise library. Running it
    again is safe.
    """
    data_dir = data_dir_from(ctx)
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing liftbook in {data_dir}")

    seeded = await init_db(db_path)
    echo_success("Database initialized")
    if seeded:
        echo_success(f"Exercise library populated ({seeded} exercises)")

    click.echo()
    click.echo("liftbook is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create a routine:")
    click.echo('     liftbook routines create "Push Day" -e "Barbell Bench Press:3x5@60"')
    click.echo()
    click.echo("  2. Start training:")
    click.echo("     liftbook workout start <routine-id>")
