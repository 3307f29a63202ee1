"""CLI commands for liftbook."""

from .exercises import exercises
from .history import history
from .init import init
from .routines import routines
from .schedule import schedule
from .workout import workout

__all__ = [
    "exercises",
    "history",
    "init",
    "routines",
    "schedule",
    "workout",
]
