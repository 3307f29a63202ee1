"""Database layer for liftbook."""

from .engine import connect, get_db_path, init_db, seed_exercises, transaction
from .repositories import (
    ExerciseRepository,
    HistoryRepository,
    PhotoRepository,
    RoutineRepository,
    ScheduleRepository,
    WorkoutRepository,
)

__all__ = [
    "connect",
    "ExerciseRepository",
    "get_db_path",
    "HistoryRepository",
    "init_db",
    "PhotoRepository",
    "RoutineRepository",
    "ScheduleRepository",
    "seed_exercises",
    "transaction",
    "WorkoutRepository",
]
