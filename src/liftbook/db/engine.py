"""Database engine setup and initialization."""

import logging
import sqlite3
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from ..config import DB_FILENAME, get_data_dir
from ..errors import StorageError

log = logging.getLogger(__name__)

SCHEMA = """
-- Master exercise library
CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    equipment TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL,
    is_custom INTEGER NOT NULL DEFAULT 0
);

-- Routine templates (the plan)
CREATE TABLE IF NOT EXISTS routine_templates (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE TABLE IF NOT EXISTS routine_exercises (
    id TEXT PRIMARY KEY,
    routine_template_id TEXT NOT NULL,
    exercise_id TEXT NOT NULL,
    sort_order INTEGER NOT NULL,
    rest_seconds INTEGER NOT NULL DEFAULT 90,
    notes TEXT,
    superset_group_id TEXT,
    FOREIGN KEY (routine_template_id) REFERENCES routine_templates(id) ON DELETE CASCADE,
    FOREIGN KEY (exercise_id) REFERENCES exercises(id)
);

CREATE TABLE IF NOT EXISTS routine_exercise_sets (
    id TEXT PRIMARY KEY,
    routine_exercise_id TEXT NOT NULL,
    set_number INTEGER NOT NULL,
    target_reps INTEGER NOT NULL,
    target_weight REAL,
    set_type TEXT NOT NULL DEFAULT 'normal',
    UNIQUE (routine_exercise_id, set_number),
    FOREIGN KEY (routine_exercise_id) REFERENCES routine_exercises(id) ON DELETE CASCADE
);

-- Workout sessions (the record). The template id is kept for display only.
CREATE TABLE IF NOT EXISTS workout_sessions (
    id TEXT PRIMARY KEY,
    routine_template_id TEXT NOT NULL,
    name TEXT NOT NULL,
    started_at TIMESTAMP NOT NULL,
    completed_at TIMESTAMP,
    notes TEXT,
    status TEXT NOT NULL DEFAULT 'active'
);

CREATE TABLE IF NOT EXISTS workout_exercises (
    id TEXT PRIMARY KEY,
    workout_session_id TEXT NOT NULL,
    exercise_id TEXT NOT NULL,
    routine_exercise_id TEXT,
    sort_order INTEGER NOT NULL,
    notes TEXT,
    FOREIGN KEY (workout_session_id) REFERENCES workout_sessions(id) ON DELETE CASCADE,
    FOREIGN KEY (exercise_id) REFERENCES exercises(id),
    FOREIGN KEY (routine_exercise_id) REFERENCES routine_exercises(id) ON DELETE SET NULL
);

CREATE TABLE IF NOT EXISTS workout_sets (
    id TEXT PRIMARY KEY,
    workout_exercise_id TEXT NOT NULL,
    set_number INTEGER NOT NULL,
    weight REAL NOT NULL,
    reps INTEGER NOT NULL,
    rpe REAL,
    completed_at TIMESTAMP NOT NULL,
    set_type TEXT NOT NULL DEFAULT 'normal',
    FOREIGN KEY (workout_exercise_id) REFERENCES workout_exercises(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS scheduled_workouts (
    id TEXT PRIMARY KEY,
    routine_template_id TEXT NOT NULL,
    scheduled_date TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL,
    FOREIGN KEY (routine_template_id) REFERENCES routine_templates(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS workout_photos (
    id TEXT PRIMARY KEY,
    workout_session_id TEXT NOT NULL,
    file_path TEXT NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP NOT NULL,
    FOREIGN KEY (workout_session_id) REFERENCES workout_sessions(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_exercises_category ON exercises(category, name);
CREATE INDEX IF NOT EXISTS idx_routine_exercises_template ON routine_exercises(routine_template_id);
CREATE INDEX IF NOT EXISTS idx_routine_exercises_exercise ON routine_exercises(exercise_id);
CREATE INDEX IF NOT EXISTS idx_routine_exercise_sets_parent ON routine_exercise_sets(routine_exercise_id);
CREATE INDEX IF NOT EXISTS idx_workout_sessions_started ON workout_sessions(started_at DESC);
CREATE INDEX IF NOT EXISTS idx_workout_exercises_session ON workout_exercises(workout_session_id);
CREATE INDEX IF NOT EXISTS idx_workout_exercises_exercise_id ON workout_exercises(exercise_id);
CREATE INDEX IF NOT EXISTS idx_workout_sets_parent ON workout_sets(workout_exercise_id);
CREATE INDEX IF NOT EXISTS idx_workout_sets_completed ON workout_sets(completed_at DESC);
CREATE INDEX IF NOT EXISTS idx_scheduled_workouts_date ON scheduled_workouts(scheduled_date);
CREATE INDEX IF NOT EXISTS idx_workout_photos_session ON workout_photos(workout_session_id);
"""


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    return get_data_dir(data_dir) / DB_FILENAME


def new_id() -> str:
    """Generate an opaque row identity."""
    return str(uuid.uuid4())


def now_timestamp() -> str:
    """Current local time in the stored timestamp format."""
    return datetime.now().isoformat()


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with foreign keys enforced and named-column rows.

    SQLite failures surface as ``StorageError`` with the original chained.
    """
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA foreign_keys = ON")
            yield db
    except sqlite3.Error as exc:
        raise StorageError(str(exc)) from exc


@asynccontextmanager
async def transaction(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Connection whose writes commit together or not at all."""
    async with connect(db_path) as db:
        try:
            yield db
        except BaseException:
            await db.rollback()
            raise
        await db.commit()


async def init_db(db_path: Path | None = None) -> int:
    """Initialize the database schema and seed the exercise library.

    Safe to call on every start-up.

    Returns:
        Number of exercises seeded (0 when the library already existed).
    """
    if db_path is None:
        db_path = get_db_path()

    async with connect(db_path) as db:
        await db.executescript(SCHEMA)
        await db.commit()

    log.info("Database initialized at %s", db_path)
    return await seed_exercises(db_path)


async def seed_exercises(db_path: Path | None = None) -> int:
    """Seed the built-in exercise library into an empty exercises table."""
    from ..models.exercises import SEED_EXERCISES

    if db_path is None:
        db_path = get_db_path()

    async with transaction(db_path) as db:
        cursor = await db.execute("SELECT COUNT(*) FROM exercises")
        (count,) = await cursor.fetchone()
        if count > 0:
            log.debug("Exercise library already has %d rows, skipping seed", count)
            return 0

        created_at = now_timestamp()
        await db.executemany(
            """
            INSERT INTO exercises (id, name, category, equipment, created_at, is_custom)
            VALUES (?, ?, ?, ?, ?, 0)
            """,
            [
                (
                    new_id(),
                    exercise.name,
                    exercise.category.value,
                    exercise.equipment.value,
                    created_at,
                )
                for exercise in SEED_EXERCISES
            ],
        )

    log.info("Seeded %d exercises", len(SEED_EXERCISES))
    return len(SEED_EXERCISES)
