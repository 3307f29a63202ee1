"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
import pytest_asyncio

from liftbook.db import ExerciseRepository, RoutineRepository, init_db
from liftbook.models import RoutineExerciseInput, RoutineSetInput
from liftbook.services import ActiveWorkoutStore, InputMemory, WorkoutFlow


@pytest.fixture
def data_dir(tmp_path):
    """An empty data directory."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest_asyncio.fixture
async def db_path(data_dir):
    """An initialized, seeded database."""
    path = data_dir / "test.db"
    await init_db(path)
    return path


@pytest.fixture
def store(data_dir):
    return ActiveWorkoutStore(data_dir / "active_workout.json")


@pytest.fixture
def memory(data_dir):
    return InputMemory(data_dir / "input_memory.json")


@pytest.fixture
def flow(db_path, store, memory):
    """A WorkoutFlow over the temporary database and state files."""
    return WorkoutFlow(db_path=db_path, store=store, memory=memory)


@pytest_asyncio.fixture
async def exercise_ids(db_path):
    """Seeded exercise IDs by name."""
    return {e.name: e.id for e in await ExerciseRepository(db_path).list_all()}


@pytest_asyncio.fixture
async def push_day(db_path, exercise_ids):
    """A two-exercise routine: bench 3x5 @ 60, fly 2x12."""
    return await RoutineRepository(db_path).create(
        "Push Day",
        [
            RoutineExerciseInput(
                exercise_id=exercise_ids["Barbell Bench Press"],
                order=0,
                sets=[
                    RoutineSetInput(set_number=n, target_reps=5, target_weight=60.0)
                    for n in (1, 2, 3)
                ],
            ),
            RoutineExerciseInput(
                exercise_id=exercise_ids["Cable Fly"],
                order=1,
                rest_seconds=60,
                sets=[RoutineSetInput(set_number=n, target_reps=12) for n in (1, 2)],
            ),
        ],
    )


@pytest.fixture
def noon():
    """A fixed reference time for clock-dependent tests."""
    return datetime(2024, 3, 4, 12, 0, 0)
