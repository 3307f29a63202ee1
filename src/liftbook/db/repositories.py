"""Data access layer for liftbook."""

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Iterable

import aiosqlite

from ..config import DEFAULT_HISTORY_LIMIT, LAST_SETS_LIMIT
from ..errors import InvariantViolation, NotFoundError
from ..models.exercises import EquipmentType, Exercise, ExerciseCategory
from ..models.routine import (
    RoutineExercise,
    RoutineExerciseInput,
    RoutineExerciseSet,
    RoutineTemplate,
    SetType,
    validate_exercise_input,
    validate_routine_input,
)
from ..models.workout import (
    PreviousSet,
    ScheduledWorkout,
    WorkoutExercise,
    WorkoutPhoto,
    WorkoutSession,
    WorkoutSet,
    WorkoutStatus,
    WorkoutSummary,
)
from .engine import connect, get_db_path, new_id, now_timestamp, transaction

log = logging.getLogger(__name__)

# Back-filled sessions start at noon local time and last 30 minutes
BACKFILL_START = time(12, 0)
BACKFILL_DURATION = timedelta(minutes=30)


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _row_to_exercise(row: aiosqlite.Row, prefix: str = "") -> Exercise:
    """Convert a database row to an Exercise.

    ``prefix`` selects aliased columns from a join (e.g. ``exercise_``).
    """
    return Exercise(
        id=row[f"{prefix}id"],
        name=row[f"{prefix}name"],
        category=ExerciseCategory(row[f"{prefix}category"]),
        equipment=EquipmentType(row[f"{prefix}equipment"]),
        created_at=_parse_ts(row[f"{prefix}created_at"]),
        is_custom=bool(row[f"{prefix}is_custom"]),
    )


def _row_to_session(row: aiosqlite.Row) -> WorkoutSession:
    return WorkoutSession(
        id=row["id"],
        routine_template_id=row["routine_template_id"],
        name=row["name"],
        started_at=datetime.fromisoformat(row["started_at"]),
        completed_at=_parse_ts(row["completed_at"]),
        notes=row["notes"],
        status=WorkoutStatus(row["status"]),
    )


def _row_to_set(row: aiosqlite.Row) -> WorkoutSet:
    return WorkoutSet(
        id=row["id"],
        workout_exercise_id=row["workout_exercise_id"],
        set_number=row["set_number"],
        weight=row["weight"],
        reps=row["reps"],
        rpe=row["rpe"],
        completed_at=datetime.fromisoformat(row["completed_at"]),
        set_type=SetType(row["set_type"]),
    )


def _row_to_photo(row: aiosqlite.Row) -> WorkoutPhoto:
    keys = row.keys()
    return WorkoutPhoto(
        id=row["id"],
        workout_session_id=row["workout_session_id"],
        file_path=row["file_path"],
        sort_order=row["sort_order"],
        created_at=_parse_ts(row["created_at"]),
        workout_name=row["workout_name"] if "workout_name" in keys else None,
        workout_date=_parse_ts(row["workout_date"]) if "workout_date" in keys else None,
    )


EXERCISE_JOIN_COLUMNS = """
    e.name AS exercise_name,
    e.category AS exercise_category,
    e.equipment AS exercise_equipment,
    e.created_at AS exercise_created_at,
    e.is_custom AS exercise_is_custom
"""


async def _load_routine(db: aiosqlite.Connection, routine_id: str) -> RoutineTemplate | None:
    """Assemble a routine aggregate using an open connection."""
    cursor = await db.execute(
        "SELECT * FROM routine_templates WHERE id = ?", (routine_id,)
    )
    routine_row = await cursor.fetchone()
    if routine_row is None:
        return None

    cursor = await db.execute(
        f"""
        SELECT re.*, {EXERCISE_JOIN_COLUMNS}
        FROM routine_exercises re
        JOIN exercises e ON re.exercise_id = e.id
        WHERE re.routine_template_id = ?
        ORDER BY re.sort_order
        """,
        (routine_id,),
    )
    exercise_rows = await cursor.fetchall()

    cursor = await db.execute(
        """
        SELECT s.* FROM routine_exercise_sets s
        JOIN routine_exercises re ON s.routine_exercise_id = re.id
        WHERE re.routine_template_id = ?
        ORDER BY s.set_number
        """,
        (routine_id,),
    )
    sets_by_exercise: dict[str, list[RoutineExerciseSet]] = {}
    for row in await cursor.fetchall():
        sets_by_exercise.setdefault(row["routine_exercise_id"], []).append(
            RoutineExerciseSet(
                id=row["id"],
                routine_exercise_id=row["routine_exercise_id"],
                set_number=row["set_number"],
                target_reps=row["target_reps"],
                target_weight=row["target_weight"],
                set_type=SetType(row["set_type"]),
            )
        )

    exercises = []
    for row in exercise_rows:
        exercises.append(
            RoutineExercise(
                id=row["id"],
                routine_template_id=row["routine_template_id"],
                exercise_id=row["exercise_id"],
                order=row["sort_order"],
                rest_seconds=row["rest_seconds"],
                notes=row["notes"],
                superset_group_id=row["superset_group_id"],
                exercise=_row_to_exercise(row, prefix="exercise_"),
                sets=sets_by_exercise.get(row["id"], []),
            )
        )

    return RoutineTemplate(
        id=routine_row["id"],
        name=routine_row["name"],
        created_at=_parse_ts(routine_row["created_at"]),
        updated_at=_parse_ts(routine_row["updated_at"]),
        exercises=exercises,
    )


async def _require_exercises(db: aiosqlite.Connection, exercise_ids: list[str]) -> None:
    wanted = sorted(set(exercise_ids))
    if not wanted:
        return
    placeholders = ", ".join("?" * len(wanted))
    cursor = await db.execute(
        f"SELECT id FROM exercises WHERE id IN ({placeholders})", wanted
    )
    found = {row["id"] for row in await cursor.fetchall()}
    for exercise_id in wanted:
        if exercise_id not in found:
            raise NotFoundError("Exercise", exercise_id)


async def _snapshot_exercises(
    db: aiosqlite.Connection, session_id: str, routine: RoutineTemplate
) -> None:
    """Copy a routine's exercises into a session.

    Target sets are not copied; they stay reachable through the
    back-reference to the routine exercise.
    """
    await db.executemany(
        """
        INSERT INTO workout_exercises
        (id, workout_session_id, exercise_id, routine_exercise_id, sort_order, notes)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [
            (new_id(), session_id, ex.exercise_id, ex.id, ex.order, ex.notes)
            for ex in routine.exercises
        ],
    )


class ExerciseRepository:
    """Repository for the exercise library."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get(self, exercise_id: str) -> Exercise | None:
        """Get an exercise by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE id = ?", (exercise_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return _row_to_exercise(row)

    async def get_by_name(self, name: str) -> Exercise | None:
        """Get an exercise by name (case-insensitive)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE name = ? COLLATE NOCASE "
                "ORDER BY is_custom LIMIT 1",
                (name.strip(),),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return _row_to_exercise(row)

    async def search(self, query: str) -> list[Exercise]:
        """Search exercises by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE name LIKE ? ORDER BY category, name",
                (f"%{query}%",),
            )
            rows = await cursor.fetchall()
            return [_row_to_exercise(row) for row in rows]

    async def list_all(self) -> list[Exercise]:
        """List all exercises, sorted by category then name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM exercises ORDER BY category, name")
            rows = await cursor.fetchall()
            return [_row_to_exercise(row) for row in rows]

    async def get_by_category(self, category: ExerciseCategory) -> list[Exercise]:
        """Get exercises in one category, sorted by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE category = ? ORDER BY name",
                (ExerciseCategory(category).value,),
            )
            rows = await cursor.fetchall()
            return [_row_to_exercise(row) for row in rows]

    async def list_custom(self) -> list[Exercise]:
        """List user-defined exercises, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE is_custom = 1 ORDER BY created_at DESC"
            )
            rows = await cursor.fetchall()
            return [_row_to_exercise(row) for row in rows]

    async def create_custom(
        self,
        name: str,
        category: ExerciseCategory | str,
        equipment: EquipmentType | str,
    ) -> str:
        """Add a user-defined exercise and return its ID."""
        if not name or not name.strip():
            raise InvariantViolation("Exercise name cannot be empty")
        try:
            category = ExerciseCategory(category)
        except ValueError:
            raise InvariantViolation(f"Unknown category: {category}") from None
        try:
            equipment = EquipmentType(equipment)
        except ValueError:
            raise InvariantViolation(f"Unknown equipment: {equipment}") from None

        exercise_id = new_id()
        async with transaction(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO exercises (id, name, category, equipment, created_at, is_custom)
                VALUES (?, ?, ?, ?, ?, 1)
                """,
                (exercise_id, name.strip(), category.value, equipment.value, now_timestamp()),
            )
        log.info("Created custom exercise %s (%s)", name, exercise_id)
        return exercise_id

    async def delete_custom(self, exercise_id: str) -> None:
        """Delete a custom exercise that nothing references.

        Raises:
            NotFoundError: no such exercise.
            InvariantViolation: built-in exercise, or still referenced by a
                routine or by logged workouts.
        """
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "SELECT is_custom FROM exercises WHERE id = ?", (exercise_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise NotFoundError("Exercise", exercise_id)
            if not row["is_custom"]:
                raise InvariantViolation("Cannot delete non-custom exercise")

            cursor = await db.execute(
                "SELECT COUNT(*) FROM routine_exercises WHERE exercise_id = ?",
                (exercise_id,),
            )
            (in_routines,) = await cursor.fetchone()
            if in_routines > 0:
                raise InvariantViolation(
                    "Cannot delete exercise that is used in a routine"
                )

            cursor = await db.execute(
                "SELECT COUNT(*) FROM workout_exercises WHERE exercise_id = ?",
                (exercise_id,),
            )
            (in_workouts,) = await cursor.fetchone()
            if in_workouts > 0:
                raise InvariantViolation(
                    "Cannot delete exercise that has logged workout history"
                )

            await db.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))
        log.info("Deleted custom exercise %s", exercise_id)


class RoutineRepository:
    """Repository for routine templates and their target sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, name: str, exercises: list[RoutineExerciseInput]) -> str:
        """Create a routine with its exercises and target sets.

        All rows are written in one transaction; a failure leaves nothing
        behind. Returns the new routine ID.

        Raises:
            InvariantViolation: the definition is invalid.
            NotFoundError: an exercise ID does not resolve.
        """
        validate_routine_input(name, exercises)

        routine_id = new_id()
        timestamp = now_timestamp()
        async with transaction(self.db_path) as db:
            await _require_exercises(db, [ex.exercise_id for ex in exercises])
            await db.execute(
                """
                INSERT INTO routine_templates (id, name, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (routine_id, name.strip(), timestamp, timestamp),
            )
            for exercise in exercises:
                await self._insert_exercise(db, routine_id, exercise, exercise.order)

        log.info(
            "Created routine %s (%s) with %d exercises", name, routine_id, len(exercises)
        )
        return routine_id

    async def _insert_exercise(
        self,
        db: aiosqlite.Connection,
        routine_id: str,
        exercise: RoutineExerciseInput,
        order: int,
    ) -> str:
        routine_exercise_id = new_id()
        await db.execute(
            """
            INSERT INTO routine_exercises
            (id, routine_template_id, exercise_id, sort_order, rest_seconds, notes,
             superset_group_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                routine_exercise_id,
                routine_id,
                exercise.exercise_id,
                order,
                exercise.rest_seconds,
                exercise.notes,
                exercise.superset_group_id,
            ),
        )
        await db.executemany(
            """
            INSERT INTO routine_exercise_sets
            (id, routine_exercise_id, set_number, target_reps, target_weight, set_type)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    new_id(),
                    routine_exercise_id,
                    target.set_number,
                    target.target_reps,
                    target.target_weight,
                    SetType(target.set_type).value,
                )
                for target in exercise.sets
            ],
        )
        return routine_exercise_id

    async def get_with_exercises(self, routine_id: str) -> RoutineTemplate | None:
        """Get a routine with exercises (by order) and sets (by set number)."""
        async with connect(self.db_path) as db:
            return await _load_routine(db, routine_id)

    async def list_all(self) -> list[RoutineTemplate]:
        """List routines, most recently updated first (without exercises)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM routine_templates ORDER BY updated_at DESC"
            )
            rows = await cursor.fetchall()
            return [
                RoutineTemplate(
                    id=row["id"],
                    name=row["name"],
                    created_at=_parse_ts(row["created_at"]),
                    updated_at=_parse_ts(row["updated_at"]),
                )
                for row in rows
            ]

    async def _touch(self, db: aiosqlite.Connection, routine_id: str) -> None:
        cursor = await db.execute(
            "UPDATE routine_templates SET updated_at = ? WHERE id = ?",
            (now_timestamp(), routine_id),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("Routine", routine_id)

    async def rename(self, routine_id: str, name: str) -> None:
        """Rename a routine. Existing sessions keep their snapshotted name."""
        if not name or not name.strip():
            raise InvariantViolation("Routine name cannot be empty")
        async with transaction(self.db_path) as db:
            await self._touch(db, routine_id)
            await db.execute(
                "UPDATE routine_templates SET name = ? WHERE id = ?",
                (name.strip(), routine_id),
            )

    async def add_exercise(self, routine_id: str, exercise: RoutineExerciseInput) -> str:
        """Append an exercise at the end of a routine.

        The input's ``order`` is ignored so the order stays contiguous.
        """
        validate_exercise_input(exercise)
        async with transaction(self.db_path) as db:
            await self._touch(db, routine_id)
            await _require_exercises(db, [exercise.exercise_id])
            cursor = await db.execute(
                "SELECT COUNT(*) FROM routine_exercises WHERE routine_template_id = ?",
                (routine_id,),
            )
            (count,) = await cursor.fetchone()
            return await self._insert_exercise(db, routine_id, exercise, count)

    async def remove_exercise(self, routine_exercise_id: str) -> None:
        """Remove an exercise from its routine and close the order gap."""
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "SELECT routine_template_id FROM routine_exercises WHERE id = ?",
                (routine_exercise_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                raise NotFoundError("Routine exercise", routine_exercise_id)
            routine_id = row["routine_template_id"]

            await db.execute(
                "DELETE FROM routine_exercises WHERE id = ?", (routine_exercise_id,)
            )
            cursor = await db.execute(
                """
                SELECT id FROM routine_exercises
                WHERE routine_template_id = ? ORDER BY sort_order
                """,
                (routine_id,),
            )
            remaining = [r["id"] for r in await cursor.fetchall()]
            await db.executemany(
                "UPDATE routine_exercises SET sort_order = ? WHERE id = ?",
                [(index, rid) for index, rid in enumerate(remaining)],
            )
            await self._touch(db, routine_id)

    async def delete(self, routine_id: str) -> None:
        """Delete a routine with its exercises, target sets and schedule entries.

        Logged sessions that started from it are kept.
        """
        async with transaction(self.db_path) as db:
            await db.execute("DELETE FROM routine_templates WHERE id = ?", (routine_id,))
        log.info("Deleted routine %s", routine_id)


class WorkoutRepository:
    """Repository for workout sessions and their logged sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def start(
        self, routine_id: str, scheduled_workout_id: str | None = None
    ) -> WorkoutSession:
        """Start a session from a routine, snapshotting its exercises.

        When ``scheduled_workout_id`` is given that schedule entry is consumed
        in the same transaction.

        Raises:
            NotFoundError: the routine (or schedule entry) does not exist.
        """
        session = WorkoutSession(
            id=new_id(),
            routine_template_id=routine_id,
            name="",
            started_at=datetime.now(),
        )
        async with transaction(self.db_path) as db:
            routine = await _load_routine(db, routine_id)
            if routine is None:
                raise NotFoundError("Routine", routine_id)
            session.name = routine.name

            await db.execute(
                """
                INSERT INTO workout_sessions
                (id, routine_template_id, name, started_at, status)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    session.id,
                    routine_id,
                    session.name,
                    session.started_at.isoformat(),
                    WorkoutStatus.ACTIVE.value,
                ),
            )
            await _snapshot_exercises(db, session.id, routine)

            if scheduled_workout_id is not None:
                cursor = await db.execute(
                    "DELETE FROM scheduled_workouts WHERE id = ?", (scheduled_workout_id,)
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("Scheduled workout", scheduled_workout_id)

        log.info("Started workout %s from routine %s", session.id, routine_id)
        return session

    async def create_completed_for_date(self, routine_id: str, day: date) -> str:
        """Back-fill a completed session for a past calendar date."""
        started_at = datetime.combine(day, BACKFILL_START)
        completed_at = started_at + BACKFILL_DURATION
        session_id = new_id()

        async with transaction(self.db_path) as db:
            routine = await _load_routine(db, routine_id)
            if routine is None:
                raise NotFoundError("Routine", routine_id)

            await db.execute(
                """
                INSERT INTO workout_sessions
                (id, routine_template_id, name, started_at, completed_at, status)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    routine_id,
                    routine.name,
                    started_at.isoformat(),
                    completed_at.isoformat(),
                    WorkoutStatus.COMPLETED.value,
                ),
            )
            await _snapshot_exercises(db, session_id, routine)

        log.info("Back-filled workout %s on %s", session_id, day.isoformat())
        return session_id

    async def get(self, workout_id: str) -> WorkoutSession | None:
        """Get a session by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM workout_sessions WHERE id = ?", (workout_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return _row_to_session(row)

    async def list_active(self) -> list[WorkoutSession]:
        """List sessions still marked active, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM workout_sessions WHERE status = ? ORDER BY started_at DESC",
                (WorkoutStatus.ACTIVE.value,),
            )
            rows = await cursor.fetchall()
            return [_row_to_session(row) for row in rows]

    async def get_exercises(self, workout_id: str) -> list[WorkoutExercise]:
        """Get a session's exercises in order, with catalog entry and logged sets."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                SELECT we.*, {EXERCISE_JOIN_COLUMNS}
                FROM workout_exercises we
                JOIN exercises e ON we.exercise_id = e.id
                WHERE we.workout_session_id = ?
                ORDER BY we.sort_order
                """,
                (workout_id,),
            )
            exercise_rows = await cursor.fetchall()

            cursor = await db.execute(
                """
                SELECT ws.* FROM workout_sets ws
                JOIN workout_exercises we ON ws.workout_exercise_id = we.id
                WHERE we.workout_session_id = ?
                ORDER BY ws.set_number, ws.completed_at
                """,
                (workout_id,),
            )
            sets_by_exercise: dict[str, list[WorkoutSet]] = {}
            for row in await cursor.fetchall():
                sets_by_exercise.setdefault(row["workout_exercise_id"], []).append(
                    _row_to_set(row)
                )

        return [
            WorkoutExercise(
                id=row["id"],
                workout_session_id=row["workout_session_id"],
                exercise_id=row["exercise_id"],
                routine_exercise_id=row["routine_exercise_id"],
                order=row["sort_order"],
                notes=row["notes"],
                exercise=_row_to_exercise(row, prefix="exercise_"),
                sets=sets_by_exercise.get(row["id"], []),
            )
            for row in exercise_rows
        ]

    async def get_workout_exercise(self, workout_exercise_id: str) -> WorkoutExercise | None:
        """Get one exercise instance (without sets)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM workout_exercises WHERE id = ?", (workout_exercise_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return WorkoutExercise(
                id=row["id"],
                workout_session_id=row["workout_session_id"],
                exercise_id=row["exercise_id"],
                routine_exercise_id=row["routine_exercise_id"],
                order=row["sort_order"],
                notes=row["notes"],
            )

    async def update_exercise_notes(self, workout_exercise_id: str, notes: str | None) -> None:
        """Edit the notes of one exercise instance."""
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "UPDATE workout_exercises SET notes = ? WHERE id = ?",
                (notes, workout_exercise_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Workout exercise", workout_exercise_id)

    async def get_sets(self, workout_exercise_id: str) -> list[WorkoutSet]:
        """Get the logged sets of one exercise instance, by set number."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM workout_sets WHERE workout_exercise_id = ?
                ORDER BY set_number, completed_at
                """,
                (workout_exercise_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_set(row) for row in rows]

    async def log_set(
        self,
        workout_exercise_id: str,
        set_number: int,
        weight: float,
        reps: int,
        rpe: float | None = None,
        set_type: SetType = SetType.NORMAL,
    ) -> WorkoutSet:
        """Append a logged set stamped with the current time.

        Values are stored as given. Logging the same set number twice keeps
        both rows.
        """
        workout_set = WorkoutSet(
            id=new_id(),
            workout_exercise_id=workout_exercise_id,
            set_number=set_number,
            weight=weight,
            reps=reps,
            rpe=rpe,
            completed_at=datetime.now(),
            set_type=SetType(set_type),
        )
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "SELECT 1 FROM workout_exercises WHERE id = ?", (workout_exercise_id,)
            )
            if await cursor.fetchone() is None:
                raise NotFoundError("Workout exercise", workout_exercise_id)

            await db.execute(
                """
                INSERT INTO workout_sets
                (id, workout_exercise_id, set_number, weight, reps, rpe, completed_at, set_type)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    workout_set.id,
                    workout_exercise_id,
                    set_number,
                    weight,
                    reps,
                    rpe,
                    workout_set.completed_at.isoformat(),
                    workout_set.set_type.value,
                ),
            )
        log.debug(
            "Logged set %d (%s x %s) for %s", set_number, weight, reps, workout_exercise_id
        )
        return workout_set

    async def complete(
        self,
        workout_id: str,
        notes: str | None = None,
        completed_at: datetime | None = None,
    ) -> datetime:
        """Mark a session completed. Returns the completion timestamp."""
        return await self.complete_with_photos(workout_id, notes, (), completed_at)

    async def complete_with_photos(
        self,
        workout_id: str,
        notes: str | None = None,
        photo_paths: Iterable[str] = (),
        completed_at: datetime | None = None,
    ) -> datetime:
        """Mark a session completed and attach photos in the given order.

        Completing a resumed session again moves the completion time, keeps
        earlier notes unless new ones are given and appends the photos after
        those already attached. Returns the completion timestamp written.
        """
        completed_at = completed_at or datetime.now()
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE workout_sessions
                SET completed_at = ?, status = ?, notes = COALESCE(?, notes)
                WHERE id = ?
                """,
                (completed_at.isoformat(), WorkoutStatus.COMPLETED.value, notes, workout_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Workout", workout_id)

            cursor = await db.execute(
                "SELECT COUNT(*) FROM workout_photos WHERE workout_session_id = ?",
                (workout_id,),
            )
            (attached,) = await cursor.fetchone()
            created_at = now_timestamp()
            await db.executemany(
                """
                INSERT INTO workout_photos
                (id, workout_session_id, file_path, sort_order, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (new_id(), workout_id, path, index, created_at)
                    for index, path in enumerate(photo_paths, start=attached)
                ],
            )
        log.info("Completed workout %s", workout_id)
        return completed_at

    async def abandon(self, workout_id: str) -> None:
        """Mark a session abandoned, keeping its logged rows."""
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "UPDATE workout_sessions SET status = ? WHERE id = ?",
                (WorkoutStatus.ABANDONED.value, workout_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Workout", workout_id)
        log.info("Abandoned workout %s", workout_id)

    async def delete(self, workout_id: str) -> None:
        """Delete a session with its exercises, sets and photos."""
        async with transaction(self.db_path) as db:
            await db.execute("DELETE FROM workout_sessions WHERE id = ?", (workout_id,))
        log.info("Deleted workout %s", workout_id)


class HistoryRepository:
    """Read-only aggregation over completed sessions."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get_workout_dates(self) -> list[date]:
        """Distinct local dates with completed workouts, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT DISTINCT date(started_at) AS day
                FROM workout_sessions
                WHERE status = ?
                ORDER BY day DESC
                """,
                (WorkoutStatus.COMPLETED.value,),
            )
            rows = await cursor.fetchall()
            return [date.fromisoformat(row["day"]) for row in rows]

    async def get_workouts_for_date(self, day: date) -> list[WorkoutSession]:
        """Completed sessions started on a date, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM workout_sessions
                WHERE status = ? AND date(started_at) = ?
                ORDER BY started_at DESC
                """,
                (WorkoutStatus.COMPLETED.value, day.isoformat()),
            )
            rows = await cursor.fetchall()
            return [_row_to_session(row) for row in rows]

    async def get_workout_history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[WorkoutSession]:
        """Most recent completed sessions."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM workout_sessions
                WHERE status = ?
                ORDER BY started_at DESC
                LIMIT ?
                """,
                (WorkoutStatus.COMPLETED.value, limit),
            )
            rows = await cursor.fetchall()
            return [_row_to_session(row) for row in rows]

    async def get_workout_summary(self, workout_id: str) -> WorkoutSummary | None:
        """Duration, volume, set and exercise counts for one session.

        Sessions without logged sets report zeros.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM workout_sessions WHERE id = ?", (workout_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            session = _row_to_session(row)

            cursor = await db.execute(
                """
                SELECT
                    COALESCE(SUM(ws.weight * ws.reps), 0) AS total_volume,
                    COUNT(ws.id) AS total_sets,
                    COUNT(DISTINCT CASE WHEN ws.id IS NOT NULL THEN we.exercise_id END)
                        AS exercise_count
                FROM workout_exercises we
                LEFT JOIN workout_sets ws ON ws.workout_exercise_id = we.id
                WHERE we.workout_session_id = ?
                """,
                (workout_id,),
            )
            stats = await cursor.fetchone()

        return WorkoutSummary(
            id=session.id,
            name=session.name,
            started_at=session.started_at,
            completed_at=session.completed_at,
            duration=session.duration_seconds,
            total_volume=stats["total_volume"] or 0,
            total_sets=stats["total_sets"] or 0,
            exercise_count=stats["exercise_count"] or 0,
        )

    async def get_workout_summaries_for_date(self, day: date) -> list[WorkoutSummary]:
        """Summaries of every completed session on a date."""
        summaries = []
        for session in await self.get_workouts_for_date(day):
            summary = await self.get_workout_summary(session.id)
            if summary is not None:
                summaries.append(summary)
        return summaries

    async def get_last_workout_for_exercise(
        self,
        exercise_id: str,
        exclude_session_id: str | None = None,
        limit: int = LAST_SETS_LIMIT,
    ) -> list[PreviousSet]:
        """Recent sets for an exercise from completed sessions.

        Ordered by session recency, then set number. Pass the current
        session's ID as ``exclude_session_id`` so it is not compared with
        itself.
        """
        query = """
            SELECT ws.set_number, ws.weight, ws.reps, wses.id AS session_id
            FROM workout_sets ws
            JOIN workout_exercises we ON ws.workout_exercise_id = we.id
            JOIN workout_sessions wses ON we.workout_session_id = wses.id
            WHERE we.exercise_id = ?
              AND wses.status = ?
        """
        params: list = [exercise_id, WorkoutStatus.COMPLETED.value]
        if exclude_session_id:
            query += " AND wses.id != ?"
            params.append(exclude_session_id)
        query += " ORDER BY wses.started_at DESC, ws.set_number ASC LIMIT ?"
        params.append(limit)

        async with connect(self.db_path) as db:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [
                PreviousSet(
                    set_number=row["set_number"],
                    weight=row["weight"],
                    reps=row["reps"],
                    workout_session_id=row["session_id"],
                )
                for row in rows
            ]


class ScheduleRepository:
    """Repository for workouts planned on future dates."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def schedule(self, routine_id: str, day: date) -> str:
        """Plan a routine for a date and return the entry ID."""
        schedule_id = new_id()
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "SELECT 1 FROM routine_templates WHERE id = ?", (routine_id,)
            )
            if await cursor.fetchone() is None:
                raise NotFoundError("Routine", routine_id)

            await db.execute(
                """
                INSERT INTO scheduled_workouts (id, routine_template_id, scheduled_date, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (schedule_id, routine_id, day.isoformat(), now_timestamp()),
            )
        log.info("Scheduled routine %s on %s", routine_id, day.isoformat())
        return schedule_id

    async def get(self, schedule_id: str) -> ScheduledWorkout | None:
        """Get a schedule entry by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT sw.*, rt.name AS routine_name
                FROM scheduled_workouts sw
                JOIN routine_templates rt ON sw.routine_template_id = rt.id
                WHERE sw.id = ?
                """,
                (schedule_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_scheduled(row)

    async def list_for_date(self, day: date) -> list[ScheduledWorkout]:
        """Entries planned for a date, in creation order."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT sw.*, rt.name AS routine_name
                FROM scheduled_workouts sw
                JOIN routine_templates rt ON sw.routine_template_id = rt.id
                WHERE sw.scheduled_date = ?
                ORDER BY sw.created_at
                """,
                (day.isoformat(),),
            )
            rows = await cursor.fetchall()
            return [self._row_to_scheduled(row) for row in rows]

    async def get_scheduled_dates(self) -> list[date]:
        """Distinct dates with planned workouts, ascending."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT DISTINCT scheduled_date FROM scheduled_workouts ORDER BY scheduled_date"
            )
            rows = await cursor.fetchall()
            return [date.fromisoformat(row["scheduled_date"]) for row in rows]

    async def delete(self, schedule_id: str) -> None:
        """Remove one schedule entry."""
        async with transaction(self.db_path) as db:
            await db.execute("DELETE FROM scheduled_workouts WHERE id = ?", (schedule_id,))

    async def delete_for_date(self, day: date) -> int:
        """Remove every entry on a date. Returns the number removed."""
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM scheduled_workouts WHERE scheduled_date = ?",
                (day.isoformat(),),
            )
            return cursor.rowcount

    def _row_to_scheduled(self, row: aiosqlite.Row) -> ScheduledWorkout:
        """Convert a database row to a ScheduledWorkout."""
        return ScheduledWorkout(
            id=row["id"],
            routine_template_id=row["routine_template_id"],
            routine_name=row["routine_name"],
            scheduled_date=date.fromisoformat(row["scheduled_date"]),
            created_at=_parse_ts(row["created_at"]),
        )


class PhotoRepository:
    """Repository for progress-photo references. Files are owned elsewhere."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def add(self, workout_id: str, file_path: str, sort_order: int = 0) -> str:
        """Attach a photo path to a session."""
        photo_id = new_id()
        async with transaction(self.db_path) as db:
            cursor = await db.execute(
                "SELECT 1 FROM workout_sessions WHERE id = ?", (workout_id,)
            )
            if await cursor.fetchone() is None:
                raise NotFoundError("Workout", workout_id)

            await db.execute(
                """
                INSERT INTO workout_photos (id, workout_session_id, file_path, sort_order, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (photo_id, workout_id, file_path, sort_order, now_timestamp()),
            )
        return photo_id

    async def list_for_session(self, workout_id: str) -> list[WorkoutPhoto]:
        """Photos of one session in sort order."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM workout_photos WHERE workout_session_id = ? ORDER BY sort_order",
                (workout_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_photo(row) for row in rows]

    async def delete(self, photo_id: str) -> None:
        """Remove a photo reference."""
        async with transaction(self.db_path) as db:
            await db.execute("DELETE FROM workout_photos WHERE id = ?", (photo_id,))

    async def list_progress_photos(self) -> list[WorkoutPhoto]:
        """All photos of completed sessions, newest session first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT wp.*, ws.name AS workout_name, ws.started_at AS workout_date
                FROM workout_photos wp
                JOIN workout_sessions ws ON wp.workout_session_id = ws.id
                WHERE ws.status = ?
                ORDER BY ws.started_at DESC, wp.sort_order
                """,
                (WorkoutStatus.COMPLETED.value,),
            )
            rows = await cursor.fetchall()
            return [_row_to_photo(row) for row in rows]

    async def count_for_date(self, day: date) -> dict[str, int]:
        """Photo count per completed session on a date."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT wp.workout_session_id, COUNT(*) AS photo_count
                FROM workout_photos wp
                JOIN workout_sessions ws ON wp.workout_session_id = ws.id
                WHERE ws.status = ? AND date(ws.started_at) = ?
                GROUP BY wp.workout_session_id
                """,
                (WorkoutStatus.COMPLETED.value, day.isoformat()),
            )
            rows = await cursor.fetchall()
            return {row["workout_session_id"]: row["photo_count"] for row in rows}
