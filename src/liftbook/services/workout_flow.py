"""Drives a workout end to end.

``WorkoutFlow`` keeps the stored session and the active-workout state
machine in step: the repository owns the durable rows, the state machine
owns the cursor, the resume window and the cache of sets logged in this
process. Every state change is written back to the control-state file.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable

from ..db.engine import get_db_path
from ..db.repositories import HistoryRepository, RoutineRepository, WorkoutRepository
from ..errors import InvariantViolation, NotFoundError, WorkoutConflictError
from ..models.active_workout import ActiveWorkoutState, WorkoutPhase
from ..models.routine import ExerciseGroup, SetType, group_by_supersets
from ..models.workout import (
    PreviousSet,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
    WorkoutStatus,
    WorkoutSummary,
)
from .state_store import ActiveWorkoutStore, InputMemory

log = logging.getLogger(__name__)


def validate_logged_set(
    weight: float, reps: int, rpe: float | None, set_number: int | None = None
) -> None:
    """Reject values a logged set cannot hold."""
    if set_number is not None and set_number < 1:
        raise InvariantViolation("Set numbers start at 1")
    if weight < 0:
        raise InvariantViolation("Weight cannot be negative")
    if reps <= 0:
        raise InvariantViolation("Reps must be greater than zero")
    if rpe is not None and not 1 <= rpe <= 10:
        raise InvariantViolation("RPE must be between 1 and 10")


class WorkoutFlow:
    """Coordinates session storage, the state machine and input memory."""

    def __init__(
        self,
        db_path: Path | None = None,
        store: ActiveWorkoutStore | None = None,
        memory: InputMemory | None = None,
    ):
        self.db_path = db_path or get_db_path()
        self.workouts = WorkoutRepository(self.db_path)
        self.routines = RoutineRepository(self.db_path)
        self.history = HistoryRepository(self.db_path)
        self.store = store or ActiveWorkoutStore()
        self.memory = memory or InputMemory()
        self.state: ActiveWorkoutState = self.store.load()

    def _save(self) -> None:
        self.store.save(self.state)

    def _require_phase(self, phase: WorkoutPhase, message: str) -> str:
        if self.state.phase is not phase:
            raise InvariantViolation(message)
        return self.state.active_workout_id

    async def start(
        self, routine_id: str, scheduled_workout_id: str | None = None
    ) -> WorkoutSession:
        """Start a workout from a routine.

        Raises:
            WorkoutConflictError: a workout is already active. Nothing is
                written; the caller must ``finish``/``abandon`` it first or
                keep going with it.
            NotFoundError: the routine or schedule entry does not exist.
        """
        if self.state.is_active:
            raise WorkoutConflictError(
                self.state.active_workout_id, self.state.workout_name
            )

        session = await self.workouts.start(routine_id, scheduled_workout_id)
        self.state.start(
            session.id,
            session.name,
            session.routine_template_id,
            started_at=session.started_at,
        )
        self._save()
        return session

    async def get_session(self) -> WorkoutSession | None:
        if not self.state.is_active:
            return None
        return await self.workouts.get(self.state.active_workout_id)

    async def get_exercises(self) -> list[WorkoutExercise]:
        """Exercises of the active workout with their logged sets."""
        if not self.state.is_active:
            return []
        return await self.workouts.get_exercises(self.state.active_workout_id)

    async def get_exercise_groups(self) -> list[ExerciseGroup]:
        """The originating routine's exercises grouped into supersets."""
        if not self.state.is_active or self.state.routine_template_id is None:
            return []
        routine = await self.routines.get_with_exercises(self.state.routine_template_id)
        if routine is None:
            return []
        return group_by_supersets(routine.exercises)

    async def get_previous_sets(self, exercise_id: str) -> list[PreviousSet]:
        """Last sets of an exercise, excluding the active workout itself."""
        return await self.history.get_last_workout_for_exercise(
            exercise_id, exclude_session_id=self.state.active_workout_id
        )

    def select_exercise(self, index: int) -> None:
        """Move the cursor to an exercise (set number resets to 1)."""
        self.state.set_current_exercise(index)
        self._save()

    def select_set(self, set_number: int) -> None:
        self.state.set_current_set(set_number)
        self._save()

    async def log_set(
        self,
        workout_exercise_id: str,
        weight: float,
        reps: int,
        rpe: float | None = None,
        set_type: SetType = SetType.NORMAL,
        set_number: int | None = None,
    ) -> WorkoutSet:
        """Log a set against the active workout.

        The set number defaults to the cursor, which then advances by one.
        """
        workout_id = self._require_phase(
            WorkoutPhase.IN_PROGRESS, "No workout is in progress"
        )
        validate_logged_set(weight, reps, rpe, set_number)

        workout_exercise = await self.workouts.get_workout_exercise(workout_exercise_id)
        if workout_exercise is None:
            raise NotFoundError("Workout exercise", workout_exercise_id)
        if workout_exercise.workout_session_id != workout_id:
            raise InvariantViolation("That exercise belongs to a different workout")

        number = set_number if set_number is not None else self.state.current_set_number
        workout_set = await self.workouts.log_set(
            workout_exercise_id, number, weight, reps, rpe, set_type
        )
        self.state.add_logged_set(workout_exercise_id, workout_set)
        self.state.set_current_set(number + 1)
        self.memory.set_last_weight(workout_exercise.exercise_id, weight)
        self._save()
        return workout_set

    async def complete(
        self, notes: str | None = None, photo_paths: Iterable[str] = ()
    ) -> WorkoutSummary | None:
        """Complete the active workout and open the resume window.

        The stored session and the state machine share one timestamp.
        """
        workout_id = self._require_phase(
            WorkoutPhase.IN_PROGRESS, "No workout is in progress"
        )
        completed_at = await self.workouts.complete_with_photos(
            workout_id, notes, list(photo_paths)
        )
        self.state.mark_completed(completed_at)
        self._save()
        return await self.history.get_workout_summary(workout_id)

    def resume(self, now: datetime | None = None) -> bool:
        """Reopen the just-completed workout if the window is still open."""
        resumed = self.state.resume(now)
        if resumed:
            self._save()
        return resumed

    def check_resume_window(self, now: datetime | None = None) -> bool:
        """Poll the resume window, going idle once it has expired."""
        was_pending = self.state.is_in_resume_window
        still_open = self.state.check_resume_window(now)
        if was_pending and not still_open:
            self._save()
        return still_open

    def finish(self) -> None:
        """Stop tracking the workout (the stored session is untouched)."""
        self.state.end()
        self._save()

    async def abandon(self, discard: bool = True) -> None:
        """Abandon the active workout.

        An in-progress session is deleted (``discard``) or kept with status
        abandoned. A completed session waiting in its resume window is kept
        as completed; only tracking stops.
        """
        if not self.state.is_active:
            raise InvariantViolation("No workout is active")

        workout_id = self.state.active_workout_id
        if self.state.phase is WorkoutPhase.IN_PROGRESS:
            if discard:
                await self.workouts.delete(workout_id)
            else:
                await self.workouts.abandon(workout_id)

        self.state.abandon()
        self._save()

    def get_elapsed_seconds(self, now: datetime | None = None) -> int:
        return self.state.get_elapsed_seconds(now)

    def get_last_weight(self, exercise_id: str) -> float | None:
        return self.memory.get_last_weight(exercise_id)

    async def restore(self, now: datetime | None = None) -> ActiveWorkoutState:
        """Reload control state after a restart and reconcile it with storage.

        Goes idle when the session row is gone or was abandoned, or when the
        resume window has lapsed. A resumed workout keeps its completed row,
        so a completed status alone does not end tracking. The logged-set
        cache is rebuilt from the database.
        """
        self.state = self.store.load()
        if not self.state.is_active:
            return self.state

        session = await self.workouts.get(self.state.active_workout_id)
        if session is None or session.status is WorkoutStatus.ABANDONED:
            log.warning(
                "Active workout %s no longer in storage, resetting",
                self.state.active_workout_id,
            )
            self.state.reset()

        if self.state.is_in_resume_window:
            self.state.check_resume_window(now)

        if self.state.is_active:
            for exercise in await self.workouts.get_exercises(self.state.active_workout_id):
                for workout_set in exercise.sets:
                    self.state.add_logged_set(exercise.id, workout_set)

        self._save()
        return self.state
