"""Control state for the single currently-active workout.

This is the UI-facing state machine that runs alongside the stored
``WorkoutSession``. It tracks which session is active, the exercise/set
cursor and a cache of sets logged in this process::

    IDLE --start--> IN_PROGRESS --mark_completed--> PENDING_RESUME
      ^                 |  ^                             |
      |                 |  +-------resume (in window)----+
      +---end/abandon---+                                |
      +--------------end/abandon/window expired----------+

Only the control fields are serialised by ``to_dict``; the logged-set
cache is rebuilt from storage after a restart.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from ..config import RESUME_WINDOW_SECONDS
from ..errors import InvariantViolation, WorkoutConflictError
from .workout import WorkoutSet

log = logging.getLogger(__name__)


class WorkoutPhase(str, Enum):
    """Phase of the active-workout state machine."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    PENDING_RESUME = "pending_resume"


@dataclass
class ActiveWorkoutState:
    """Tracks the one active workout and the user's position in it."""

    active_workout_id: str | None = None
    workout_name: str | None = None
    routine_template_id: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    is_in_resume_window: bool = False
    current_exercise_index: int = 0
    current_set_number: int = 1
    logged_sets: dict[str, list[WorkoutSet]] = field(default_factory=dict)

    resume_window = timedelta(seconds=RESUME_WINDOW_SECONDS)

    @property
    def phase(self) -> WorkoutPhase:
        if self.active_workout_id is None:
            return WorkoutPhase.IDLE
        if self.is_in_resume_window:
            return WorkoutPhase.PENDING_RESUME
        return WorkoutPhase.IN_PROGRESS

    @property
    def is_active(self) -> bool:
        return self.phase is not WorkoutPhase.IDLE

    def start(
        self,
        workout_id: str,
        name: str,
        routine_template_id: str,
        started_at: datetime | None = None,
    ) -> None:
        """Begin tracking a workout.

        Raises:
            WorkoutConflictError: another workout is still in progress or
                waiting in its resume window. The caller decides whether to
                continue it or abandon it first.
        """
        if self.is_active:
            raise WorkoutConflictError(self.active_workout_id, self.workout_name)

        self.active_workout_id = workout_id
        self.workout_name = name
        self.routine_template_id = routine_template_id
        self.started_at = started_at or datetime.now()
        self.completed_at = None
        self.is_in_resume_window = False
        self.current_exercise_index = 0
        self.current_set_number = 1
        self.logged_sets = {}
        log.info("Tracking workout %s (%s)", workout_id, name)

    def set_current_exercise(self, index: int) -> None:
        """Move the cursor to an exercise, starting again at set 1."""
        self._require_in_progress()
        if index < 0:
            raise InvariantViolation("Exercise index cannot be negative")
        self.current_exercise_index = index
        self.current_set_number = 1

    def set_current_set(self, set_number: int) -> None:
        self._require_in_progress()
        if set_number < 1:
            raise InvariantViolation("Set numbers start at 1")
        self.current_set_number = set_number

    def add_logged_set(self, workout_exercise_id: str, workout_set: WorkoutSet) -> None:
        """Append a freshly logged set to the cache (never deduplicated)."""
        if not self.is_active:
            raise InvariantViolation("No workout is active")
        self.logged_sets.setdefault(workout_exercise_id, []).append(workout_set)

    def get_logged_sets(self, workout_exercise_id: str) -> list[WorkoutSet]:
        return list(self.logged_sets.get(workout_exercise_id, []))

    def mark_completed(self, completed_at: datetime | None = None) -> None:
        """Enter the resume window.

        Pass the timestamp written to the stored session so both sides agree.
        """
        self._require_in_progress()
        self.completed_at = completed_at or datetime.now()
        self.is_in_resume_window = True
        log.info("Workout %s completed, resume window open", self.active_workout_id)

    def resume_seconds_remaining(self, now: datetime | None = None) -> int:
        """Whole seconds left in the resume window (0 when closed)."""
        if not self.is_in_resume_window or self.completed_at is None:
            return 0
        now = now or datetime.now()
        remaining = self.resume_window - (now - self.completed_at)
        return max(0, int(remaining.total_seconds()))

    def _window_open(self, now: datetime) -> bool:
        return (
            self.is_in_resume_window
            and self.completed_at is not None
            and now - self.completed_at < self.resume_window
        )

    def resume(self, now: datetime | None = None) -> bool:
        """Reopen a just-completed workout.

        Returns:
            True if the window was still open and the workout is back in
            progress, False otherwise (state is left untouched).
        """
        now = now or datetime.now()
        if not self._window_open(now):
            return False

        self.completed_at = None
        self.is_in_resume_window = False
        log.info("Workout %s resumed", self.active_workout_id)
        return True

    def check_resume_window(self, now: datetime | None = None) -> bool:
        """Poll the resume window.

        Returns True while the window is open. Once it has expired the state
        is reset to idle and False is returned. Outside the window phase this
        returns False without side effects.
        """
        if not self.is_in_resume_window:
            return False

        now = now or datetime.now()
        if self._window_open(now):
            return True

        log.info("Resume window for workout %s expired", self.active_workout_id)
        self.reset()
        return False

    def get_elapsed_seconds(self, now: datetime | None = None) -> int:
        """Seconds since the workout started, frozen once completed."""
        if self.started_at is None:
            return 0
        end = self.completed_at or now or datetime.now()
        return max(0, int((end - self.started_at).total_seconds()))

    def end(self) -> None:
        """Finish tracking the workout."""
        self.reset()

    def abandon(self) -> None:
        """Drop the workout without resuming."""
        self.reset()

    def reset(self) -> None:
        """Return to idle, clearing cursor and cache."""
        self.active_workout_id = None
        self.workout_name = None
        self.routine_template_id = None
        self.started_at = None
        self.completed_at = None
        self.is_in_resume_window = False
        self.current_exercise_index = 0
        self.current_set_number = 1
        self.logged_sets = {}

    def _require_in_progress(self) -> None:
        if self.phase is not WorkoutPhase.IN_PROGRESS:
            raise InvariantViolation("No workout is in progress")

    def to_dict(self) -> dict:
        """Convert the control fields to a dictionary for persistence."""
        return {
            "active_workout_id": self.active_workout_id,
            "workout_name": self.workout_name,
            "routine_template_id": self.routine_template_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "is_in_resume_window": self.is_in_resume_window,
            "current_exercise_index": self.current_exercise_index,
            "current_set_number": self.current_set_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ActiveWorkoutState":
        """Create from a persisted dictionary. The set cache starts empty."""
        started_at = None
        if data.get("started_at"):
            started_at = datetime.fromisoformat(data["started_at"])

        completed_at = None
        if data.get("completed_at"):
            completed_at = datetime.fromisoformat(data["completed_at"])

        return cls(
            active_workout_id=data.get("active_workout_id"),
            workout_name=data.get("workout_name"),
            routine_template_id=data.get("routine_template_id"),
            started_at=started_at,
            completed_at=completed_at,
            is_in_resume_window=bool(data.get("is_in_resume_window", False)),
            current_exercise_index=data.get("current_exercise_index", 0),
            current_set_number=data.get("current_set_number", 1),
        )

    def get_phase_display(self) -> str:
        """Get a human-readable phase string."""
        phase_map = {
            WorkoutPhase.IDLE: "No active workout",
            WorkoutPhase.IN_PROGRESS: "In Progress",
            WorkoutPhase.PENDING_RESUME: "Completed (can resume)",
        }
        return phase_map[self.phase]
