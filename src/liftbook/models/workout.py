"""Workout session models: the logged-record side of the data model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .exercises import Exercise
from .routine import SetType


class WorkoutStatus(str, Enum):
    """Lifecycle status of a stored workout session."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass
class WorkoutSet:
    """An actual logged set. Immutable once stored."""

    workout_exercise_id: str
    set_number: int
    weight: float
    reps: int
    completed_at: datetime
    rpe: float | None = None
    set_type: SetType = SetType.NORMAL
    id: str | None = None

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "workout_exercise_id": self.workout_exercise_id,
            "set_number": self.set_number,
            "weight": self.weight,
            "reps": self.reps,
            "rpe": self.rpe,
            "completed_at": self.completed_at.isoformat(),
            "set_type": self.set_type.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSet":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            workout_exercise_id=data["workout_exercise_id"],
            set_number=data["set_number"],
            weight=data["weight"],
            reps=data["reps"],
            rpe=data.get("rpe"),
            completed_at=datetime.fromisoformat(data["completed_at"]),
            set_type=SetType(data.get("set_type", "normal")),
        )


@dataclass
class WorkoutExercise:
    """One exercise instance within a session, snapshotted at start."""

    workout_session_id: str
    exercise_id: str
    order: int
    routine_exercise_id: str | None = None
    notes: str | None = None
    exercise: Exercise | None = None
    sets: list[WorkoutSet] = field(default_factory=list)
    id: str | None = None


@dataclass
class WorkoutSession:
    """A logged execution of a routine template."""

    routine_template_id: str
    name: str
    started_at: datetime
    completed_at: datetime | None = None
    notes: str | None = None
    status: WorkoutStatus = WorkoutStatus.ACTIVE
    id: str | None = None

    @property
    def duration_seconds(self) -> int:
        if self.completed_at is None:
            return 0
        return int((self.completed_at - self.started_at).total_seconds())


@dataclass
class WorkoutSummary:
    """Aggregated statistics for one session."""

    id: str
    name: str
    started_at: datetime
    completed_at: datetime | None
    duration: int  # seconds, 0 until completed
    total_volume: float
    total_sets: int
    exercise_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration": self.duration,
            "total_volume": self.total_volume,
            "total_sets": self.total_sets,
            "exercise_count": self.exercise_count,
        }


@dataclass
class WorkoutPhoto:
    """Reference to a progress photo attached to a session."""

    workout_session_id: str
    file_path: str
    sort_order: int = 0
    created_at: datetime | None = None
    id: str | None = None
    # Populated by the progress-photo gallery query only
    workout_name: str | None = None
    workout_date: datetime | None = None


@dataclass
class ScheduledWorkout:
    """A routine planned for a future calendar date."""

    routine_template_id: str
    scheduled_date: date
    created_at: datetime | None = None
    routine_name: str | None = None
    id: str | None = None


@dataclass
class PreviousSet:
    """A set from an earlier completed session, for comparison."""

    set_number: int
    weight: float
    reps: int
    workout_session_id: str | None = None

    @property
    def volume(self) -> float:
        return self.weight * self.reps


class ProgressTrend(str, Enum):
    """Direction of a logged set compared with the previous session."""

    UP = "up"
    DOWN = "down"
    SAME = "same"
    FIRST = "first"


def compare_to_last(weight: float, reps: int, previous: PreviousSet | None) -> ProgressTrend:
    """Compare a set against the matching set of the last session by volume."""
    if previous is None:
        return ProgressTrend.FIRST

    current_volume = weight * reps
    if current_volume > previous.volume:
        return ProgressTrend.UP
    if current_volume < previous.volume:
        return ProgressTrend.DOWN
    return ProgressTrend.SAME
