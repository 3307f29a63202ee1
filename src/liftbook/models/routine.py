"""Routine template models: the reusable plan side of the data model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..config import DEFAULT_REST_SECONDS
from ..errors import InvariantViolation
from .exercises import Exercise


class SetType(str, Enum):
    """Kind of set, shared by target and logged sets."""

    NORMAL = "normal"
    WARMUP = "warmup"
    DROPSET = "dropset"
    FAILURE = "failure"


@dataclass
class RoutineExerciseSet:
    """A target set within a routine exercise."""

    set_number: int  # 1-based, unique within the parent exercise
    target_reps: int
    target_weight: float | None = None
    set_type: SetType = SetType.NORMAL
    routine_exercise_id: str | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "set_number": self.set_number,
            "target_reps": self.target_reps,
            "target_weight": self.target_weight,
            "set_type": self.set_type.value,
        }


@dataclass
class RoutineExercise:
    """One exercise's placement within a routine template."""

    exercise_id: str
    order: int  # 0-based, contiguous per template
    rest_seconds: int = DEFAULT_REST_SECONDS
    notes: str | None = None
    superset_group_id: str | None = None
    routine_template_id: str | None = None
    exercise: Exercise | None = None
    sets: list[RoutineExerciseSet] = field(default_factory=list)
    id: str | None = None

    @property
    def display_name(self) -> str:
        return self.exercise.name if self.exercise else self.exercise_id

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise.name if self.exercise else None,
            "order": self.order,
            "rest_seconds": self.rest_seconds,
            "notes": self.notes,
            "superset_group_id": self.superset_group_id,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class RoutineTemplate:
    """A named, reusable workout plan.

    When loaded through ``RoutineRepository.get_with_exercises`` the
    ``exercises`` list is populated in ``order`` sequence, each with its
    catalog exercise and its target sets sorted by set number.
    """

    name: str
    exercises: list[RoutineExercise] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: str | None = None

    @property
    def total_sets(self) -> int:
        return sum(len(ex.sets) for ex in self.exercises)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class RoutineSetInput:
    """Target set supplied when building a routine."""

    set_number: int
    target_reps: int
    target_weight: float | None = None
    set_type: SetType = SetType.NORMAL


@dataclass
class RoutineExerciseInput:
    """Exercise supplied when building a routine."""

    exercise_id: str
    order: int
    rest_seconds: int = DEFAULT_REST_SECONDS
    notes: str | None = None
    superset_group_id: str | None = None
    sets: list[RoutineSetInput] = field(default_factory=list)


def validate_exercise_input(exercise: RoutineExerciseInput) -> None:
    """Reject an exercise input that would break template invariants."""
    if exercise.rest_seconds < 0:
        raise InvariantViolation("Rest time cannot be negative")

    seen: set[int] = set()
    for target in exercise.sets:
        if target.set_number < 1:
            raise InvariantViolation("Set numbers start at 1")
        if target.set_number in seen:
            raise InvariantViolation(
                f"Set number {target.set_number} appears more than once"
            )
        seen.add(target.set_number)
        if target.target_reps <= 0:
            raise InvariantViolation("Target reps must be greater than zero")
        if target.target_weight is not None and target.target_weight < 0:
            raise InvariantViolation("Target weight cannot be negative")


def validate_routine_input(name: str, exercises: list[RoutineExerciseInput]) -> None:
    """Reject a routine definition before anything is written.

    Orders must form the contiguous range 0..n-1 in any input sequence.
    """
    if not name or not name.strip():
        raise InvariantViolation("Routine name cannot be empty")

    orders = sorted(ex.order for ex in exercises)
    if orders != list(range(len(exercises))):
        raise InvariantViolation(
            "Exercise order must be contiguous starting at 0"
        )

    for exercise in exercises:
        validate_exercise_input(exercise)


@dataclass
class ExerciseGroup:
    """A single exercise or a superset, as presented during a workout."""

    exercises: list[RoutineExercise]
    superset_group_id: str | None = None

    @property
    def is_superset(self) -> bool:
        return self.superset_group_id is not None


def group_by_supersets(exercises: list[RoutineExercise]) -> list[ExerciseGroup]:
    """Group routine exercises into supersets.

    Exercises sharing a superset id form one group regardless of adjacency.
    The group takes the position of its first member in ``order``.
    """
    ordered = sorted(exercises, key=lambda ex: ex.order)
    groups: list[ExerciseGroup] = []
    by_superset: dict[str, ExerciseGroup] = {}

    for exercise in ordered:
        group_id = exercise.superset_group_id
        if group_id is None:
            groups.append(ExerciseGroup(exercises=[exercise]))
            continue

        if group_id in by_superset:
            by_superset[group_id].exercises.append(exercise)
        else:
            group = ExerciseGroup(exercises=[exercise], superset_group_id=group_id)
            by_superset[group_id] = group
            groups.append(group)

    return groups
