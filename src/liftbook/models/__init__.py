"""Data models for liftbook."""

from .active_workout import ActiveWorkoutState, WorkoutPhase
from .exercises import EquipmentType, Exercise, ExerciseCategory
from .routine import (
    ExerciseGroup,
    RoutineExercise,
    RoutineExerciseInput,
    RoutineExerciseSet,
    RoutineSetInput,
    RoutineTemplate,
    SetType,
    group_by_supersets,
)
from .workout import (
    PreviousSet,
    ProgressTrend,
    ScheduledWorkout,
    WorkoutExercise,
    WorkoutPhoto,
    WorkoutSession,
    WorkoutSet,
    WorkoutStatus,
    WorkoutSummary,
    compare_to_last,
)

__all__ = [
    "ActiveWorkoutState",
    "compare_to_last",
    "EquipmentType",
    "Exercise",
    "ExerciseCategory",
    "ExerciseGroup",
    "group_by_supersets",
    "PreviousSet",
    "ProgressTrend",
    "RoutineExercise",
    "RoutineExerciseInput",
    "RoutineExerciseSet",
    "RoutineSetInput",
    "RoutineTemplate",
    "ScheduledWorkout",
    "SetType",
    "WorkoutExercise",
    "WorkoutPhase",
    "WorkoutPhoto",
    "WorkoutSession",
    "WorkoutSet",
    "WorkoutStatus",
    "WorkoutSummary",
]
