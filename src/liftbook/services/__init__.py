"""Services coordinating storage and the active-workout state."""

from .state_store import ActiveWorkoutStore, InputMemory
from .workout_flow import WorkoutFlow

__all__ = [
    "ActiveWorkoutStore",
    "InputMemory",
    "WorkoutFlow",
]
