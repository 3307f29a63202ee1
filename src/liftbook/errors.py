"""Error types raised by liftbook repositories and services."""


class LiftbookError(Exception):
    """Base class for all liftbook errors."""


class NotFoundError(LiftbookError, LookupError):
    """A referenced template, session, exercise or row does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class InvariantViolation(LiftbookError, ValueError):
    """An operation was rejected before any mutation.

    The message is meant to be shown to the user verbatim.
    """


class StorageError(LiftbookError):
    """The underlying SQLite store failed (I/O, corruption, constraint)."""


class WorkoutConflictError(LiftbookError):
    """A workout is already active; the caller must continue or abandon it."""

    def __init__(self, active_workout_id: str, workout_name: str | None):
        self.active_workout_id = active_workout_id
        self.workout_name = workout_name
        super().__init__(
            f"Workout '{workout_name or active_workout_id}' is already in progress"
        )
