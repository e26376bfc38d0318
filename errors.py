class ExerciseError(Exception):
    """Base class for exercise store errors."""


class ExerciseValidationError(ExerciseError, ValueError):
    """Raised when a record, filter or projection is malformed."""


class ExerciseNotFoundError(ExerciseError, ValueError):
    """Raised when no exercise has the requested id."""

    def __init__(self, exercise_id) -> None:
        super().__init__(f"exercise not found: {exercise_id!r}")
        self.exercise_id = exercise_id


class StoreError(ExerciseError, RuntimeError):
    """Raised when the database driver fails or is not connected."""
