"""Small JSON key-value files for state kept outside the database.

Two snapshots live here: the active-workout control fields and the
last weight entered per exercise.
"""

import json
import logging
import os
from pathlib import Path

from ..config import ACTIVE_WORKOUT_FILENAME, INPUT_MEMORY_FILENAME, get_data_dir
from ..errors import StorageError
from ..models.active_workout import ActiveWorkoutState

log = logging.getLogger(__name__)


def _read_json(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        log.warning("Ignoring unreadable state file %s: %s", path, exc)
        return {}
    except OSError as exc:
        raise StorageError(f"Cannot read {path}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def _write_json(path: Path, data: dict) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise StorageError(f"Cannot write {path}: {exc}") from exc


class ActiveWorkoutStore:
    """Persists the control fields of an ``ActiveWorkoutState``."""

    def __init__(self, path: Path | None = None):
        self.path = path or get_data_dir() / ACTIVE_WORKOUT_FILENAME

    def load(self) -> ActiveWorkoutState:
        """Load the last saved state (idle when nothing was saved)."""
        return ActiveWorkoutState.from_dict(_read_json(self.path))

    def save(self, state: ActiveWorkoutState) -> None:
        _write_json(self.path, state.to_dict())

    def clear(self) -> None:
        self.save(ActiveWorkoutState())


class InputMemory:
    """Remembers the last weight entered for each exercise."""

    def __init__(self, path: Path | None = None):
        self.path = path or get_data_dir() / INPUT_MEMORY_FILENAME
        self._weights: dict[str, float] = {}
        for key, value in _read_json(self.path).items():
            try:
                self._weights[str(key)] = float(value)
            except (TypeError, ValueError):
                log.warning("Ignoring bad weight %r for %s in %s", value, key, self.path)

    def get_last_weight(self, exercise_id: str) -> float | None:
        return self._weights.get(exercise_id)

    def set_last_weight(self, exercise_id: str, weight: float) -> None:
        self._weights[exercise_id] = weight
        _write_json(self.path, self._weights)

    def to_dict(self) -> dict[str, float]:
        return dict(self._weights)
