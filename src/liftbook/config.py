"""Runtime configuration for liftbook.

Values come from environment variables where noted, otherwise the defaults
below apply.
"""

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

# Default data directory (project root / data)
DATA_DIR = Path(__file__).parent.parent.parent / "data"

DATA_DIR_ENV = "LIFTBOOK_DATA_DIR"
DB_FILENAME = "liftbook.db"
ACTIVE_WORKOUT_FILENAME = "active_workout.json"
INPUT_MEMORY_FILENAME = "input_memory.json"

# Seconds after completion during which a finished workout can be reopened
RESUME_WINDOW_SECONDS = 600
# Number of previous sets returned for progressive-overload comparison
LAST_SETS_LIMIT = 10
DEFAULT_REST_SECONDS = 90
DEFAULT_HISTORY_LIMIT = 20

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_data_dir(data_dir: Path | None = None) -> Path:
    """Resolve the data directory and make sure it exists.

    An explicit argument wins over ``LIFTBOOK_DATA_DIR``, which wins over
    the default.
    """
    if data_dir is None:
        env_value = os.environ.get(DATA_DIR_ENV)
        data_dir = Path(env_value) if env_value else DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for command-line use."""
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    log.debug("Logging configured at %s", level.upper())
