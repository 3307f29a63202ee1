"""liftbook: local workout tracking with routine templates and timed sessions."""

__version__ = "0.1.0"
