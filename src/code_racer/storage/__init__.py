"""SQLite persistence for generated tracks."""

from code_racer.storage.sqlite import TrackStorage

__all__ = ["TrackStorage"]
