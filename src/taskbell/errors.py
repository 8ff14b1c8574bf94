# src/taskbell/errors.py

"""
Error taxonomy.

    TaskbellError
    ├── ValidationError      bad input on add/edit (task is not created/changed)
    ├── TaskNotFoundError    unknown task id
    ├── PersistenceError     durable store failure (in-memory state stays authoritative)
    └── PlaybackError        audio failure (logged, the visual prompt still surfaces)

None of these are fatal to the process.
"""

from __future__ import annotations


class TaskbellError(Exception):
    """Base class for all taskbell exceptions."""


class ValidationError(TaskbellError, ValueError):
    """Missing or malformed title/date/time."""


class TaskNotFoundError(TaskbellError, KeyError):
    """No task with the given id."""

    def __init__(self, task_id: str) -> None:
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task not found: {self.task_id}"


class PersistenceError(TaskbellError):
    """Serialization or storage failure."""


class PlaybackError(TaskbellError):
    """Audio could not be started or stopped."""
