# src/todo_list/tasks/errors.py

from __future__ import annotations

from pathlib import Path


class StorageError(Exception):
    """Base class for failures raised by TaskStore."""

    def __init__(self, message: str, *, db_path: str | Path | None = None) -> None:
        super().__init__(message)
        self.db_path = Path(db_path) if db_path is not None else None

    def __str__(self) -> str:
        msg = super().__str__()
        if self.db_path is None:
            return msg
        return f"{msg} (db={self.db_path})"


class StorageUnavailable(StorageError):
    """The database file could not be opened, created or initialized."""


class StorageReadError(StorageError):
    """A query or row decode failed while loading tasks."""


class StorageWriteError(StorageError):
    """An upsert or delete failed; any open transaction was rolled back."""


class TaskManagerStateError(RuntimeError):
    """A mutation was attempted before persisted tasks were loaded."""
