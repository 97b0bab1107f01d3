# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_list.tasks.task_manager import TaskManager
from todo_list.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="WARNING",
        log_dir=tmp_path / "logs",
        log_to_file=False,
        db_path=tmp_path / "todo.db",
        db_timeout=1.0,
        load_error_policy="start_empty",
        immediate_ops=["purge"],
    )


@pytest.fixture()
def store(tmp_path: Path):
    """Real SQLite store in a per-test directory."""
    s = TaskStore(tmp_path / "todo.db", timeout=1.0)
    yield s
    s.close()


@pytest.fixture()
def manager(store: TaskStore) -> TaskManager:
    m = TaskManager(store)
    m.load_persisted()
    return m
