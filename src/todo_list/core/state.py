# src/todo_list/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_manager import TaskManager
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: Any

    store: TaskStore
    manager: TaskManager

    def close(self) -> None:
        self.store.close()
