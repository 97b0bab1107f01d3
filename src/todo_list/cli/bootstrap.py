# src/todo_list/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- opens the task store,
- wires the task manager with the configured write and load-error policies.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_manager import TaskManager
from ..tasks.task_models import LoadErrorPolicy, parse_write_policy
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, db_path: str | Path | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    `db_path` overrides settings.db_path. Raises StorageUnavailable if the
    database cannot be opened, and ValueError on invalid policy settings.
    """
    if settings is None:
        settings = get_settings()

    write_policy = parse_write_policy(settings.immediate_ops)
    load_error_policy = LoadErrorPolicy.from_str(settings.load_error_policy)

    path = Path(db_path) if db_path is not None else Path(settings.db_path)
    store = TaskStore(path, timeout=float(settings.db_timeout))
    manager = TaskManager(
        store,
        write_policy=write_policy,
        load_error_policy=load_error_policy,
    )
    logger.debug(
        "State created db=%s write_policy=%s load_error_policy=%s",
        path,
        {op.value: mode.value for op, mode in write_policy.items()},
        load_error_policy.value,
    )
    return AppState(settings=settings, store=store, manager=manager)
