# src/todo_list/tasks/task_manager.py

"""
In-memory task set for one session, reconciled with TaskStore.

Tasks are kept in a dict keyed by `details` with the completion flag as the
value, so two tasks can never share the same text.

When a mutation reaches the store is decided by the write policy table
(see task_models.DEFAULT_WRITE_POLICY):
- add / toggle: buffered until flush_all() at session end
- purge: written immediately
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Protocol

from .errors import StorageReadError, TaskManagerStateError
from .task_models import (
    DEFAULT_WRITE_POLICY,
    LoadErrorPolicy,
    Task,
    TaskOperation,
    WriteMode,
    WritePolicy,
)

logger = logging.getLogger(__name__)


class TaskRepo(Protocol):
    """The subset of TaskStore the manager depends on."""

    def load_all(self) -> set[Task]: ...

    def upsert_one(self, task: Task) -> None: ...

    def upsert_many(self, tasks: list[Task]) -> int: ...

    def delete_where_complete(self) -> int: ...

    def delete_many(self, tasks: list[Task]) -> int: ...


class ManagerState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    MUTATING = "mutating"
    FLUSHED = "flushed"


class OrderedView:
    """
    Incomplete tasks first, then completed ones.

    Lazy and restartable: every iteration reads the manager's current tasks
    from the start. Order inside each group is not guaranteed.
    """

    def __init__(self, tasks: Mapping[str, bool]) -> None:
        self._tasks = tasks

    def __iter__(self) -> Iterator[Task]:
        for details, complete in self._tasks.items():
            if not complete:
                yield Task(details=details, complete=False)
        for details, complete in self._tasks.items():
            if complete:
                yield Task(details=details, complete=True)

    def __len__(self) -> int:
        return len(self._tasks)


class TaskManager:
    def __init__(
        self,
        store: TaskRepo,
        *,
        write_policy: WritePolicy = DEFAULT_WRITE_POLICY,
        load_error_policy: LoadErrorPolicy = LoadErrorPolicy.START_EMPTY,
    ) -> None:
        self._store = store
        self._tasks: dict[str, bool] = {}
        self._pending_deletes: set[str] = set()
        self._write_policy = {op: write_policy.get(op, WriteMode.BUFFERED) for op in TaskOperation}
        self._load_error_policy = load_error_policy
        self._state = ManagerState.UNINITIALIZED

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def write_policy(self) -> Mapping[TaskOperation, WriteMode]:
        return dict(self._write_policy)

    def _is_immediate(self, op: TaskOperation) -> bool:
        return self._write_policy[op] is WriteMode.IMMEDIATE

    def _begin_mutation(self, op: TaskOperation) -> None:
        if self._state is ManagerState.UNINITIALIZED:
            raise TaskManagerStateError(f"Cannot {op.value} before persisted tasks are loaded")
        self._state = ManagerState.MUTATING

    # ---- reads ----

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task: object) -> bool:
        if not isinstance(task, Task):
            return False
        stored = self._tasks.get(task.details)
        return stored is not None and stored == task.complete

    def get(self, details: str) -> Task | None:
        complete = self._tasks.get(details)
        if complete is None:
            return None
        return Task(details=details, complete=complete)

    def tasks(self) -> set[Task]:
        return {Task(details=d, complete=c) for d, c in self._tasks.items()}

    def ordered_view(self) -> OrderedView:
        return OrderedView(self._tasks)

    # ---- session boundaries ----

    def load_persisted(self, on_error: LoadErrorPolicy | None = None) -> int:
        """
        Replace the in-memory tasks with what the store holds.

        With LoadErrorPolicy.START_EMPTY a StorageReadError is logged and the
        session starts with no tasks. With PROPAGATE it is re-raised.
        """
        policy = on_error or self._load_error_policy
        try:
            loaded = self._store.load_all()
        except StorageReadError:
            if policy is LoadErrorPolicy.PROPAGATE:
                raise
            logger.warning("Failed to load persisted tasks; starting empty.", exc_info=True)
            loaded = set()

        self._tasks = {t.details: t.complete for t in loaded}
        self._pending_deletes.clear()
        self._state = ManagerState.LOADED
        logger.info("Loaded %d persisted tasks.", len(self._tasks))
        return len(self._tasks)

    def flush_all(self) -> int:
        """
        Write the whole task set to the store.

        Purges that were buffered are deleted first. On failure the
        StorageWriteError propagates and the in-memory tasks are unchanged.
        """
        if self._state is ManagerState.UNINITIALIZED:
            raise TaskManagerStateError("Cannot flush before persisted tasks are loaded")
        if self._pending_deletes:
            self._store.delete_many([Task(details=d) for d in sorted(self._pending_deletes)])
            self._pending_deletes.clear()

        written = self._store.upsert_many(list(self.tasks()))
        self._state = ManagerState.FLUSHED
        logger.info("Flushed %d tasks.", written)
        return written

    # ---- mutations ----

    def add_task(self, details: str) -> Task:
        """
        Add a new incomplete task.

        Adding text that already exists overwrites it, resetting it to incomplete.
        """
        if not details:
            raise ValueError("details is required")

        self._begin_mutation(TaskOperation.ADD)
        task = Task(details=details)
        if self._is_immediate(TaskOperation.ADD):
            self._store.upsert_one(task)

        previous = self._tasks.get(details)
        if previous:
            logger.info("Task %r re-added; marking incomplete.", details)
        self._tasks[details] = False
        self._pending_deletes.discard(details)
        logger.debug("Task added details=%r", details)
        return task

    def toggle_completion(self, task: Task) -> Task | None:
        """
        Flip completion of the task equal to `task`.

        Returns the new value, or None if no current task matches (stale value).
        """
        self._begin_mutation(TaskOperation.TOGGLE)
        if task not in self:
            logger.debug("Toggle ignored; no current task equals %r", task)
            return None

        new_task = task.toggled()
        if self._is_immediate(TaskOperation.TOGGLE):
            self._store.upsert_one(new_task)
        self._tasks[task.details] = new_task.complete
        return new_task

    def purge_completed(self) -> int:
        """
        Remove all completed tasks.

        In immediate mode the store deletes run first; if one raises, nothing
        is removed from memory. Tasks completed during this session are still
        incomplete on disk (toggle is buffered), so they are deleted by details
        as well. Returns the number of tasks removed from memory.
        """
        self._begin_mutation(TaskOperation.PURGE)
        completed = [d for d, c in self._tasks.items() if c]
        if self._is_immediate(TaskOperation.PURGE):
            deleted = self._store.delete_where_complete()
            if completed:
                deleted += self._store.delete_many([Task(details=d) for d in completed])
            logger.info("Purged %d completed tasks from store.", deleted)

        for details in completed:
            del self._tasks[details]
        if not self._is_immediate(TaskOperation.PURGE):
            self._pending_deletes.update(completed)
        return len(completed)
