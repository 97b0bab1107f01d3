# src/todo_list/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class Task:
    """
    A to-do item.

    Equality and hashing cover both fields, so a toggled task compares unequal
    to its previous value. Look tasks up by their current value.
    """

    details: str
    complete: bool = False

    def toggled(self) -> Task:
        return Task(details=self.details, complete=not self.complete)


class TaskOperation(StrEnum):
    ADD = "add"
    TOGGLE = "toggle"
    PURGE = "purge"


class WriteMode(StrEnum):
    """
    When a mutation reaches the store.

    - buffered: kept in memory until the session-end flush
    - immediate: written through before the in-memory change
    """

    BUFFERED = "buffered"
    IMMEDIATE = "immediate"


class LoadErrorPolicy(StrEnum):
    START_EMPTY = "start_empty"
    PROPAGATE = "propagate"

    @classmethod
    def from_str(cls, raw: str | None) -> LoadErrorPolicy:
        if not raw:
            return cls.START_EMPTY
        return cls(raw.strip().lower())


WritePolicy = Mapping[TaskOperation, WriteMode]

DEFAULT_WRITE_POLICY: WritePolicy = {
    TaskOperation.ADD: WriteMode.BUFFERED,
    TaskOperation.TOGGLE: WriteMode.BUFFERED,
    TaskOperation.PURGE: WriteMode.IMMEDIATE,
}


def parse_write_policy(immediate_ops: Iterable[str]) -> dict[TaskOperation, WriteMode]:
    """
    Build a write policy where the named operations are immediate and the
    rest are buffered.

    Raises ValueError on an unknown operation name.
    """
    immediate = {TaskOperation(op.strip().lower()) for op in immediate_ops if op.strip()}
    return {
        op: (WriteMode.IMMEDIATE if op in immediate else WriteMode.BUFFERED)
        for op in TaskOperation
    }
