# src/todo_list/cli/selection.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from ..tasks.task_models import Task

ADD_STR = "📝 Add New Task"
CLEAR_STR = "❌ Clear Finished Tasks"
QUIT_STR = "👋 Quit"
COMPLETE_MARKER = "✅"
INCOMPLETE_MARKER = "⭕️"


class MenuAction(StrEnum):
    ADD = "add"
    TASK = "task"
    CLEAR = "clear"
    QUIT = "quit"


@dataclass(frozen=True, slots=True)
class MenuOption:
    action: MenuAction
    task: Task | None = None

    def __str__(self) -> str:
        if self.action is MenuAction.TASK and self.task is not None:
            marker = COMPLETE_MARKER if self.task.complete else INCOMPLETE_MARKER
            return f"{marker} {self.task.details}"
        if self.action is MenuAction.ADD:
            return ADD_STR
        if self.action is MenuAction.CLEAR:
            return CLEAR_STR
        return QUIT_STR


DEFAULT_OPTIONS = (
    MenuOption(MenuAction.ADD),
    MenuOption(MenuAction.CLEAR),
    MenuOption(MenuAction.QUIT),
)


def build_menu_options(tasks: Iterable[Task]) -> list[MenuOption]:
    """Tasks in the given order, followed by add / clear / quit."""
    options = [MenuOption(MenuAction.TASK, task) for task in tasks]
    options.extend(DEFAULT_OPTIONS)
    return options
