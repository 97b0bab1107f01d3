# src/todo_list/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from ..cli.selection import MenuAction, build_menu_options
from ..core.ports import Menu, TextPrompt
from ..core.state import AppState

logger = logging.getLogger(__name__)

CANCEL_INPUTS = {"q", "quit", "exit"}


def _clear_screen() -> None:
    """Best-effort: only clears when stdout is a TTY."""
    if sys.stdout.isatty():
        print("\033[H\033[2J", end="", flush=True)


class ConsoleMenu:
    """
    Numbered-list menu on stdout.

    Enter picks the first item; q, EOF or Ctrl+C cancel.
    """

    def __init__(self, *, clear: bool = True) -> None:
        self._clear = clear

    def select(self, prompt: str, items: Sequence[str]) -> int | None:
        if self._clear:
            _clear_screen()
        print(prompt)
        for i, item in enumerate(items, start=1):
            print(f"  {i:>2}. {item}")

        while True:
            try:
                raw = input("> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print()
                return None

            if not raw:
                return 0 if items else None
            if raw in CANCEL_INPUTS:
                return None
            if raw.isdigit() and 1 <= int(raw) <= len(items):
                return int(raw) - 1
            print(f"Pick a number between 1 and {len(items)} (q to quit).")


class ConsolePrompt:
    def ask(self, prompt: str) -> str:
        return input(f"{prompt}: ")


def run_console_loop(
    state: AppState,
    menu: Menu | None = None,
    prompt: TextPrompt | None = None,
) -> None:
    """
    Drive the task manager from the menu until the user quits or cancels.

    StorageError from an immediate write (e.g. purge) propagates to the caller.
    """
    menu = menu or ConsoleMenu()
    prompt = prompt or ConsolePrompt()
    manager = state.manager
    title = f"{getattr(state.settings, 'app_name', 'todo')} - To-Do List"
    logger.info("Console loop started (%d tasks).", len(manager))

    while True:
        options = build_menu_options(manager.ordered_view())
        idx = menu.select(title, [str(o) for o in options])
        if idx is None:
            logger.info("Menu cancelled, exiting.")
            break

        option = options[idx]
        if option.action is MenuAction.QUIT:
            break

        if option.action is MenuAction.ADD:
            try:
                details = prompt.ask("Enter the details for your new task").strip()
            except (EOFError, KeyboardInterrupt):
                logger.debug("Add cancelled.")
                continue
            except OSError:
                logger.exception("Failed to read task details; ending session.")
                break
            if details:
                manager.add_task(details)
        elif option.action is MenuAction.TASK and option.task is not None:
            manager.toggle_completion(option.task)
        elif option.action is MenuAction.CLEAR:
            removed = manager.purge_completed()
            logger.info("Cleared %d finished tasks.", removed)

    logger.info("Console loop finished.")
