# src/todo_list/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the task store, loads persisted tasks, runs the
console menu and flushes all tasks back to the store on the way out.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.ports import Menu, TextPrompt
from ..logging_setup import setup_logging
from ..tasks.errors import StorageError, StorageUnavailable

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STORAGE_ERROR = 1
EXIT_UNAVAILABLE = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="todo-list", description="Terminal to-do list.")
    parser.add_argument("--db", metavar="PATH", help="SQLite database file (default: todo.db)")
    return parser.parse_args(argv)


def _report(message: str) -> None:
    print(f"[todo] {message}", file=sys.stderr)


def main(
    argv: list[str] | None = None,
    *,
    settings=None,
    menu: Menu | None = None,
    prompt: TextPrompt | None = None,
) -> int:
    args = _parse_args(argv)
    if settings is None:
        settings = get_settings()
        level_name = str(getattr(settings, "log_level", "WARNING")).upper()
        setup_logging(
            log_dir=settings.log_dir,
            console_level=getattr(logging, level_name, logging.WARNING),
            log_to_file=settings.log_to_file,
        )

    logger.info("Starting %s...", getattr(settings, "app_name", "todo"))

    try:
        state = create_initial_state(settings=settings, db_path=args.db)
    except StorageUnavailable as e:
        logger.exception("Task database unavailable.")
        _report(f"Cannot open task database: {e}")
        return EXIT_UNAVAILABLE
    except ValueError as e:
        _report(f"Invalid configuration: {e}")
        return EXIT_UNAVAILABLE

    exit_code = EXIT_OK
    try:
        try:
            state.manager.load_persisted()
        except StorageError as e:
            logger.exception("Failed to load persisted tasks.")
            _report(f"Cannot load tasks: {e}")
            return EXIT_STORAGE_ERROR

        try:
            run_console_loop(state, menu=menu, prompt=prompt)
        except StorageError as e:
            logger.exception("Storage failure during session.")
            _report(f"Storage failure: {e}")
            exit_code = EXIT_STORAGE_ERROR

        try:
            state.manager.flush_all()
        except StorageError as e:
            logger.exception("Failed to save tasks.")
            _report(f"Failed to save tasks, changes from this session are lost: {e}")
            exit_code = EXIT_STORAGE_ERROR
    finally:
        state.close()

    logger.info("Bye.")
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
