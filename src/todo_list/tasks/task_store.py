# src/todo_list/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import StorageReadError, StorageUnavailable, StorageWriteError
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("todo.db")


class TaskStore:
    """
    SQLite task store.

    One table keyed by the task text:

        tasks(details TEXT UNIQUE, complete INTEGER)

    Upserts use INSERT OR REPLACE, so the last write for a given `details`
    wins. Every statement is parameterized.

    Connection:
    - one connection per store, opened in the constructor and kept until close()
    - autocommit mode; multi-row writes run inside an explicit BEGIN/COMMIT
    - nothing is cached in memory, every read hits the table
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH, *, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._db_path), timeout=timeout, isolation_level=None)
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable("Cannot open task database", db_path=self._db_path) from exc

        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        self._conn = conn
        try:
            self._ensure_schema()
        except sqlite3.Error as exc:
            self.close()
            raise StorageUnavailable(
                "Cannot initialize task database", db_path=self._db_path
            ) from exc

        logger.info("TaskStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        finally:
            self._conn = None
        logger.debug("TaskStore closed db=%s", self._db_path)

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    @property
    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
        return self._conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        self._connection.execute(
            "CREATE TABLE IF NOT EXISTS tasks (details TEXT UNIQUE, complete INTEGER)"
        )

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connection
        conn.execute("BEGIN")
        try:
            yield conn
        except BaseException:
            # SQLite may already have rolled back on its own (e.g. disk full).
            with contextlib.suppress(sqlite3.Error):
                conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    @staticmethod
    def _task_params(task: Task) -> tuple[str, int]:
        return task.details, 1 if task.complete else 0

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        details = row["details"]
        complete = row["complete"]
        if not isinstance(details, str) or not details:
            raise StorageReadError(
                f"Invalid details value in tasks table: {details!r}", db_path=self._db_path
            )
        if not isinstance(complete, int):
            raise StorageReadError(
                f"Invalid complete value for task {details!r}: {complete!r}",
                db_path=self._db_path,
            )
        return Task(details=details, complete=complete == 1)

    # ---- public API ----

    def count_tasks(self) -> int:
        try:
            (n,) = self._connection.execute("SELECT COUNT(*) FROM tasks").fetchone()
        except sqlite3.Error as exc:
            raise StorageReadError("Failed to count tasks", db_path=self._db_path) from exc
        return int(n)

    def load_all(self) -> set[Task]:
        """Return every persisted task. Raises StorageReadError on any failure."""
        try:
            rows = self._connection.execute("SELECT details, complete FROM tasks").fetchall()
        except sqlite3.Error as exc:
            raise StorageReadError("Failed to load tasks", db_path=self._db_path) from exc

        tasks = {self._row_to_task(r) for r in rows}
        logger.debug("Loaded %d tasks from %s", len(tasks), self._db_path)
        return tasks

    def upsert_one(self, task: Task) -> None:
        try:
            self._connection.execute(
                "INSERT OR REPLACE INTO tasks (details, complete) VALUES (?, ?)",
                self._task_params(task),
            )
        except sqlite3.Error as exc:
            raise StorageWriteError(
                f"Failed to save task {task.details!r}", db_path=self._db_path
            ) from exc
        logger.debug("Task saved details=%r complete=%s", task.details, task.complete)

    def upsert_many(self, tasks: Iterable[Task]) -> int:
        """
        Upsert all `tasks` in one transaction.

        Either every row is written or none is. Returns the number of rows written.
        """
        params = [self._task_params(t) for t in tasks]
        try:
            with self._transaction() as conn:
                conn.executemany(
                    "INSERT OR REPLACE INTO tasks (details, complete) VALUES (?, ?)", params
                )
        except sqlite3.Error as exc:
            raise StorageWriteError(
                f"Failed to save {len(params)} tasks; batch rolled back", db_path=self._db_path
            ) from exc
        logger.debug("Saved %d tasks to %s", len(params), self._db_path)
        return len(params)

    def delete_where_complete(self) -> int:
        try:
            cur = self._connection.execute("DELETE FROM tasks WHERE complete = 1")
        except sqlite3.Error as exc:
            raise StorageWriteError(
                "Failed to delete completed tasks", db_path=self._db_path
            ) from exc
        logger.debug("Deleted %d completed tasks", cur.rowcount)
        return cur.rowcount

    def delete_one(self, task: Task) -> int:
        """Delete the row with the same details as `task` (completion is ignored)."""
        try:
            cur = self._connection.execute("DELETE FROM tasks WHERE details = ?", (task.details,))
        except sqlite3.Error as exc:
            raise StorageWriteError(
                f"Failed to delete task {task.details!r}", db_path=self._db_path
            ) from exc
        return cur.rowcount

    def delete_many(self, tasks: Iterable[Task]) -> int:
        """Delete rows matching the details of `tasks` in one transaction."""
        params = [(t.details,) for t in tasks]
        try:
            with self._transaction() as conn:
                before = conn.total_changes
                conn.executemany("DELETE FROM tasks WHERE details = ?", params)
                deleted = conn.total_changes - before
        except sqlite3.Error as exc:
            raise StorageWriteError(
                f"Failed to delete {len(params)} tasks; batch rolled back", db_path=self._db_path
            ) from exc
        logger.debug("Deleted %d of %d requested tasks", deleted, len(params))
        return deleted

    def reset(self) -> None:
        """Drop and recreate the tasks table."""
        try:
            with self._transaction() as conn:
                conn.execute("DROP TABLE IF EXISTS tasks")
                conn.execute(
                    "CREATE TABLE IF NOT EXISTS tasks (details TEXT UNIQUE, complete INTEGER)"
                )
        except sqlite3.Error as exc:
            raise StorageWriteError("Failed to reset tasks table", db_path=self._db_path) from exc
        logger.info("TaskStore reset db=%s", self._db_path)
