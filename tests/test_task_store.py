# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from todo_list.tasks.errors import StorageReadError, StorageUnavailable, StorageWriteError
from todo_list.tasks.task_models import Task
from todo_list.tasks.task_store import TaskStore


def test_single_insert_and_load(store: TaskStore) -> None:
    task = Task("Test task")
    store.upsert_one(task)

    tasks = store.load_all()
    assert tasks == {task}
    assert store.count_tasks() == 1


def test_upsert_replaces_on_same_details(store: TaskStore) -> None:
    store.upsert_one(Task("Write tests"))
    store.upsert_one(Task("Write tests", complete=True))

    assert store.load_all() == {Task("Write tests", complete=True)}


def test_schema_creation_is_idempotent(tmp_path: Path) -> None:
    db = tmp_path / "todo.db"
    with TaskStore(db) as first:
        first.upsert_one(Task("kept"))

    with TaskStore(db) as second:
        assert second.load_all() == {Task("kept")}


def test_details_with_quotes_are_stored_verbatim(store: TaskStore) -> None:
    tricky = [
        Task('say "hi"'),
        Task("it's done", complete=True),
        Task('x"); DROP TABLE tasks; --'),
    ]
    store.upsert_many(tricky)
    store.delete_one(Task("it's done"))

    assert store.load_all() == {tricky[0], tricky[2]}


def test_upsert_many_writes_all(store: TaskStore) -> None:
    tasks = {Task("a"), Task("b", complete=True), Task("c")}
    assert store.upsert_many(tasks) == 3
    assert store.load_all() == tasks


def test_upsert_many_rolls_back_whole_batch(store: TaskStore) -> None:
    store.upsert_one(Task("existing"))
    conn = sqlite3.connect(str(store.db_path))
    conn.execute(
        """
        CREATE TRIGGER reject_boom BEFORE INSERT ON tasks
        WHEN NEW.details = 'boom'
        BEGIN
            SELECT RAISE(ABORT, 'boom rejected');
        END
        """
    )
    conn.commit()
    conn.close()

    with pytest.raises(StorageWriteError):
        store.upsert_many([Task("first"), Task("existing", complete=True), Task("boom")])

    assert store.load_all() == {Task("existing")}


def test_transaction_keeps_original_error_after_sqlite_rollback(store: TaskStore) -> None:
    with pytest.raises(sqlite3.IntegrityError, match="disk full"):
        with store._transaction() as conn:
            conn.execute("INSERT INTO tasks (details, complete) VALUES (?, ?)", ("gone", 0))
            # SQLite ends the transaction on its own before the error surfaces.
            conn.execute("ROLLBACK")
            raise sqlite3.IntegrityError("disk full")

    assert store.load_all() == set()
    store.upsert_one(Task("still usable"))
    assert store.load_all() == {Task("still usable")}


def test_delete_where_complete(store: TaskStore) -> None:
    store.upsert_many([Task("open"), Task("done 1", True), Task("done 2", True)])

    assert store.delete_where_complete() == 2
    assert store.load_all() == {Task("open")}


def test_delete_one_matches_on_details_only(store: TaskStore) -> None:
    store.upsert_one(Task("task", complete=True))

    assert store.delete_one(Task("task", complete=False)) == 1
    assert store.load_all() == set()


def test_delete_many(store: TaskStore) -> None:
    store.upsert_many([Task("a"), Task("b"), Task("c", True)])

    assert store.delete_many([Task("a"), Task("c"), Task("missing")]) == 2
    assert store.load_all() == {Task("b")}


def test_reset_clears_table(store: TaskStore) -> None:
    store.upsert_many([Task("a"), Task("b")])
    store.reset()

    assert store.count_tasks() == 0
    store.upsert_one(Task("after reset"))
    assert store.load_all() == {Task("after reset")}


def test_open_fails_when_parent_is_a_file(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", "utf-8")

    with pytest.raises(StorageUnavailable) as exc_info:
        TaskStore(blocker / "todo.db")
    assert exc_info.value.db_path == blocker / "todo.db"


def test_open_fails_on_corrupt_file(tmp_path: Path) -> None:
    db = tmp_path / "corrupt.db"
    db.write_bytes(b"this is definitely not sqlite " * 200)

    with pytest.raises(StorageUnavailable):
        TaskStore(db)


def test_load_rejects_undecodable_rows(store: TaskStore) -> None:
    conn = sqlite3.connect(str(store.db_path))
    conn.execute("INSERT INTO tasks (details, complete) VALUES (?, ?)", ("bad", "maybe"))
    conn.commit()
    conn.close()

    with pytest.raises(StorageReadError):
        store.load_all()


def test_load_rejects_null_details(store: TaskStore) -> None:
    conn = sqlite3.connect(str(store.db_path))
    conn.execute("INSERT INTO tasks (details, complete) VALUES (NULL, 0)")
    conn.commit()
    conn.close()

    with pytest.raises(StorageReadError):
        store.load_all()


def test_closed_store_raises_storage_errors(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "todo.db")
    store.close()
    store.close()

    with pytest.raises(StorageReadError):
        store.load_all()
    with pytest.raises(StorageWriteError):
        store.upsert_many([Task("a")])
    with pytest.raises(StorageWriteError):
        store.delete_where_complete()
