# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_list.config import Settings

ENV_NAMES = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_LOG_DIR",
    "TODO_LOG_TO_FILE",
    "TODO_DB_PATH",
    "TODO_DB_TIMEOUT",
    "TODO_LOAD_ERROR_POLICY",
    "TODO_IMMEDIATE_OPS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "todo"
    assert s.log_level == "WARNING"
    assert s.db_path == Path("todo.db")
    assert s.db_timeout == 30.0
    assert s.log_to_file is True
    assert s.load_error_policy == "start_empty"
    assert s.immediate_ops == ["purge"]


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DB_PATH", str(tmp_path / "mine.db"))
    monkeypatch.setenv("TODO_DB_TIMEOUT", "2.5")
    monkeypatch.setenv("TODO_LOG_TO_FILE", "no")
    monkeypatch.setenv("TODO_IMMEDIATE_OPS", "add, purge")
    monkeypatch.setenv("TODO_LOAD_ERROR_POLICY", "propagate")

    s = Settings.from_env()
    assert s.db_path == tmp_path / "mine.db"
    assert s.db_timeout == 2.5
    assert s.log_to_file is False
    assert s.immediate_ops == ["add", "purge"]
    assert s.load_error_policy == "propagate"


def test_invalid_timeout_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_DB_TIMEOUT", "soon")
    assert Settings.from_env().db_timeout == 30.0


def test_empty_immediate_ops_buffers_everything(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_IMMEDIATE_OPS", "")
    assert Settings.from_env().immediate_ops == []
