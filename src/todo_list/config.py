# src/todo_list/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a usable default; nothing is required to start.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path
    log_to_file: bool

    # ---- Storage ----
    db_path: Path
    db_timeout: float

    # ---- Reconciliation ----
    load_error_policy: str
    immediate_ops: list[str]

    @staticmethod
    def from_env() -> "Settings":
        # An explicitly empty TODO_IMMEDIATE_OPS means "buffer everything".
        return Settings(
            app_name=_env(_k("APP_NAME"), "todo").strip() or "todo",
            log_level=_env(_k("LOG_LEVEL"), "WARNING"),
            log_dir=_env_path(_k("LOG_DIR"), Path(".local/todo")),
            log_to_file=_env_bool(_k("LOG_TO_FILE"), True),
            db_path=_env_path(_k("DB_PATH"), Path("todo.db")),
            db_timeout=_env_float(_k("DB_TIMEOUT"), 30.0),
            load_error_policy=_env(_k("LOAD_ERROR_POLICY"), "start_empty"),
            immediate_ops=_env_list(_k("IMMEDIATE_OPS"), ["purge"]),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
