# src/todo_list/core/ports.py

"""
Ports (interfaces) used by the session loop.

The loop depends on Protocols instead of a concrete terminal UI, so the menu
and the text prompt can be swapped (or faked in tests).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class Menu(Protocol):
    """Presents labeled choices; returns the selected index, or None if cancelled."""

    def select(self, prompt: str, items: Sequence[str]) -> int | None: ...


class TextPrompt(Protocol):
    """Reads one line of text. May raise EOFError, KeyboardInterrupt or OSError."""

    def ask(self, prompt: str) -> str: ...
