# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

TaskStore depends on a Protocol instead of a concrete backend.
This keeps storage swappable (SQLite, JSON file, in-memory fakes in tests).
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ..tasks.task_models import Task


class TaskBackend(Protocol):
    """
    Durable representation of the ordered task list.

    - load() returns tasks sorted by their persisted position
    - save() atomically replaces the whole record set (all-or-nothing)
    - both raise StorageError on failure
    """

    location: Path | str

    def load(self) -> list[Task]: ...
    def save(self, tasks: Sequence[Task]) -> None: ...
    def close(self) -> None: ...
