# tests/fakes.py

from __future__ import annotations

from collections.abc import Sequence

from tasklist.errors import StorageError
from tasklist.tasks.task_models import Task


class FakeTaskBackend:
    """
    In-memory TaskBackend for unit tests.

    - `persisted` is what a restart would see
    - set `fail_save` / `fail_load` to simulate a broken disk
    - `saves` counts successful writes
    """

    location = "memory://tasks"

    def __init__(self, tasks: Sequence[Task] | None = None) -> None:
        self.persisted: list[Task] = list(tasks or [])
        self.fail_save = False
        self.fail_load = False
        self.saves = 0
        self.closed = False

    def load(self) -> list[Task]:
        if self.fail_load:
            raise StorageError("simulated read failure")
        return list(self.persisted)

    def save(self, tasks: Sequence[Task]) -> None:
        if self.fail_save:
            raise StorageError("simulated write failure")
        self.persisted = list(tasks)
        self.saves += 1

    def close(self) -> None:
        self.closed = True


class SequentialIds:
    """Deterministic id factory: t0001, t0002, ..."""

    def __init__(self, prefix: str = "t") -> None:
        self.prefix = prefix
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"{self.prefix}{self.n:04d}"
