# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.core.state import AppState
from tasklist.tasks.task_backend import SqliteTaskBackend
from tasklist.tasks.task_store import TaskStore

from .fakes import FakeTaskBackend, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        backend="sqlite",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        tasks_json_path=tmp_path / "tasks.json",
        lock_timeout=None,
        date_format="%Y-%m-%d %H:%M",
    )


@pytest.fixture()
def fake_backend() -> FakeTaskBackend:
    return FakeTaskBackend()


@pytest.fixture()
def store(fake_backend: FakeTaskBackend) -> TaskStore:
    """TaskStore over the in-memory fake, with deterministic ids and clock."""
    ticks = iter(range(1_700_000_000, 1_800_000_000))
    return TaskStore(
        fake_backend,
        clock=lambda: float(next(ticks)),
        id_factory=SequentialIds(),
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with a real SQLite store.

    Persistence is part of what the command tests exercise.
    """
    return AppState(
        settings=settings,
        task_store=TaskStore(SqliteTaskBackend(settings.tasks_db_path)),
    )
