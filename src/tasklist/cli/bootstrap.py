# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend and wires the TaskStore into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskBackend
from ..core.state import AppState
from ..tasks.task_backend import JsonTaskBackend, SqliteTaskBackend
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_json_path.parent.mkdir(parents=True, exist_ok=True)


def create_backend(settings) -> TaskBackend:
    backend = str(getattr(settings, "backend", "sqlite")).lower()
    if backend == "json":
        return JsonTaskBackend(settings.tasks_json_path)
    if backend != "sqlite":
        logger.warning("Unknown backend %r, falling back to sqlite.", backend)
    return SqliteTaskBackend(settings.tasks_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(
        create_backend(settings),
        lock_timeout=getattr(settings, "lock_timeout", None),
    )
    return AppState(settings=settings, task_store=store)
