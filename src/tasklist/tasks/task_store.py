# src/tasklist/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import replace
from pathlib import Path

from ..core.ports import TaskBackend
from ..errors import BusyError, NotFoundError, StorageError, ValidationError
from .task_models import Task, new_task_id

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Owner of the ordered task list.

    Every mutation follows the same shape:
    - build the next list from the current one (the current list is never mutated)
    - ask the backend to persist it
    - swap it in only after the write succeeded

    So a failed write never shows up in memory, and lookups always go by id.

    Concurrency:
    - calls are serialized with a lock
    - lock_timeout=None queues callers; a number makes late callers fail with BusyError
    """

    def __init__(
        self,
        backend: TaskBackend,
        *,
        lock_timeout: float | None = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._backend = backend
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._clock = clock
        self._id_factory = id_factory
        self._tasks: list[Task] = []
        self._loaded = False
        logger.info("TaskStore ready backend=%s", backend.location)

    @property
    def location(self) -> Path | str:
        return self._backend.location

    def close(self) -> None:
        self._backend.close()

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        if self._lock_timeout is None:
            acquired = self._lock.acquire()
        else:
            acquired = self._lock.acquire(timeout=max(0.0, self._lock_timeout))
        if not acquired:
            raise BusyError("Task store is busy with another operation.")
        try:
            yield
        finally:
            self._lock.release()

    def _load_locked(self) -> list[Task]:
        try:
            tasks = self._backend.load()
        except StorageError:
            logger.exception("Failed to load tasks from %s", self._backend.location)
            raise
        self._tasks = tasks
        self._loaded = True
        return list(tasks)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._load_locked()

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFoundError(task_id)

    @staticmethod
    def _clean_title(title: str) -> str:
        clean = (title or "").strip()
        if not clean:
            raise ValidationError("Task title must not be empty.")
        try:
            clean.encode("utf-8")
        except UnicodeEncodeError:
            raise ValidationError("Task title is not valid text (undecodable input bytes).") from None
        return clean

    def _commit(self, new_tasks: list[Task], action: str) -> None:
        """Persist `new_tasks`; adopt them only if the write went through."""
        try:
            self._backend.save(new_tasks)
        except StorageError:
            logger.exception("Failed to persist %s; in-memory list left unchanged.", action)
            raise
        self._tasks = new_tasks

    # ---- public API ----

    def load_all(self) -> list[Task]:
        """
        Re-read the persisted order and make it the in-memory list.

        Raises StorageError if the backend is unreadable; the previous list is kept.
        """
        with self._locked():
            return self._load_locked()

    def list_tasks(self) -> list[Task]:
        """Current in-memory list (loads lazily on first use)."""
        with self._locked():
            self._ensure_loaded()
            return list(self._tasks)

    def count(self) -> int:
        with self._locked():
            self._ensure_loaded()
            return len(self._tasks)

    def get(self, task_id: str) -> Task:
        with self._locked():
            self._ensure_loaded()
            return self._tasks[self._index_of(task_id)]

    def index_of(self, task_id: str) -> int:
        with self._locked():
            self._ensure_loaded()
            return self._index_of(task_id)

    def add(self, title: str) -> Task:
        clean = self._clean_title(title)
        with self._locked():
            self._ensure_loaded()
            task_id = self._id_factory()
            if any(t.id == task_id for t in self._tasks):
                raise StorageError(f"Generated task id collides with an existing task: {task_id}")
            task = Task(id=task_id, title=clean, created_at=self._clock(), done=False)
            self._commit([*self._tasks, task], f"add id={task.id}")
        logger.info("Task added id=%s", task.id)
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        return task

    def rename(self, task_id: str, new_title: str) -> None:
        clean = self._clean_title(new_title)
        with self._locked():
            self._ensure_loaded()
            idx = self._index_of(task_id)
            new_tasks = list(self._tasks)
            new_tasks[idx] = replace(new_tasks[idx], title=clean)
            self._commit(new_tasks, f"rename id={task_id}")
        logger.info("Task renamed id=%s", task_id)

    def delete(self, task_id: str) -> None:
        with self._locked():
            self._ensure_loaded()
            idx = self._index_of(task_id)
            new_tasks = self._tasks[:idx] + self._tasks[idx + 1 :]
            self._commit(new_tasks, f"delete id={task_id}")
        logger.info("Task deleted id=%s position=%s", task_id, idx)

    def move(self, task_id: str, to_index: int) -> None:
        """Relocate a task; `to_index` is clamped to [0, count-1]."""
        with self._locked():
            self._ensure_loaded()
            src = self._index_of(task_id)
            dst = max(0, min(len(self._tasks) - 1, int(to_index)))
            if dst == src:
                logger.debug("Task move is a no-op id=%s position=%s", task_id, src)
                return
            new_tasks = list(self._tasks)
            task = new_tasks.pop(src)
            new_tasks.insert(dst, task)
            self._commit(new_tasks, f"move id={task_id}")
        logger.info("Task moved id=%s from=%s to=%s", task_id, src, dst)

    def toggle_done(self, task_id: str) -> Task:
        with self._locked():
            self._ensure_loaded()
            idx = self._index_of(task_id)
            new_tasks = list(self._tasks)
            updated = replace(new_tasks[idx], done=not new_tasks[idx].done)
            new_tasks[idx] = updated
            self._commit(new_tasks, f"toggle id={task_id}")
        logger.info("Task toggled id=%s done=%s", task_id, updated.done)
        return updated
