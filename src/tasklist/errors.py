# src/tasklist/errors.py

"""
Error taxonomy shared by the store, the backends and the presentation layer.

Every mutation failure leaves the in-memory collection unchanged, so callers can
render the error and keep going.
"""

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for everything the task store raises on purpose."""


class ValidationError(TaskStoreError):
    """Bad input (e.g. an empty title)."""


class NotFoundError(TaskStoreError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class StorageError(TaskStoreError):
    """Durable read or write failed (unreadable file, locked database, disk full...)."""


class BusyError(TaskStoreError):
    """Another mutation is in flight and the configured lock timeout expired."""
