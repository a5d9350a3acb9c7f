# src/tasklist/tasks/task_api.py

"""
Small high-level helpers shared by presentation layers (console today).

They translate between what a user types/sees (1-based rows, short ids,
formatted dates) and what the store understands (ids, 0-based indices).
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..config import DEFAULT_DATE_FORMAT
from ..errors import BusyError, NotFoundError, StorageError, TaskStoreError, ValidationError
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

MIN_ID_PREFIX = 4
DONE_MARK = "[x]"
OPEN_MARK = "[ ]"


def load_tasks_or_empty(store: TaskStore) -> tuple[list[Task], StorageError | None]:
    """
    Reload the list for display.

    An unreadable store degrades to an empty list plus the error, never a crash.
    """
    try:
        return store.load_all(), None
    except StorageError as e:
        logger.error("Showing an empty task list: %s", e)
        return [], e


def resolve_task_ref(tasks: list[Task], ref: str) -> Task:
    """
    Map a user reference onto a task from the list the user is looking at.

    Accepts a 1-based row number, a full id, or a unique id prefix
    (at least MIN_ID_PREFIX chars). Row numbers win when both match.
    """
    ref = (ref or "").strip()
    if not ref:
        raise ValidationError("Missing task reference (row number or id).")

    # Short ids can be all digits too; a row miss falls through to id matching.
    if ref.isdigit():
        row = int(ref)
        if 1 <= row <= len(tasks):
            return tasks[row - 1]

    for t in tasks:
        if t.id == ref:
            return t

    if len(ref) >= MIN_ID_PREFIX:
        matches = [t for t in tasks if t.id.startswith(ref)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise ValidationError(f"Ambiguous id prefix: {ref}")

    raise NotFoundError(ref)


def format_created_at(ts: float, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime(date_format)


def format_task_line(row: int, task: Task, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    mark = DONE_MARK if task.done else OPEN_MARK
    return (
        f"{row:>3}. {mark} {task.title}\n"
        f"        {format_created_at(task.created_at, date_format)}  (id {task.id[:8]})"
    )


def format_task_list(tasks: list[Task], date_format: str = DEFAULT_DATE_FORMAT) -> str:
    if not tasks:
        return "Task list is empty. Add one with /add <title>."
    done = sum(1 for t in tasks if t.done)
    lines = [f"Task List ({len(tasks)} tasks, {done} done):"]
    for row, t in enumerate(tasks, start=1):
        lines.append(format_task_line(row, t, date_format))
    return "\n".join(lines)


def friendly_store_error_message(err: Exception) -> str:
    if isinstance(err, ValidationError):
        return f"Invalid input: {err}"
    if isinstance(err, NotFoundError):
        return f"No such task: {err.task_id}. Use /list to see current rows."
    if isinstance(err, BusyError):
        return "The task list is busy right now, try again in a moment."
    if isinstance(err, StorageError):
        return f"Could not access task storage, nothing was changed. ({err})"
    if isinstance(err, TaskStoreError):
        return str(err) or "Task store error."
    return str(err).strip() or "Unexpected error."
