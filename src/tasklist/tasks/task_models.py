# src/tasklist/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do item.

    Instances are immutable: the store swaps in a new value (dataclasses.replace)
    on rename/toggle, which keeps rollback a matter of restoring the old list.
    """

    title: str
    id: str = field(default_factory=new_task_id)
    created_at: float = field(default_factory=time.time)
    done: bool = False
