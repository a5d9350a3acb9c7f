# src/tasklist/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything a presentation layer needs, passed explicitly.

    There is no module-level store: whoever builds the state owns the TaskStore.
    """

    # Settings-like object (config.Settings or a SimpleNamespace in tests).
    settings: Any
    task_store: TaskStore

    # Serializes connector work (console loop today, more connectors later).
    lock: threading.Lock = field(default_factory=threading.Lock)
