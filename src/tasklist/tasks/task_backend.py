# src/tasklist/tasks/task_backend.py

from __future__ import annotations

import contextlib
import json
import logging
import math
import os
import sqlite3
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from ..errors import StorageError
from .task_models import Task

logger = logging.getLogger(__name__)

JSON_FORMAT_VERSION = 1


def _task_from_record(rec: Mapping[str, Any]) -> Task:
    """Decode one stored record. Any malformed field is corruption."""
    try:
        raw_id = rec["id"]
        title = str(rec["title"]).strip()
        created_at = float(rec["created_at"])
        done_raw = rec["done"]
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed task record: {rec!r}") from e

    if not isinstance(raw_id, str):
        raise StorageError(f"Task record with non-string id: {rec!r}")
    task_id = raw_id
    if not task_id or not title:
        raise StorageError(f"Task record with empty id/title: {rec!r}")
    if not math.isfinite(created_at):
        raise StorageError(f"Task record with invalid created_at: {rec!r}")
    try:
        datetime.fromtimestamp(created_at).astimezone()
    except (OverflowError, OSError, ValueError) as e:
        raise StorageError(f"Task record with out-of-range created_at: {rec!r}") from e
    if isinstance(done_raw, bool):
        done = done_raw
    elif done_raw in (0, 1):
        done = bool(done_raw)
    else:
        raise StorageError(f"Task record with invalid done flag: {rec!r}")

    return Task(id=task_id, title=title, created_at=created_at, done=done)


def _check_unique_ids(tasks: Iterable[Task], location: Path) -> None:
    seen: set[str] = set()
    for t in tasks:
        if t.id in seen:
            raise StorageError(f"Duplicate task id {t.id} in {location}")
        seen.add(t.id)


class SqliteTaskBackend:
    """
    SQLite task backend.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Order is stored explicitly in `position`, never inferred from rowid.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._schema_ready = False
        try:
            self._ensure_schema()
        except StorageError:
            # Surface the failure on the first load/save instead of at wiring time.
            logger.warning("Task database %s is not usable yet.", self._db_path, exc_info=True)
        logger.info("SqliteTaskBackend ready db=%s schema=%s", self._db_path, self._schema_ready)

    @property
    def location(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open task database {self._db_path}: {e}") from e

        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    done INTEGER NOT NULL DEFAULT 0,
                    position INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskBackend migration: added column %s", name)

            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("done", "INTEGER NOT NULL DEFAULT 0")
            add_col("position", "INTEGER NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_position ON tasks(position)")

            conn.commit()
            self._schema_ready = True
        except sqlite3.Error as e:
            raise StorageError(f"Cannot prepare task database {self._db_path}: {e}") from e
        finally:
            conn.close()

    # ---- public API ----

    def load(self) -> list[Task]:
        if not self._schema_ready:
            self._ensure_schema()

        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open task database {self._db_path}: {e}") from e

        try:
            cur = conn.cursor()
            # rowid breaks ties for legacy rows that were migrated with position=0
            cur.execute(
                """
                SELECT id, title, created_at, done, position
                FROM tasks
                ORDER BY position ASC, rowid ASC
                """
            )
            rows = cur.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read tasks from {self._db_path}: {e}") from e
        finally:
            conn.close()

        tasks = [_task_from_record(dict(r)) for r in rows]
        _check_unique_ids(tasks, self._db_path)
        logger.debug("Loaded %d tasks from %s", len(tasks), self._db_path)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        """Rewrite the whole table in one transaction."""
        if not self._schema_ready:
            self._ensure_schema()

        params = [
            (t.id, t.title, float(t.created_at), int(t.done), pos)
            for pos, t in enumerate(tasks)
        ]

        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open task database {self._db_path}: {e}") from e

        try:
            # `with conn` commits on success and rolls back on any exception.
            with conn:
                conn.execute("DELETE FROM tasks")
                conn.executemany(
                    """
                    INSERT INTO tasks(id, title, created_at, done, position)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    params,
                )
        except (sqlite3.Error, ValueError) as e:
            raise StorageError(f"Cannot write tasks to {self._db_path}: {e}") from e
        finally:
            conn.close()

        logger.debug("Saved %d tasks to %s", len(params), self._db_path)


class JsonTaskBackend:
    """
    JSON file backend.

    Layout: {"version": 1, "tasks": [{"id", "title", "created_at", "done", "position"}, ...]}
    Writes go to a temp file first and are swapped in with os.replace.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonTaskBackend ready path=%s", self._path)

    @property
    def location(self) -> Path:
        return self._path

    def close(self) -> None:
        return

    def load(self) -> list[Task]:
        if not self._path.exists():
            return []

        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read tasks from {self._path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            raise StorageError(f"Unexpected task file layout in {self._path}")

        records = data["tasks"]
        for rec in records:
            if not isinstance(rec, dict):
                raise StorageError(f"Malformed task record in {self._path}: {rec!r}")

        try:
            records = sorted(records, key=lambda r: int(r.get("position", 0)))
        except (TypeError, ValueError) as e:
            raise StorageError(f"Invalid task position in {self._path}") from e

        tasks = [_task_from_record(r) for r in records]
        _check_unique_ids(tasks, self._path)
        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        doc = {
            "version": JSON_FORMAT_VERSION,
            "tasks": [
                {
                    "id": t.id,
                    "title": t.title,
                    "created_at": t.created_at,
                    "done": t.done,
                    "position": pos,
                }
                for pos, t in enumerate(tasks)
            ],
        }
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(doc, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, ValueError) as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageError(f"Cannot write tasks to {self._path}: {e}") from e

        logger.debug("Saved %d tasks to %s", len(tasks), self._path)
