# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist.config import DEFAULT_DATE_FORMAT, Settings

_VARS = (
    "TASKLIST_APP_NAME",
    "TASKLIST_LOG_LEVEL",
    "TASKLIST_BACKEND",
    "TASKLIST_DATA_DIR",
    "TASKLIST_DB_PATH",
    "TASKLIST_JSON_PATH",
    "TASKLIST_LOCK_TIMEOUT",
    "TASKLIST_DATE_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "tasklist"
    assert s.backend == "sqlite"
    assert s.data_dir == Path(".local/tasklist")
    assert s.tasks_db_path == Path(".local/tasklist/tasks.sqlite3")
    assert s.tasks_json_path == Path(".local/tasklist/tasks.json")
    assert s.lock_timeout is None
    assert s.date_format == DEFAULT_DATE_FORMAT


def test_paths_follow_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKLIST_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKLIST_JSON_PATH", str(tmp_path / "other.json"))
    s = Settings.from_env()
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.tasks_json_path == tmp_path / "other.json"


def test_backend_choice(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKLIST_BACKEND", " JSON ")
    assert Settings.from_env().backend == "json"

    monkeypatch.setenv("TASKLIST_BACKEND", "postgres")
    assert Settings.from_env().backend == "sqlite"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("0.5", 0.5), ("0", 0.0), ("", None), ("soon", None), ("-1", None)],
)
def test_lock_timeout(monkeypatch: pytest.MonkeyPatch, raw: str, expected: float | None) -> None:
    monkeypatch.setenv("TASKLIST_LOCK_TIMEOUT", raw)
    assert Settings.from_env().lock_timeout == expected
