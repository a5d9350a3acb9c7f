# src/tasklist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a local default.
- Settings are passed around explicitly (tests build their own).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKLIST"

BACKENDS = ("sqlite", "json")

DEFAULT_DATE_FORMAT = "%A, %B %d, %Y at %H:%M"

logger = logging.getLogger(__name__)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env never overrides variables already set in the process environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float_or_none(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    val = raw.strip().lower()
    if val not in choices:
        logger.warning("Ignoring %s=%r (expected one of %s).", name, raw, ", ".join(choices))
        return default
    return val


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    backend: str
    data_dir: Path
    tasks_db_path: Path
    tasks_json_path: Path

    # ---- Store behaviour ----
    lock_timeout: Optional[float]

    # ---- Presentation ----
    date_format: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasklist").strip() or "tasklist"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        backend = _env_choice(_k("BACKEND"), BACKENDS, "sqlite")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasklist"))
        tasks_db_path = _env_path(_k("DB_PATH"), data_dir / "tasks.sqlite3")
        tasks_json_path = _env_path(_k("JSON_PATH"), data_dir / "tasks.json")

        lock_timeout = _env_float_or_none(_k("LOCK_TIMEOUT"), None)
        if lock_timeout is not None and lock_timeout < 0:
            lock_timeout = None

        date_format = _env(_k("DATE_FORMAT"), DEFAULT_DATE_FORMAT) or DEFAULT_DATE_FORMAT

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend=backend,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            tasks_json_path=tasks_json_path,
            lock_timeout=lock_timeout,
            date_format=date_format,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env; use config_local.py only for safe overrides.
try:
    import config_local as _config_local  # type: ignore
except ImportError:
    _config_local = None

if _config_local is not None:
    # Simple overrides for selected names. Keep it explicit.
    if hasattr(_config_local, "BACKEND") and str(_config_local.BACKEND) in BACKENDS:
        object.__setattr__(SETTINGS, "backend", str(_config_local.BACKEND))  # type: ignore[misc]
    if hasattr(_config_local, "DATE_FORMAT"):
        object.__setattr__(SETTINGS, "date_format", str(_config_local.DATE_FORMAT))  # type: ignore[misc]


def get_settings() -> Settings:
    return SETTINGS
