# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKLIST_APP_NAME": "App display name (default: tasklist).",
    "TASKLIST_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Storage
    "TASKLIST_BACKEND": "Storage backend: sqlite | json (default: sqlite).",
    "TASKLIST_DATA_DIR": "Local data + log directory (default: .local/tasklist).",
    "TASKLIST_DB_PATH": "SQLite file (default: <data_dir>/tasks.sqlite3).",
    "TASKLIST_JSON_PATH": "JSON file (default: <data_dir>/tasks.json).",
    # Store behaviour
    "TASKLIST_LOCK_TIMEOUT": (
        "Seconds to wait for another in-flight operation before failing with BusyError "
        "(default: empty = wait forever)."
    ),
    # Presentation
    "TASKLIST_DATE_FORMAT": "strftime format for created-at dates (default: %A, %B %d, %Y at %H:%M).",
}
