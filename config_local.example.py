# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env`. Only the names below are honoured.
"""

# Example: keep tasks in a human-readable JSON file instead of SQLite
# BACKEND = "json"

# Example: shorter dates in /list
# DATE_FORMAT = "%Y-%m-%d %H:%M"
