"""
Task subsystem.

Components:
- task_models.py: data structures (Task)
- task_store.py: TaskStore, the single owner of the ordered list
- task_backend.py: SQLite / JSON persistence behind the TaskBackend port
- task_api.py: small high-level helpers used by presentation layers
"""
