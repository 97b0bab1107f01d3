"""
Task subsystem.

Components:
- task_models.py: data structures (Task, write/load policies)
- errors.py: storage error hierarchy
- task_store.py: SQLite-backed storage
- task_manager.py: in-memory task set and its reconciliation with the store
"""
