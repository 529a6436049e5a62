"""
Task subsystem.

Components:
- database.py: the process-wide SQLite handle (locking, transactions, user_version)
- migrations.py: forward-only schema migrator (version 0 -> 1 -> 2)
- task_models.py: data structures (Task, TodoList, TaskFilter) and timestamp codec
- task_store.py: data access layer over todos / todo_lists
- async_store.py: awaitable facade for event-loop hosts
"""
