# src/checklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the front-ends.

Command handlers and the async facade depend on this Protocol instead of the
SQLite TaskStore, so tests can hand them an in-memory fake.
"""

from datetime import datetime
from typing import Any, Protocol

from ..tasks.task_models import Task, TodoList


class TaskRepo(Protocol):
    # Reads
    def get_all_tasks(self) -> list[Task]: ...
    def get_tasks_by_list(self, list_id: str | None = None) -> list[Task]: ...
    def get_task(self, task_id: str) -> Task | None: ...
    def get_all_lists(self) -> list[TodoList]: ...
    def get_list(self, list_id: str) -> TodoList | None: ...
    def count_tasks(self) -> int: ...

    # Writes
    def create_list(self, name: str) -> TodoList: ...
    def create_task(
            self,
            text: str,
            list_id: str = ...,
            notes: str | None = None,
            due_date: datetime | None = None,
    ) -> Task: ...
    def update_task_status(self, task_id: str, done: bool) -> Task | None: ...
    def update_task(
            self,
            task_id: str,
            *,
            text: str | None = None,
            notes: str | None | Any = ...,
            due_date: datetime | None | Any = ...,
            list_id: str | None = None,
    ) -> Task | None: ...

    # Diagnostics (display only)
    def get_storage_version(self) -> int: ...
    def get_engine_version(self) -> str: ...
