# src/checklist/tasks/async_store.py

from __future__ import annotations

"""
Awaitable facade over a TaskRepo.

Each call runs the synchronous operation in a worker thread, so an event-loop
host suspends at the call site while SQLite works. The Database lock
serializes the worker threads; update_task keeps its read and write inside
one transaction, so concurrent partial updates of one task do not lose fields.
"""

import asyncio
from datetime import datetime
from typing import Any

from ..core.ports import TaskRepo
from .task_models import DEFAULT_LIST_ID, Task, TodoList
from .task_store import UNSET


class AsyncTaskStore:
    def __init__(self, repo: TaskRepo) -> None:
        self._repo = repo

    async def get_all_tasks(self) -> list[Task]:
        return await asyncio.to_thread(self._repo.get_all_tasks)

    async def get_tasks_by_list(self, list_id: str | None = None) -> list[Task]:
        return await asyncio.to_thread(self._repo.get_tasks_by_list, list_id)

    async def get_task(self, task_id: str) -> Task | None:
        return await asyncio.to_thread(self._repo.get_task, task_id)

    async def get_all_lists(self) -> list[TodoList]:
        return await asyncio.to_thread(self._repo.get_all_lists)

    async def get_list(self, list_id: str) -> TodoList | None:
        return await asyncio.to_thread(self._repo.get_list, list_id)

    async def create_list(self, name: str) -> TodoList:
        return await asyncio.to_thread(self._repo.create_list, name)

    async def create_task(
        self,
        text: str,
        list_id: str = DEFAULT_LIST_ID,
        notes: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        return await asyncio.to_thread(self._repo.create_task, text, list_id, notes, due_date)

    async def update_task_status(self, task_id: str, done: bool) -> Task | None:
        return await asyncio.to_thread(self._repo.update_task_status, task_id, done)

    async def update_task(
        self,
        task_id: str,
        *,
        text: str | None = None,
        notes: str | None | Any = UNSET,
        due_date: datetime | None | Any = UNSET,
        list_id: str | None = None,
    ) -> Task | None:
        def _run() -> Task | None:
            return self._repo.update_task(
                task_id, text=text, notes=notes, due_date=due_date, list_id=list_id
            )

        return await asyncio.to_thread(_run)

    async def count_tasks(self) -> int:
        return await asyncio.to_thread(self._repo.count_tasks)

    async def get_storage_version(self) -> int:
        return await asyncio.to_thread(self._repo.get_storage_version)

    async def get_engine_version(self) -> str:
        return await asyncio.to_thread(self._repo.get_engine_version)
