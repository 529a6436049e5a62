# tests/fakes.py

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

from checklist.tasks.task_models import DEFAULT_LIST_ID, DEFAULT_LIST_NAME, Task, TodoList
from checklist.tasks.task_store import UNSET


class FakeClock:
    """Deterministic clock: returns `now` until advanced."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTaskRepo:
    """
    In-memory TaskRepo used for command handler tests.

    This avoids SQLite and keeps the tests about front-end behavior:
    validation, ref resolution, view state. Every call is recorded in `calls`.
    """

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.clock = clock or FakeClock()
        self.calls: list[str] = []
        self.tasks: dict[str, Task] = {}
        self.lists: dict[str, TodoList] = {
            DEFAULT_LIST_ID: TodoList(id=DEFAULT_LIST_ID, name=DEFAULT_LIST_NAME)
        }

    # reads

    def get_all_tasks(self) -> list[Task]:
        self.calls.append("get_all_tasks")
        return [replace(t) for t in self.tasks.values()]

    def get_tasks_by_list(self, list_id: str | None = None) -> list[Task]:
        self.calls.append("get_tasks_by_list")
        return [replace(t) for t in self.tasks.values() if not list_id or t.list_id == list_id]

    def get_task(self, task_id: str) -> Task | None:
        self.calls.append("get_task")
        t = self.tasks.get(task_id)
        return replace(t) if t else None

    def get_all_lists(self) -> list[TodoList]:
        self.calls.append("get_all_lists")
        return sorted(self.lists.values(), key=lambda x: x.name)

    def get_list(self, list_id: str) -> TodoList | None:
        self.calls.append("get_list")
        return self.lists.get(list_id)

    def count_tasks(self) -> int:
        return len(self.tasks)

    # writes

    def create_list(self, name: str) -> TodoList:
        self.calls.append("create_list")
        lst = TodoList(id=str(uuid.uuid4()), name=name)
        self.lists[lst.id] = lst
        return lst

    def create_task(
        self,
        text: str,
        list_id: str = DEFAULT_LIST_ID,
        notes: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        self.calls.append("create_task")
        task = Task(
            id=str(uuid.uuid4()),
            text=text,
            done=False,
            created_at=self.clock(),
            list_id=list_id,
            notes=notes or None,
            due_date=due_date,
        )
        self.tasks[task.id] = task
        self.clock.advance(seconds=1)
        return replace(task)

    def update_task_status(self, task_id: str, done: bool) -> Task | None:
        self.calls.append("update_task_status")
        t = self.tasks.get(task_id)
        if t is None:
            return None
        self.tasks[task_id] = replace(t, done=done)
        return replace(self.tasks[task_id])

    def update_task(
        self,
        task_id: str,
        *,
        text: str | None = None,
        notes: Any = UNSET,
        due_date: Any = UNSET,
        list_id: str | None = None,
    ) -> Task | None:
        self.calls.append("update_task")
        t = self.tasks.get(task_id)
        if t is None:
            return None
        self.tasks[task_id] = replace(
            t,
            text=t.text if text is None else text,
            list_id=t.list_id if list_id is None else list_id,
            notes=t.notes if notes is UNSET else (notes or None),
            due_date=t.due_date if due_date is UNSET else due_date,
        )
        return replace(self.tasks[task_id])

    # diagnostics

    def get_storage_version(self) -> int:
        return 2

    def get_engine_version(self) -> str:
        return "fake"
