# src/checklist/core/views.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ..tasks.task_models import Task, TaskFilter


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    if task_filter == TaskFilter.PENDING:
        return [t for t in tasks if not t.done]
    if task_filter == TaskFilter.DONE:
        return [t for t in tasks if t.done]
    return list(tasks)


def _sort_key(task: Task) -> tuple[bool, bool, datetime | float, float]:
    # Missing due dates sort last; the float stand-in never gets compared to a datetime
    # because the preceding flag already separates the two groups.
    due: datetime | float = task.due_date if task.due_date is not None else 0.0
    return (task.done, task.due_date is None, due, -task.created_at.timestamp())


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """
    Canonical task ordering used by every view:
    - incomplete before done
    - due date ascending, tasks without a due date last
    - newest first
    """
    return sorted(tasks, key=_sort_key)


def visible_tasks(tasks: Iterable[Task], task_filter: TaskFilter = TaskFilter.ALL) -> list[Task]:
    return sort_tasks(filter_tasks(tasks, task_filter))
