# src/checklist/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.database import Database
from ..tasks.task_models import TaskFilter
from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: object

    tasks: TaskRepo
    db: Database | None = None

    # Console view selection: None means "all lists".
    active_list_id: str | None = None
    task_filter: TaskFilter = TaskFilter.ALL

    # Task ids in the order /ls printed them, so "/done 2" can resolve positions.
    last_listing: list[str] = field(default_factory=list)
