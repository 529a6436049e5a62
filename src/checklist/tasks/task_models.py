# src/checklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

DEFAULT_LIST_ID = "default-list"
DEFAULT_LIST_NAME = "Todas as Tarefas"


class TaskFilter(StrEnum):
    """Status filter of the task view ("Todos / Pendentes / Concluídos")."""

    ALL = "all"
    PENDING = "pending"
    DONE = "done"

    @classmethod
    def from_user(cls, raw: str | None) -> TaskFilter | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True)
class Task:
    id: str
    text: str
    done: bool
    created_at: datetime
    list_id: str

    notes: str | None = None
    due_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class TodoList:
    id: str
    name: str


def format_timestamp(value: datetime) -> str:
    """
    Encode a datetime the way it is stored: UTC, millisecond precision, "Z" suffix.

    Naive values are taken as local time.
    """
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(raw: str | None) -> datetime | None:
    """Decode a stored ISO-8601 string; empty -> None, missing offset -> UTC."""
    if not raw:
        return None
    value = datetime.fromisoformat(str(raw))
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
