# src/checklist/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from .database import Database
from .migrations import TARGET_VERSION, SchemaNotReadyError, current_version
from .task_models import (
    DEFAULT_LIST_ID,
    Task,
    TodoList,
    format_timestamp,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

UNSET: Any = object()

_TASK_COLUMNS = "id, text, done, createdAt, listId, notes, dueDate"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


class TaskStore:
    """
    Data access layer over the todos / todo_lists tables.

    The Database handle is injected and must already be migrated. No validation
    happens here: callers trim and check text/names before calling in.
    Storage errors (sqlite3.Error) propagate unchanged.
    """

    def __init__(
        self,
        db: Database,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        version = current_version(db)
        if version != TARGET_VERSION:
            raise SchemaNotReadyError(
                f"store is at version {version}, expected {TARGET_VERSION}; run migrate() first"
            )
        self._db = db
        self._clock = clock
        self._id_factory = id_factory
        logger.info("TaskStore ready db=%s total=%s", db.path, self.count_tasks())

    # ---- low-level helpers ----

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        created_at = parse_timestamp(row["createdAt"])
        if created_at is None:
            raise ValueError(f"todo {row['id']} has no createdAt")
        return Task(
            id=str(row["id"]),
            text=str(row["text"]),
            done=bool(row["done"]),
            created_at=created_at,
            list_id=row["listId"] or DEFAULT_LIST_ID,
            notes=row["notes"] or None,
            due_date=parse_timestamp(row["dueDate"]),
        )

    @staticmethod
    def _row_to_list(row: sqlite3.Row) -> TodoList:
        return TodoList(id=str(row["id"]), name=str(row["name"]))

    def _fetch_task(self, task_id: str) -> Task | None:
        row = self._db.query_one(f"SELECT {_TASK_COLUMNS} FROM todos WHERE id = ?", (task_id,))
        return self._row_to_task(row) if row else None

    # ---- reads ----

    def count_tasks(self) -> int:
        row = self._db.query_one("SELECT COUNT(*) FROM todos")
        return int(row[0]) if row else 0

    def get_all_tasks(self) -> list[Task]:
        rows = self._db.query(f"SELECT {_TASK_COLUMNS} FROM todos")
        return [self._row_to_task(r) for r in rows]

    def get_tasks_by_list(self, list_id: str | None = None) -> list[Task]:
        """Tasks of one list; no list_id means every task."""
        if not list_id:
            return self.get_all_tasks()
        rows = self._db.query(
            f"SELECT {_TASK_COLUMNS} FROM todos WHERE listId = ?",
            (list_id,),
        )
        return [self._row_to_task(r) for r in rows]

    def get_task(self, task_id: str) -> Task | None:
        return self._fetch_task(task_id)

    def get_all_lists(self) -> list[TodoList]:
        rows = self._db.query("SELECT id, name FROM todo_lists ORDER BY name ASC")
        return [self._row_to_list(r) for r in rows]

    def get_list(self, list_id: str) -> TodoList | None:
        row = self._db.query_one("SELECT id, name FROM todo_lists WHERE id = ?", (list_id,))
        return self._row_to_list(row) if row else None

    # ---- writes ----

    def create_list(self, name: str) -> TodoList:
        list_id = self._id_factory()
        with self._db.transaction():
            self._db.execute("INSERT INTO todo_lists (id, name) VALUES (?, ?)", (list_id, name))
            row = self._db.query_one("SELECT id, name FROM todo_lists WHERE id = ?", (list_id,))
        if row is None:
            raise RuntimeError(f"list {list_id} vanished after insert")
        logger.debug("List created id=%s name=%s", list_id, name)
        return self._row_to_list(row)

    def create_task(
        self,
        text: str,
        list_id: str = DEFAULT_LIST_ID,
        notes: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        task_id = self._id_factory()
        created_at = format_timestamp(self._clock())
        due_str = format_timestamp(due_date) if due_date is not None else None

        with self._db.transaction():
            self._db.execute(
                """
                INSERT INTO todos (id, text, done, createdAt, listId, notes, dueDate)
                VALUES (?, ?, 0, ?, ?, ?, ?)
                """,
                (task_id, text, created_at, list_id, notes or None, due_str),
            )
            task = self._fetch_task(task_id)
        if task is None:
            raise RuntimeError(f"todo {task_id} vanished after insert")
        logger.debug("Task created id=%s list=%s due=%s", task_id, list_id, due_str)
        return task

    def update_task_status(self, task_id: str, done: bool) -> Task | None:
        """Set the completion flag; None when no task has this id."""
        with self._db.transaction():
            cur = self._db.execute(
                "UPDATE todos SET done = ? WHERE id = ?",
                (1 if done else 0, task_id),
            )
            if cur.rowcount == 0:
                return None
            task = self._fetch_task(task_id)
        logger.debug("Task status id=%s done=%s", task_id, done)
        return task

    def update_task(
        self,
        task_id: str,
        *,
        text: str | None = None,
        notes: str | None | Any = UNSET,
        due_date: datetime | None | Any = UNSET,
        list_id: str | None = None,
    ) -> Task | None:
        """
        Partial update.

        Omitted fields keep their stored values. text/list_id cannot be null, so
        None means "omitted" for them; notes/due_date accept None to clear.
        The read and the write share one transaction.
        """
        with self._db.transaction():
            current = self._fetch_task(task_id)
            if current is None:
                return None

            if text is not None:
                current.text = text
            if list_id is not None:
                current.list_id = list_id
            if notes is not UNSET:
                current.notes = notes or None
            if due_date is not UNSET:
                current.due_date = due_date

            self._db.execute(
                """
                UPDATE todos
                SET text = ?, notes = ?, dueDate = ?, listId = ?
                WHERE id = ?
                """,
                (
                    current.text,
                    current.notes,
                    format_timestamp(current.due_date) if current.due_date else None,
                    current.list_id,
                    task_id,
                ),
            )
            task = self._fetch_task(task_id)
        logger.debug("Task updated id=%s", task_id)
        return task

    # ---- diagnostics ----

    def get_storage_version(self) -> int:
        return current_version(self._db)

    def get_engine_version(self) -> str:
        return self._db.sqlite_version()
