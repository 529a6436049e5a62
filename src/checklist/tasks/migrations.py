# src/checklist/tasks/migrations.py

from __future__ import annotations

"""
Schema migrator.

The store version lives in PRAGMA user_version. Steps move it forward one at a
time (0 -> 1 -> 2), each inside its own transaction that also writes the new
version, so the marker never runs ahead of the schema.

Every step is idempotent:
- CREATE ... IF NOT EXISTS
- PRAGMA table_info to detect missing columns before ALTER TABLE
- seed rows only into an empty table
"""

import logging
import sqlite3
import uuid
from collections.abc import Callable

from .database import Database
from .task_models import DEFAULT_LIST_ID, DEFAULT_LIST_NAME

logger = logging.getLogger(__name__)

TARGET_VERSION = 2

_SEED_TODOS = (
    ("Sample Todo from DB", 0, "2023-01-01T00:00:00Z"),
    ("Sample Todo 2 from DB", 1, "2023-01-02T00:00:00Z"),
    ("Sample Todo 3 from DB", 0, "2023-01-03T00:00:00Z"),
)


class MigrationError(RuntimeError):
    """The store could not be brought to TARGET_VERSION; startup must stop."""


class SchemaNotReadyError(RuntimeError):
    """A DAL was constructed over a store that has not been migrated."""


def current_version(db: Database) -> int:
    return db.user_version()


def _step_create_todos(db: Database) -> None:
    db.execute(
        """
        CREATE TABLE IF NOT EXISTS todos (
            id TEXT PRIMARY KEY,
            text TEXT NOT NULL,
            done INTEGER NOT NULL,
            createdAt TEXT NOT NULL
        )
        """
    )

    row = db.query_one("SELECT COUNT(*) FROM todos")
    if row is not None and int(row[0]) > 0:
        logger.info("Migration 0->1: todos already populated, skipping seed")
        return

    for text, done, created_at in _SEED_TODOS:
        db.execute(
            "INSERT INTO todos (id, text, done, createdAt) VALUES (?, ?, ?, ?)",
            (str(uuid.uuid4()), text, done, created_at),
        )
    logger.info("Migration 0->1: seeded %d sample todos", len(_SEED_TODOS))


def _add_column(db: Database, existing: set[str], name: str, decl: str) -> None:
    if name in existing:
        logger.debug("Migration 1->2: column todos.%s already present", name)
        return
    try:
        db.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
    except sqlite3.OperationalError as exc:
        if "duplicate column" not in str(exc).lower():
            raise
        logger.warning("Migration 1->2: column todos.%s already exists (%s)", name, exc)
        return
    existing.add(name)
    logger.info("Migration 1->2: added column todos.%s", name)


def _step_add_lists(db: Database) -> None:
    db.execute(
        """
        CREATE TABLE IF NOT EXISTS todo_lists (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        )
        """
    )

    cols = db.table_columns("todos")
    _add_column(db, cols, "listId", "TEXT")
    _add_column(db, cols, "notes", "TEXT")
    _add_column(db, cols, "dueDate", "TEXT")

    cur = db.execute(
        "INSERT OR IGNORE INTO todo_lists (id, name) VALUES (?, ?)",
        (DEFAULT_LIST_ID, DEFAULT_LIST_NAME),
    )
    if cur.rowcount == 1:
        logger.info("Migration 1->2: created list %s", DEFAULT_LIST_ID)

    cur = db.execute("UPDATE todos SET listId = ? WHERE listId IS NULL", (DEFAULT_LIST_ID,))
    logger.info("Migration 1->2: backfilled listId on %d todos", max(cur.rowcount, 0))

    db.execute("CREATE INDEX IF NOT EXISTS idx_todos_list ON todos(listId)")


# Step N upgrades the store from version N to N + 1.
_STEPS: dict[int, Callable[[Database], None]] = {
    0: _step_create_todos,
    1: _step_add_lists,
}


def migrate(db: Database) -> int:
    """
    Bring the store up to TARGET_VERSION and return the final version.

    Safe to call on every start: at TARGET_VERSION it does nothing.
    Raises MigrationError on any storage failure or on a store newer than
    this application.
    """
    version = current_version(db)

    if version == TARGET_VERSION:
        logger.debug("Schema at version %s, nothing to migrate", version)
        return version

    if version > TARGET_VERSION:
        raise MigrationError(
            f"store is at version {version}, newer than supported version {TARGET_VERSION}"
        )

    logger.info("Migrating schema from version %s to %s", version, TARGET_VERSION)

    while version < TARGET_VERSION:
        step = _STEPS[version]
        try:
            with db.transaction():
                step(db)
                db.set_user_version(version + 1)
        except sqlite3.Error as exc:
            raise MigrationError(
                f"migration step {version}->{version + 1} failed: {exc}"
            ) from exc
        version += 1
        logger.info("Schema now at version %s", version)

    return version
