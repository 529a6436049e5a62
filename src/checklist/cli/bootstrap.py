# src/checklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the single process-wide Database handle,
- runs the schema migrator (nothing touches the DAL before it finishes),
- wires the TaskStore into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.database import Database
from ..tasks.migrations import migrate
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def open_database(settings) -> Database:
    """Open the store and bring its schema to the current version (MigrationError propagates)."""
    db = Database(
        settings.db_path,
        journal_mode=getattr(settings, "journal_mode", "WAL"),
        busy_timeout_seconds=getattr(settings, "busy_timeout_seconds", 30.0),
    )
    try:
        version = migrate(db)
    except Exception:
        db.close()
        raise
    logger.info("Store ready path=%s schema_version=%s", settings.db_path, version)
    return db


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    db = open_database(settings)
    return AppState(settings=settings, tasks=TaskStore(db), db=db)
