# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from checklist.cli.bootstrap import create_initial_state
from checklist.core.state import AppState
from checklist.tasks.database import Database
from checklist.tasks.migrations import migrate
from checklist.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="checklist-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "checklist.sqlite3",
        log_dir=tmp_path / "logs",
        journal_mode="WAL",
        busy_timeout_seconds=5.0,
    )


@pytest.fixture()
def raw_db(tmp_path: Path) -> Iterator[Database]:
    """An un-migrated store (user_version 0)."""
    db = Database(tmp_path / "raw.sqlite3")
    yield db
    db.close()


@pytest.fixture()
def db(tmp_path: Path) -> Iterator[Database]:
    database = Database(tmp_path / "checklist.sqlite3")
    migrate(database)
    yield database
    database.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(db: Database, clock: FakeClock) -> TaskStore:
    return TaskStore(db, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace) -> Iterator[AppState]:
    """
    AppState built by the real composition root.

    NOTE: We keep the real SQLite store here because migration + DAL wiring is
    part of what we want to test.
    """
    app_state = create_initial_state(settings=settings)
    yield app_state
    if app_state.db is not None:
        app_state.db.close()


@pytest.fixture()
def fake_state(settings: SimpleNamespace) -> AppState:
    return AppState(settings=settings, tasks=FakeTaskRepo())
