# src/checklist/tasks/database.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_MEMORY = ":memory:"


class Database:
    """
    Process-wide SQLite handle.

    One connection for the whole process, created by the composition root and
    injected into the migrator and the DAL.

    Thread-safety:
    - the connection is opened with check_same_thread=False
    - every statement runs under a re-entrant lock, so worker threads
      (AsyncTaskStore) never interleave their statements
    - transaction() holds the lock for the whole BEGIN..COMMIT block
    """

    def __init__(
        self,
        db_path: str | Path = "checklist.sqlite3",
        *,
        journal_mode: str = "WAL",
        busy_timeout_seconds: float = 30.0,
    ) -> None:
        self._db_path = db_path if str(db_path) == _MEMORY else Path(db_path)
        if isinstance(self._db_path, Path):
            self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.RLock()
        # isolation_level=None: we issue BEGIN/COMMIT ourselves (DDL included).
        self._conn = sqlite3.connect(
            str(self._db_path),
            timeout=float(busy_timeout_seconds),
            isolation_level=None,
            check_same_thread=False,
        )
        self._conn.row_factory = sqlite3.Row
        self._configure_conn(journal_mode)
        logger.info("Database opened path=%s sqlite=%s", self._db_path, self.sqlite_version())

    def _configure_conn(self, journal_mode: str) -> None:
        mode = (journal_mode or "").strip().upper()
        if not mode or not mode.isalpha():
            return
        row = self._conn.execute(f"PRAGMA journal_mode={mode}").fetchone()
        logger.debug("journal_mode requested=%s effective=%s", mode, row[0] if row else None)

    @property
    def path(self) -> str | Path:
        return self._db_path

    @property
    def in_transaction(self) -> bool:
        with self._lock:
            return self._conn.in_transaction

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.info("Database closed path=%s", self._db_path)

    # ---- statements ----

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        with self._lock:
            return self._conn.execute(sql, params)

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Row | None:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[Database]:
        """
        Explicit write transaction.

        BEGIN IMMEDIATE takes the write lock up front, so a read inside the block
        sees the row the following write will replace. Any exception (a failed
        COMMIT included) rolls back and propagates. SQLite may already have
        rolled back on its own (disk full, I/O error); then there is nothing to undo
        and the original error is what the caller sees.
        """
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                yield self
                self._conn.execute("COMMIT")
            except BaseException:
                if self.in_transaction:
                    self._conn.execute("ROLLBACK")
                raise

    # ---- metadata ----

    def user_version(self) -> int:
        row = self.query_one("PRAGMA user_version")
        return int(row[0]) if row is not None and row[0] is not None else 0

    def set_user_version(self, version: int) -> None:
        # PRAGMA does not accept bound parameters.
        self.execute(f"PRAGMA user_version = {int(version)}")

    def sqlite_version(self) -> str:
        row = self.query_one("SELECT sqlite_version()")
        return str(row[0]) if row is not None else ""

    def table_columns(self, table: str) -> set[str]:
        return {row["name"] for row in self.query(f"PRAGMA table_info({table})")}
