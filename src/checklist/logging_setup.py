# src/checklist/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER_PREFIX = "checklist."
# Per-statement DAL/migration loggers: their DEBUG lines go to the file only.
STORE_LOGGER_PREFIX = "checklist.tasks."


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares stderr with the REPL prompt, so it only shows:
    - checklist records (store internals from INFO up)
    - everything else from ERROR up ('py.warnings' included)
    """

    def __init__(self, store_level: int = logging.INFO) -> None:
        super().__init__()
        self._store_level = store_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(STORE_LOGGER_PREFIX):
            return record.levelno >= self._store_level
        if record.name.startswith(APP_LOGGER_PREFIX):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/checklist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_file_name: str = "checklist.log",
) -> Path:
    """
    Configure logging with:
    - Console handler (stderr): filtered so the REPL stays readable
    - File handler: full logs, SQL-level DEBUG from the store included

    Call this ONCE, before the store is opened. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter(store_level=max(console_level, logging.INFO)))
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
