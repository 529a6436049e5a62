# src/checklist/connectors/console_connector.py

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from ..cli.commands import cmd_add, cmd_ls
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str:
    """
    One REPL turn: slash commands go to the registry, plain text becomes a new task.

    Storage faults are reported to the user; the in-memory view state stays as it was.
    """
    try:
        reply = command_registry.handle(state, line)
        if reply is None:
            reply = cmd_add(state, line.split())
    except sqlite3.Error:
        logger.exception("Storage error while handling input: %r", line)
        reply = "Storage error: the change was not saved."
    return reply


def run_console_loop(state: AppState) -> None:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "checklist"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    _print_ts(cmd_ls(state, []))

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        _print_ts(handle_line(state, user_input))
