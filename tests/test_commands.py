# tests/test_commands.py

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

import pytest

from checklist.cli.commands import CommandRegistry, parse_due_date, registry, split_add_args
from checklist.connectors.console_connector import handle_line
from checklist.core.state import AppState
from checklist.tasks.task_models import DEFAULT_LIST_ID, TaskFilter


def test_command_registry_routes_and_aliases(fake_state: AppState) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def handler(state, args):
        seen.append(args)
        return "ok"

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(fake_state, "/a x y") == "ok"
    assert reg.handle(fake_state, "/ALPHA") == "ok"
    assert seen == [["x", "y"], []]


def test_command_registry_unknown_and_non_command(fake_state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(fake_state, "hello") is None
    assert "Unknown command" in (reg.handle(fake_state, "/nope") or "")
    assert "Empty command" in (reg.handle(fake_state, "/") or "")


def test_empty_input_never_reaches_the_store(fake_state: AppState) -> None:
    repo = fake_state.tasks

    assert "description" in registry.handle(fake_state, "/add   ")
    assert "cannot be empty" in registry.handle(fake_state, "/newlist")

    assert "create_task" not in repo.calls
    assert "create_list" not in repo.calls


def test_plain_line_adds_task_to_active_list(fake_state: AppState) -> None:
    lst = fake_state.tasks.create_list("Work")
    registry.handle(fake_state, "/use Work")

    reply = handle_line(fake_state, "Prepare slides")

    assert reply.startswith("Added: Prepare slides")
    [task] = fake_state.tasks.get_tasks_by_list(lst.id)
    assert task.text == "Prepare slides"


def test_ls_done_and_filter(fake_state: AppState) -> None:
    handle_line(fake_state, "/add first")
    handle_line(fake_state, "/add second")

    listing = registry.handle(fake_state, "/ls")
    assert "1. [ ] second" in listing  # newest first
    assert "2. [ ] first" in listing

    assert registry.handle(fake_state, "/done 1") == "Done: second"

    assert registry.handle(fake_state, "/filter pending") == "Filter set to pending."
    assert fake_state.task_filter is TaskFilter.PENDING
    listing = registry.handle(fake_state, "/ls")
    assert "second" not in listing
    assert "1. [ ] first" in listing

    assert registry.handle(fake_state, "/done 1") == "Done: first"
    assert registry.handle(fake_state, "/filter bogus").startswith("Usage")


def test_done_unknown_task_is_reported(fake_state: AppState) -> None:
    assert registry.handle(fake_state, "/done 42") == "Task not found: 42"
    assert "update_task_status" not in fake_state.tasks.calls


def test_edit_fields(fake_state: AppState) -> None:
    handle_line(fake_state, "/add draft")
    [task] = fake_state.tasks.get_all_tasks()
    ref = task.id[:8]

    assert registry.handle(fake_state, f"/edit {ref} text final version") == "Task updated: final version"
    registry.handle(fake_state, f"/edit {ref} notes bring the charts")
    registry.handle(fake_state, f"/edit {ref} due 2024-09-30")

    edited = fake_state.tasks.get_task(task.id)
    assert edited.text == "final version"
    assert edited.notes == "bring the charts"
    assert edited.due_date is not None and edited.due_date.date().isoformat() == "2024-09-30"
    assert edited.created_at == task.created_at

    registry.handle(fake_state, f"/edit {ref} due -")
    registry.handle(fake_state, f"/edit {ref} notes -")
    cleared = fake_state.tasks.get_task(task.id)
    assert cleared.due_date is None
    assert cleared.notes is None

    assert registry.handle(fake_state, f"/edit {ref} due tomorrow").startswith("Invalid date")
    assert registry.handle(fake_state, f"/edit {ref} list nowhere").startswith("Unknown list")
    assert registry.handle(fake_state, f"/edit {ref} colour red").startswith("Usage")


def test_parse_due_date() -> None:
    assert parse_due_date("-") is None
    value = parse_due_date("2024-09-30")
    assert isinstance(value, datetime) and value.tzinfo is not None
    with pytest.raises(ValueError):
        parse_due_date("someday")


def test_status_and_lists_against_real_store(state: AppState) -> None:
    status = registry.handle(state, "/status")
    assert "Schema version: 2" in status
    assert "Tasks stored: 3" in status

    assert "List created: Work" in registry.handle(state, "/newlist Work")
    lists = registry.handle(state, "/lists")
    assert lists.index("Todas as Tarefas") < lists.index("Work")

    assert registry.handle(state, "/use Work") == "Active list: Work"
    handle_line(state, "ship it")
    assert "1. [ ] ship it" in registry.handle(state, "/ls")

    registry.handle(state, "/use all")
    assert state.active_list_id is None
    assert len(state.tasks.get_tasks_by_list(DEFAULT_LIST_ID)) == 3


def test_storage_fault_is_reported_and_view_state_kept(
    fake_state: AppState, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    handle_line(fake_state, "/add existing")
    registry.handle(fake_state, "/ls")
    listing_before = list(fake_state.last_listing)

    def broken_create_task(*args, **kwargs):
        raise sqlite3.OperationalError("database or disk is full")

    monkeypatch.setattr(fake_state.tasks, "create_task", broken_create_task)

    with caplog.at_level(logging.ERROR, logger="checklist.connectors.console_connector"):
        reply = handle_line(fake_state, "/add will not fit")

    assert reply == "Storage error: the change was not saved."
    [record] = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert record.exc_info is not None
    assert fake_state.last_listing == listing_before
    assert [t.text for t in fake_state.tasks.get_all_tasks()] == ["existing"]


def test_not_found_outcomes_log_warnings(
    fake_state: AppState, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="checklist.cli.commands"):
        assert registry.handle(fake_state, "/done nope") == "Task not found: nope"
        assert registry.handle(fake_state, "/edit nope text x") == "Task not found: nope"

    warned = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warned) == 2
    assert all("nope" in m for m in warned)


def test_status_update_on_vanished_task_logs_warning(
    fake_state: AppState, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    handle_line(fake_state, "/add short-lived")
    registry.handle(fake_state, "/ls")
    monkeypatch.setattr(fake_state.tasks, "update_task_status", lambda task_id, done: None)

    with caplog.at_level(logging.WARNING, logger="checklist.cli.commands"):
        assert registry.handle(fake_state, "/done 1") == "Task not found: 1"

    assert any("disappeared" in r.getMessage() for r in caplog.records)


def test_show_details(fake_state: AppState) -> None:
    handle_line(fake_state, "/add pay rent --due 2024-06-01 --notes via bank")
    registry.handle(fake_state, "/ls")

    details = registry.handle(fake_state, "/show 1")

    assert details.startswith("pay rent\n")
    assert "status: pending" in details
    assert "list: Todas as Tarefas" in details
    assert "due: 2024-06-01" in details
    assert "notes: via bank" in details
    assert registry.handle(fake_state, "/show zz") == "Task not found: zz"
    assert registry.handle(fake_state, "/show").startswith("Usage")


def test_add_with_due_notes_and_list(fake_state: AppState) -> None:
    lst = fake_state.tasks.create_list("Home")

    reply = registry.handle(fake_state, "/add pay rent --due 2024-06-01 --notes via bank --list home")

    assert reply.startswith("Added: pay rent  (due 2024-06-01")
    [task] = fake_state.tasks.get_tasks_by_list(lst.id)
    assert task.text == "pay rent"
    assert task.notes == "via bank"
    assert task.due_date is not None and task.due_date.date().isoformat() == "2024-06-01"


def test_add_rejects_bad_options_before_the_store(fake_state: AppState) -> None:
    assert registry.handle(fake_state, "/add x --due someday").startswith("Invalid date")
    assert registry.handle(fake_state, "/add x --list nowhere").startswith("Unknown list")
    assert registry.handle(fake_state, "/add --notes only notes") == "Please type a description for the task."
    assert "create_task" not in fake_state.tasks.calls


def test_split_add_args() -> None:
    assert split_add_args("buy milk --due 2024-05-01 --notes two liters".split()) == (
        "buy milk",
        {"due": "2024-05-01", "notes": "two liters"},
    )
    assert split_add_args(["plain", "text"]) == ("plain text", {})
