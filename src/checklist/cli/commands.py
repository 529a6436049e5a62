# src/checklist/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from ..core.views import visible_tasks
from ..tasks.task_models import DEFAULT_LIST_ID, Task, TaskFilter, TodoList

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_CLEAR = "-"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _fmt_local(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def _short_id(task_id: str) -> str:
    return task_id[:8]


def _format_task_line(index: int, task: Task) -> str:
    mark = "x" if task.done else " "
    due = f"  (due {_fmt_local(task.due_date)})" if task.due_date else ""
    return f"{index}. [{mark}] {task.text}{due}  #{_short_id(task.id)}"


def parse_due_date(raw: str) -> datetime | None:
    """
    Parse a due date typed by the user.

    "-" clears the date; "YYYY-MM-DD" or any ISO-8601 timestamp is accepted.
    Values without an offset are local time. Raises ValueError otherwise.
    """
    raw = raw.strip()
    if raw == _CLEAR:
        return None
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.astimezone()
    return value


def resolve_task(state: AppState, ref: str) -> Task | None:
    """Resolve a /ls position, a full task id, or an unambiguous id prefix."""
    ref = ref.strip().lstrip("#")
    if not ref:
        return None

    if ref.isdigit():
        pos = int(ref)
        if 1 <= pos <= len(state.last_listing):
            return state.tasks.get_task(state.last_listing[pos - 1])

    task = state.tasks.get_task(ref)
    if task is not None:
        return task

    matches = [t for t in state.tasks.get_all_tasks() if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def resolve_list(state: AppState, ref: str) -> TodoList | None:
    """Resolve a list id, an unambiguous id prefix, or a unique name (case-insensitive)."""
    ref = ref.strip()
    if not ref:
        return None

    lst = state.tasks.get_list(ref)
    if lst is not None:
        return lst

    lists = state.tasks.get_all_lists()
    by_prefix = [x for x in lists if x.id.startswith(ref)]
    if len(by_prefix) == 1:
        return by_prefix[0]
    by_name = [x for x in lists if x.name.lower() == ref.lower()]
    return by_name[0] if len(by_name) == 1 else None


def _active_list_label(state: AppState) -> str:
    if state.active_list_id is None:
        return "all lists"
    lst = state.tasks.get_list(state.active_list_id)
    return lst.name if lst else state.active_list_id


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    return (
        "Status:\n"
        f"  Schema version: {state.tasks.get_storage_version()}\n"
        f"  SQLite version: {state.tasks.get_engine_version()}\n"
        f"  Tasks stored: {state.tasks.count_tasks()}\n"
        f"  Active list: {_active_list_label(state)}\n"
        f"  Filter: {state.task_filter.value}"
    )


def cmd_lists(state: AppState, args: list[str]) -> str:
    lists = state.tasks.get_all_lists()
    if not lists:
        return "No lists."
    lines = ["Lists:"]
    for lst in lists:
        marker = "*" if lst.id == state.active_list_id else " "
        lines.append(f" {marker} {lst.name}  [{lst.id}]")
    return "\n".join(lines)


def cmd_newlist(state: AppState, args: list[str]) -> str:
    name = " ".join(args).strip()
    if not name:
        return "Usage: /newlist <name>. The list name cannot be empty."
    lst = state.tasks.create_list(name)
    logger.info("List created id=%s", lst.id)
    return f"List created: {lst.name} [{lst.id}]"


def cmd_use(state: AppState, args: list[str]) -> str:
    """
    /use all       -> show tasks of every list
    /use <list>    -> show and add tasks in one list (id, id prefix or name)
    """
    if not args:
        return f"Active list: {_active_list_label(state)}. Use /use <list> or /use all."

    ref = " ".join(args).strip()
    if ref.lower() == "all":
        state.active_list_id = None
        return "Showing tasks of all lists."

    lst = resolve_list(state, ref)
    if lst is None:
        return f"Unknown list: {ref}. See /lists."
    state.active_list_id = lst.id
    return f"Active list: {lst.name}"


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Filter is {state.task_filter.value}. Use /filter all | pending | done."
    task_filter = TaskFilter.from_user(args[0])
    if task_filter is None:
        return "Usage: /filter all | pending | done."
    state.task_filter = task_filter
    return f"Filter set to {task_filter.value}."


def cmd_ls(state: AppState, args: list[str]) -> str:
    tasks = visible_tasks(state.tasks.get_tasks_by_list(state.active_list_id), state.task_filter)
    state.last_listing = [t.id for t in tasks]
    header = f"Tasks ({_active_list_label(state)}, {state.task_filter.value}):"
    if not tasks:
        return f"{header}\n  (none)"
    lines = [header]
    lines.extend(_format_task_line(i, t) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


_ADD_OPTIONS = ("--due", "--notes", "--list")


def split_add_args(args: list[str]) -> tuple[str, dict[str, str]]:
    """
    Split "/add" arguments into the task text and its options.

    "buy milk --due 2024-05-01 --notes two liters" ->
    ("buy milk", {"due": "2024-05-01", "notes": "two liters"})
    """
    text_parts: list[str] = []
    options: dict[str, list[str]] = {}
    current: str | None = None
    for token in args:
        if token.lower() in _ADD_OPTIONS:
            current = token.lower()[2:]
            options[current] = []
            continue
        if current is None:
            text_parts.append(token)
        else:
            options[current].append(token)
    return " ".join(text_parts).strip(), {k: " ".join(v).strip() for k, v in options.items()}


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <text> [--due YYYY-MM-DD] [--notes <text>] [--list <list>]

    Without --list the task goes to the active list (or the default list).
    """
    text, options = split_add_args(args)
    if not text:
        return "Please type a description for the task."

    list_id = state.active_list_id or DEFAULT_LIST_ID
    if "list" in options:
        lst = resolve_list(state, options["list"])
        if lst is None:
            return f"Unknown list: {options['list']}. See /lists."
        list_id = lst.id

    due_date = None
    if options.get("due"):
        try:
            due_date = parse_due_date(options["due"])
        except ValueError:
            return f"Invalid date: {options['due']}. Use YYYY-MM-DD."

    task = state.tasks.create_task(text, list_id, options.get("notes") or None, due_date)
    due = f"  (due {_fmt_local(task.due_date)})" if task.due_date else ""
    return f"Added: {task.text}{due}  #{_short_id(task.id)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>."
    task = resolve_task(state, args[0])
    if task is None:
        logger.warning("Toggle requested for unknown task ref=%s", args[0])
        return f"Task not found: {args[0]}"

    updated = state.tasks.update_task_status(task.id, not task.done)
    if updated is None:
        logger.warning("Task disappeared before status update id=%s", task.id)
        return f"Task not found: {args[0]}"
    return f"{'Done' if updated.done else 'Reopened'}: {updated.text}"


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <n|id>."
    task = resolve_task(state, args[0])
    if task is None:
        return f"Task not found: {args[0]}"
    lst = state.tasks.get_list(task.list_id)
    return (
        f"{task.text}\n"
        f"  id: {task.id}\n"
        f"  status: {'done' if task.done else 'pending'}\n"
        f"  list: {lst.name if lst else task.list_id}\n"
        f"  due: {_fmt_local(task.due_date)}\n"
        f"  notes: {task.notes or '-'}\n"
        f"  created: {_fmt_local(task.created_at)}"
    )


_EDIT_USAGE = (
    "Usage: /edit <n|id> <field> <value>\n"
    "  fields: text | notes | due | list\n"
    "  notes/due accept '-' to clear; due takes YYYY-MM-DD or an ISO timestamp"
)


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 3:
        return _EDIT_USAGE

    ref, field_name = args[0], args[1].lower()
    value = " ".join(args[2:]).strip()

    task = resolve_task(state, ref)
    if task is None:
        logger.warning("Edit requested for unknown task ref=%s", ref)
        return f"Task not found: {ref}"

    if field_name == "text":
        if not value:
            return "The task description cannot be empty."
        updated = state.tasks.update_task(task.id, text=value)
    elif field_name == "notes":
        updated = state.tasks.update_task(task.id, notes=None if value == _CLEAR else value)
    elif field_name == "due":
        try:
            due = parse_due_date(value)
        except ValueError:
            return f"Invalid date: {value}. Use YYYY-MM-DD."
        updated = state.tasks.update_task(task.id, due_date=due)
    elif field_name == "list":
        lst = resolve_list(state, value)
        if lst is None:
            return f"Unknown list: {value}. See /lists."
        updated = state.tasks.update_task(task.id, list_id=lst.id)
    else:
        return _EDIT_USAGE

    if updated is None:
        logger.warning("Task disappeared before update id=%s", task.id)
        return f"Task not found: {ref}"
    return f"Task updated: {updated.text}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show schema/SQLite versions and the active view.")
registry.register("lists", cmd_lists, help_text="Show all lists.")
registry.register("newlist", cmd_newlist, help_text="Create a list: /newlist <name>.")
registry.register("use", cmd_use, help_text="Choose the active list: /use <list> | /use all.")
registry.register("filter", cmd_filter, help_text="Filter tasks: /filter all | pending | done.")
registry.register("ls", cmd_ls, help_text="Show tasks of the active list.", aliases=["tasks"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <text> [--due YYYY-MM-DD] [--notes ...] [--list <list>] (plain lines work too).",
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.", aliases=["toggle"])
registry.register("show", cmd_show, help_text="Show task details: /show <n|id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n|id> text|notes|due|list <value>.")
