# src/taskline/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_errors import TaskError
from ..tasks.task_models import HistoryEntry, Task
from ..tasks.task_rules import format_due_date, format_due_time

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    "TitleRequired": "The task title is required.",
    "TitleTooLong": "The title must be at most 100 characters.",
    "DescriptionTooLong": "The description must be at most 500 characters.",
    "PastDueDate": "The due date cannot be earlier than today.",
    "IllegalStatusTransition": "That status change is not allowed.",
    "InvalidDueDate": "The due date must be in DD/MM/YYYY format.",
    "InvalidDueTime": "The due time must be in HH:MM format.",
    "InvalidImportance": "Importance must be one of: High, Medium, Low.",
    "InvalidStatus": "Status must be one of: Pending, Completed.",
    "InvalidFilter": "Unknown filter value.",
    "HistoryWriteFailed": "The change could not be recorded and was not saved.",
}

# key=value aliases accepted on the command line.
FIELD_KEYS = {
    "title": "title",
    "desc": "description",
    "description": "description",
    "due": "due_date",
    "date": "due_date",
    "time": "due_time",
    "at": "due_time",
    "importance": "importance",
    "imp": "importance",
}

FILTER_KEYS = {
    "status": "status",
    "importance": "importance",
    "imp": "importance",
    "period": "period",
    "search": "search",
    "q": "search",
    "order": "order_by",
    "sort": "order_by",
    "dir": "direction",
    "direction": "direction",
}


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, /list, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskError as e:
            logger.debug("Command /%s rejected: %s", name, e.code)
            return ERROR_MESSAGES.get(e.code, str(e))

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_args(args: list[str], keys: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    """Separate positional words from key=value pairs (keys mapped through `keys`)."""
    positional: list[str] = []
    named: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in keys:
            named[keys[key.lower()]] = value
        else:
            positional.append(arg)
    return positional, named


def format_task(task: Task) -> str:
    due = format_due_date(task.due_date) or "no date"
    if task.due_time is not None:
        due = f"{due} {format_due_time(task.due_time)}"
    return f"[{task.id[:8]}] {task.title} ({task.importance.value}, {task.status.value}, due {due})"


def format_task_details(task: Task) -> str:
    lines = [
        format_task(task),
        f"  id: {task.id}",
        f"  description: {task.description or '-'}",
        f"  created: {task.created_at:%d/%m/%Y %H:%M:%S}",
        f"  updated: {task.updated_at:%d/%m/%Y %H:%M:%S}",
    ]
    return "\n".join(lines)


def format_entry(entry: HistoryEntry) -> str:
    line = f"{entry.changed_at:%d/%m/%Y %H:%M:%S} {entry.kind.value} ({entry.origin.value})"
    if entry.field is not None:
        line += f" {entry.field}: {entry.old_value or '-'} -> {entry.new_value or '-'}"
    return line


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Pay bills due=20/10/2026 time=18:00 imp=high desc="electricity + water"

    Positional words form the title unless title=... is given.
    """
    positional, named = _split_args(args, FIELD_KEYS)
    title = named.pop("title", " ".join(positional))
    task = task_api.create_task(state, title=title, **named)
    return f"Created {format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                         -> everything, by due date
    /list status=overdue          -> only overdue tasks
    /list period="due soon" imp=high sort=importance dir=descending
    /list bills                   -> free-text search
    """
    positional, named = _split_args(args, FILTER_KEYS)
    if positional and "search" not in named:
        named["search"] = " ".join(positional)
    tasks = task_api.list_tasks(state, **named)
    if not tasks:
        return "No tasks match."
    return "\n".join(format_task(t) for t in tasks)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <task id>"
    task_id = state.tasks.resolve_id(args[0])
    task = state.tasks.get(task_id) if task_id else None
    if task is None:
        return f"Task not found: {args[0]}"
    return format_task_details(task)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title="New title" due=21/10/2026 desc=

    Only the given fields change; an empty value clears optional fields.
    """
    positional, named = _split_args(args, FIELD_KEYS)
    if not positional:
        return "Usage: /edit <task id> key=value ..."
    task_id = state.tasks.resolve_id(positional[0])
    task = task_api.edit_task(state, task_id, **named) if task_id else None
    if task is None:
        return f"Task not found: {positional[0]}"
    return f"Updated {format_task(task)}"


def _set_status(state: AppState, raw_id: str, status: str) -> str:
    task_id = state.tasks.resolve_id(raw_id)
    task = task_api.change_status(state, task_id, status) if task_id else None
    if task is None:
        return f"Task not found: {raw_id}"
    return format_task(task)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task id>"
    return _set_status(state, args[0], "Completed")


def cmd_reopen(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /reopen <task id>"
    return _set_status(state, args[0], "Pending")


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <task id>"
    task_id = state.tasks.resolve_id(args[0])
    if task_id is None or not state.tasks.delete(task_id):
        return f"Task not found: {args[0]}"
    return f"Deleted task {task_id}."


def cmd_history(state: AppState, args: list[str]) -> str:
    """
    /history <id>                     -> full audit trail, newest first
    /history <id> kind=edit           -> only field edits
    /history <id> origin=automatic    -> only system-made changes

    Deleted tasks keep their history; pass the full id for those.
    """
    positional, named = _split_args(args, {"kind": "kind", "origin": "origin"})
    if not positional:
        return "Usage: /history <task id> [kind=...] [origin=...]"
    task_id = state.tasks.resolve_id(positional[0]) or positional[0]
    entries = task_api.task_history(state, task_id, **named)
    if not entries:
        return f"No history for {positional[0]}."
    return "\n".join(format_entry(e) for e in entries)


def cmd_sweep(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    flipped = state.tasks.check_overdue()
    if emit is not None:
        for task_id in flipped:
            emit(f"Overdue: {task_id}")
    return f"Overdue sweep done: {len(flipped)} task(s) marked overdue."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Create a task: /add <title> due=DD/MM/YYYY time=HH:MM imp=high")
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [status=] [imp=] [period=] [sort=] [dir=] [search words]",
    aliases=["ls"],
)
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> key=value ...")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.")
registry.register("reopen", cmd_reopen, help_text="Mark a completed task pending again: /reopen <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register(
    "history", cmd_history, help_text="Audit trail: /history <id> [kind=] [origin=]."
)
registry.register("sweep", cmd_sweep, help_text="Run the overdue check now.")
