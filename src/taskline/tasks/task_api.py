# src/taskline/tasks/task_api.py

"""
Request-handling boundary for the task core.

Connectors (CLI, console) hand in raw text; this module turns it into typed
values, applies the request-level checks (formats, enum names, due date not in
the past) and then calls TaskService. Business errors propagate untouched.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar

from ..core.state import AppState
from .task_errors import InvalidFilter, InvalidImportance, InvalidStatus
from .task_models import (
    ALL,
    ChangeKind,
    ChangeOrigin,
    Direction,
    HistoryEntry,
    Importance,
    OrderBy,
    Period,
    Task,
    TaskFields,
    TaskQuery,
    TaskStatus,
)
from .task_rules import parse_due_date, parse_due_time, validate_due_date_not_past


E = TypeVar("E", bound=StrEnum)


def _lookup(enum_cls: type[E], raw: str) -> E | None:
    """Case-insensitive match on value or member name ("high", "HIGH", "High")."""
    key = raw.strip().lower()
    for member in enum_cls:
        if key in (member.value.lower(), member.name.lower()):
            return member
    return None


def parse_importance(raw: str | None) -> Importance:
    if raw is None or not raw.strip():
        return Importance.MEDIUM
    found = _lookup(Importance, raw)
    if found is None:
        raise InvalidImportance(f"Unknown importance: {raw}")
    return found


def parse_status(raw: str) -> TaskStatus:
    found = _lookup(TaskStatus, raw)
    if found is None:
        raise InvalidStatus(f"Unknown status: {raw}")
    return found


def _parse_filter(enum_cls: type[E], raw: str | None, default: E | str) -> E | str:
    if raw is None or not raw.strip():
        return default
    if raw.strip().lower() == ALL.lower():
        return ALL
    found = _lookup(enum_cls, raw)
    if found is None:
        raise InvalidFilter(f"Unknown {enum_cls.__name__} filter: {raw}")
    return found


def _parse_choice(enum_cls: type[E], raw: str | None, default: E) -> E:
    if raw is None or not raw.strip():
        return default
    found = _lookup(enum_cls, raw)
    if found is None:
        raise InvalidFilter(f"Unknown {enum_cls.__name__} value: {raw}")
    return found


def build_query(
    *,
    status: str | None = None,
    importance: str | None = None,
    period: str | None = None,
    search: str | None = None,
    order_by: str | None = None,
    direction: str | None = None,
) -> TaskQuery:
    """Build a TaskQuery from textual filter values. Missing values mean "All" / defaults."""
    period_value = _parse_filter(Period, period, Period.ALL)
    return TaskQuery(
        status=_parse_filter(TaskStatus, status, ALL),
        importance=_parse_filter(Importance, importance, ALL),
        period=Period.ALL if period_value == ALL else period_value,
        search=search.strip() if search and search.strip() else None,
        order_by=_parse_choice(OrderBy, order_by, OrderBy.DUE_DATE),
        direction=_parse_choice(Direction, direction, Direction.ASCENDING),
    )


def parse_fields(
    state: AppState,
    *,
    title: str,
    description: str | None = None,
    due_date: str | None = None,
    due_time: str | None = None,
    importance: str | None = None,
) -> TaskFields:
    parsed_date = parse_due_date(due_date)
    validate_due_date_not_past(parsed_date, state.tasks.now().date())
    return TaskFields(
        title=title,
        description=description or None,
        due_date=parsed_date,
        due_time=parse_due_time(due_time),
        importance=parse_importance(importance),
    )


def create_task(state: AppState, **raw: str | None) -> Task:
    fields = parse_fields(state, **raw)
    return state.tasks.create(fields)


def update_task(state: AppState, task_id: str, **raw: str | None) -> Task | None:
    fields = parse_fields(state, **raw)
    return state.tasks.update(task_id, fields)


def edit_task(state: AppState, task_id: str, **changes: str | None) -> Task | None:
    """
    Partial update: fields not named in `changes` keep their current value.

    The past-date check only applies to a due date that is actually given, so an
    overdue task can still have its title fixed without moving its date.
    """
    parsed: dict[str, object] = {}
    if "title" in changes:
        parsed["title"] = changes["title"] or ""
    if "description" in changes:
        parsed["description"] = changes["description"] or None
    if "due_date" in changes:
        parsed["due_date"] = due_date = parse_due_date(changes["due_date"])
        validate_due_date_not_past(due_date, state.tasks.now().date())
    if "due_time" in changes:
        parsed["due_time"] = parse_due_time(changes["due_time"])
    if "importance" in changes:
        parsed["importance"] = parse_importance(changes["importance"])

    # The merge with the stored values happens under the service lock.
    return state.tasks.edit(task_id, **parsed)


def change_status(state: AppState, task_id: str, status: str) -> Task | None:
    return state.tasks.set_status(task_id, parse_status(status))


def list_tasks(state: AppState, **filters: str | None) -> list[Task]:
    return state.tasks.list_tasks(build_query(**filters))


def task_history(
    state: AppState,
    task_id: str,
    *,
    kind: str | None = None,
    origin: str | None = None,
) -> list[HistoryEntry]:
    return state.tasks.get_history(
        task_id,
        kind=_parse_filter(ChangeKind, kind, ALL),
        origin=_parse_filter(ChangeOrigin, origin, ALL),
    )
