# src/taskline/tasks/task_rules.py

"""
Validation rules for task fields.

Pure checks over the input and the current date; nothing here touches storage.
Textual parsing (DD/MM/YYYY, HH:MM) lives here too so that the request layer
and the CLI share one definition of the accepted formats.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time

from .task_errors import (
    DescriptionTooLong,
    InvalidDueDate,
    InvalidDueTime,
    PastDueDate,
    TitleRequired,
    TitleTooLong,
)
from .task_models import DATE_FORMAT, DESCRIPTION_MAX_LEN, TIME_FORMAT, TITLE_MAX_LEN, TaskFields

DUE_DATE_REGEX = re.compile(r"^\d{2}/\d{2}/\d{4}$")
DUE_TIME_REGEX = re.compile(r"^\d{2}:\d{2}$")


def validate_fields(fields: TaskFields) -> None:
    """Raise the first violated field constraint (create and update share this)."""
    if not fields.title or not fields.title.strip():
        raise TitleRequired("Task title must not be empty.")
    if len(fields.title) > TITLE_MAX_LEN:
        raise TitleTooLong(f"Task title must be at most {TITLE_MAX_LEN} characters.")
    if fields.description is not None and len(fields.description) > DESCRIPTION_MAX_LEN:
        raise DescriptionTooLong(
            f"Task description must be at most {DESCRIPTION_MAX_LEN} characters."
        )


def validate_due_date_not_past(due_date: date | None, today: date) -> None:
    if due_date is not None and due_date < today:
        raise PastDueDate("Due date cannot be earlier than today.")


def parse_due_date(raw: str | None) -> date | None:
    if raw is None or not raw.strip():
        return None
    raw = raw.strip()
    if not DUE_DATE_REGEX.match(raw):
        raise InvalidDueDate("Due date must be in DD/MM/YYYY format.")
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise InvalidDueDate(f"Not a calendar date: {raw}") from None


def parse_due_time(raw: str | None) -> time | None:
    if raw is None or not raw.strip():
        return None
    raw = raw.strip()
    if not DUE_TIME_REGEX.match(raw):
        raise InvalidDueTime("Due time must be in HH:MM format.")
    try:
        return datetime.strptime(raw, TIME_FORMAT).time()
    except ValueError:
        raise InvalidDueTime(f"Not a clock time: {raw}") from None


def format_due_date(value: date | None) -> str | None:
    return value.strftime(DATE_FORMAT) if value is not None else None


def format_due_time(value: time | None) -> str | None:
    return value.strftime(TIME_FORMAT) if value is not None else None
