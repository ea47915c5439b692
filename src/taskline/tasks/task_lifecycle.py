# src/taskline/tasks/task_lifecycle.py

"""
Status lifecycle rules.

    Pending  <-> Completed   explicit (set_status)
    Pending   -> Overdue     automatic only (overdue sweep)
    Overdue   -> Pending     automatic only (due date or time moved, date today or later)

Everything else is rejected by check_transition().
"""

from __future__ import annotations

from datetime import date, datetime, time

from .task_errors import IllegalStatusTransition
from .task_models import Task, TaskFields, TaskStatus

END_OF_DAY = time(23, 59, 59)


def check_transition(old: TaskStatus, new: TaskStatus) -> None:
    """Validate an explicit (user-requested) status change."""
    if new == TaskStatus.OVERDUE:
        raise IllegalStatusTransition("Overdue status is assigned automatically.")
    if old == TaskStatus.OVERDUE and new == TaskStatus.PENDING:
        raise IllegalStatusTransition(
            "An overdue task returns to Pending only when its due date or time moves."
        )


def due_moment(due_date: date, due_time: time | None) -> datetime:
    """Naive local moment a task falls due; end of day when no time was set."""
    return datetime.combine(due_date, due_time if due_time is not None else END_OF_DAY)


def is_past_due(task: Task, now: datetime) -> bool:
    """True for a Pending, dated task whose due moment is strictly before now."""
    if task.status != TaskStatus.PENDING or task.due_date is None:
        return False
    return due_moment(task.due_date, task.due_time) < now


def reopens_overdue(task: Task, fields: TaskFields, today: date) -> bool:
    """
    Whether an update should reset an Overdue task to Pending.

    The due date or time has to change, and the new due date must be today or
    later. A moment still past is caught again by the next sweep.
    """
    if task.status != TaskStatus.OVERDUE or fields.due_date is None:
        return False
    if (fields.due_date, fields.due_time) == (task.due_date, task.due_time):
        return False
    return fields.due_date >= today
