# src/taskline/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum

# Sentinel accepted by every filter field; disables that filter.
ALL = "All"

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M"

TITLE_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 500


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - PENDING is the initial status of every task.
    - OVERDUE is only ever entered automatically (overdue sweep).
    """

    PENDING = "Pending"
    COMPLETED = "Completed"
    OVERDUE = "Overdue"


class Importance(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """1 for the most important level, 3 for the least."""
        return _IMPORTANCE_RANK[self]


_IMPORTANCE_RANK = {Importance.HIGH: 1, Importance.MEDIUM: 2, Importance.LOW: 3}


class ChangeKind(StrEnum):
    CREATION = "Creation"
    EDIT = "Edit"
    STATUS_CHANGE = "StatusChange"
    DELETION = "Deletion"


class ChangeOrigin(StrEnum):
    MANUAL = "Manual"
    AUTOMATIC = "Automatic"


class Period(StrEnum):
    ALL = "All"
    TODAY = "Today"
    THIS_WEEK = "This week"
    THIS_MONTH = "This month"
    DUE_SOON = "Due soon"
    OVERDUE = "Overdue"
    NO_DATE = "No date"


class OrderBy(StrEnum):
    DUE_DATE = "Due date"
    IMPORTANCE = "Importance"
    CREATED = "Created"


class Direction(StrEnum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str | None
    due_date: date | None
    due_time: time | None
    importance: Importance
    status: TaskStatus
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class TaskFields:
    """Editable part of a task, as accepted by create and update."""

    title: str
    description: str | None = None
    due_date: date | None = None
    due_time: time | None = None
    importance: Importance = Importance.MEDIUM

    @classmethod
    def of(cls, task: Task) -> TaskFields:
        return cls(
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            due_time=task.due_time,
            importance=task.importance,
        )


# Fields compared by the history recorder on update, in reporting order.
TRACKED_FIELDS: tuple[str, ...] = ("title", "description", "due_date", "due_time", "importance")


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    id: str
    task_id: str
    changed_at: datetime
    kind: ChangeKind
    field: str | None
    old_value: str | None
    new_value: str | None
    origin: ChangeOrigin


@dataclass(frozen=True, slots=True)
class TaskQuery:
    status: TaskStatus | str = ALL
    importance: Importance | str = ALL
    period: Period = Period.ALL
    search: str | None = None
    order_by: OrderBy = OrderBy.DUE_DATE
    direction: Direction = Direction.ASCENDING
