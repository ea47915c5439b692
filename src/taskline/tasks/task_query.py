# src/taskline/tasks/task_query.py

"""
Query engine: filter, search and sort a snapshot of tasks.

Stages run in a fixed order and each one narrows the working set:
status -> importance -> period -> search -> sort.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from functools import cmp_to_key

from .task_lifecycle import due_moment
from .task_models import ALL, Direction, OrderBy, Period, Task, TaskQuery, TaskStatus

DEFAULT_DUE_SOON_WINDOW = timedelta(hours=48)
WEEK_WINDOW = timedelta(days=7)


def _in_period(task: Task, period: Period, now: datetime, due_soon: timedelta) -> bool:
    today = now.date()

    if period == Period.ALL:
        return True
    if period == Period.OVERDUE:
        return task.status == TaskStatus.OVERDUE
    if period == Period.NO_DATE:
        return task.due_date is None

    # Every remaining period is date-bound.
    if task.due_date is None:
        return False

    if period == Period.TODAY:
        return task.due_date == today
    if period == Period.THIS_WEEK:
        # Rolling window from today, not the calendar week.
        return today <= task.due_date <= today + WEEK_WINDOW
    if period == Period.THIS_MONTH:
        return (task.due_date.year, task.due_date.month) == (today.year, today.month)
    if period == Period.DUE_SOON:
        if task.status != TaskStatus.PENDING:
            return False
        moment = due_moment(task.due_date, task.due_time)
        return now <= moment <= now + due_soon

    raise ValueError(f"unknown period: {period!r}")


def _matches_search(task: Task, needle: str) -> bool:
    if needle in task.title.lower():
        return True
    return task.description is not None and needle in task.description.lower()


def _compare(a: Task, b: Task, order_by: OrderBy, descending: bool) -> int:
    sign = -1 if descending else 1

    if order_by == OrderBy.DUE_DATE:
        # Dateless tasks always go last; direction only flips dated comparisons.
        if a.due_date is None and b.due_date is None:
            return 0
        if a.due_date is None:
            return 1
        if b.due_date is None:
            return -1
        return sign * ((a.due_date > b.due_date) - (a.due_date < b.due_date))

    if order_by == OrderBy.IMPORTANCE:
        return sign * (a.importance.rank - b.importance.rank)

    if order_by == OrderBy.CREATED:
        return sign * ((a.created_at > b.created_at) - (a.created_at < b.created_at))

    raise ValueError(f"unknown sort key: {order_by!r}")


def sort_tasks(tasks: Iterable[Task], order_by: OrderBy, direction: Direction) -> list[Task]:
    descending = direction == Direction.DESCENDING
    return sorted(tasks, key=cmp_to_key(lambda a, b: _compare(a, b, order_by, descending)))


def run_query(
    tasks: Iterable[Task],
    query: TaskQuery,
    now: datetime,
    *,
    due_soon: timedelta = DEFAULT_DUE_SOON_WINDOW,
) -> list[Task]:
    """Apply query to tasks and return a new ordered list. Input order breaks ties."""
    out = list(tasks)

    if query.status != ALL:
        out = [t for t in out if t.status == query.status]

    if query.importance != ALL:
        out = [t for t in out if t.importance == query.importance]

    if query.period != Period.ALL:
        out = [t for t in out if _in_period(t, query.period, now, due_soon)]

    if query.search:
        needle = query.search.lower()
        out = [t for t in out if _matches_search(t, needle)]

    return sort_tasks(out, query.order_by, query.direction)
