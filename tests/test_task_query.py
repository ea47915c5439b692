# tests/test_task_query.py

from __future__ import annotations

from datetime import date, time, timedelta

from taskline.tasks.task_models import (
    Direction,
    Importance,
    OrderBy,
    Period,
    Task,
    TaskQuery,
    TaskStatus,
)
from taskline.tasks.task_query import run_query

from .conftest import NOW, days


def _task(
    tid: str,
    *,
    title: str | None = None,
    description: str | None = None,
    due_date: date | None = None,
    due_time: time | None = None,
    importance: Importance = Importance.MEDIUM,
    status: TaskStatus = TaskStatus.PENDING,
    created_offset: int = 0,
) -> Task:
    created = NOW + timedelta(minutes=created_offset)
    return Task(
        id=tid,
        title=title or tid,
        description=description,
        due_date=due_date,
        due_time=due_time,
        importance=importance,
        status=status,
        created_at=created,
        updated_at=created,
    )


def _ids(tasks: list[Task]) -> list[str]:
    return [t.id for t in tasks]


def test_importance_ascending_is_stable() -> None:
    tasks = [
        _task("m1", importance=Importance.MEDIUM),
        _task("h1", importance=Importance.HIGH),
        _task("l1", importance=Importance.LOW),
        _task("h2", importance=Importance.HIGH),
    ]

    out = run_query(tasks, TaskQuery(order_by=OrderBy.IMPORTANCE), NOW)

    assert _ids(out) == ["h1", "h2", "m1", "l1"]


def test_importance_descending_puts_low_first() -> None:
    tasks = [
        _task("h1", importance=Importance.HIGH),
        _task("l1", importance=Importance.LOW),
        _task("m1", importance=Importance.MEDIUM),
    ]

    out = run_query(
        tasks, TaskQuery(order_by=OrderBy.IMPORTANCE, direction=Direction.DESCENDING), NOW
    )

    assert _ids(out) == ["l1", "m1", "h1"]


def test_due_date_sort_keeps_dateless_last_in_both_directions() -> None:
    tasks = [
        _task("none1"),
        _task("d5", due_date=days(5)),
        _task("d1", due_date=days(1)),
        _task("none2"),
        _task("d3", due_date=days(3)),
    ]

    asc = run_query(tasks, TaskQuery(), NOW)
    desc = run_query(tasks, TaskQuery(direction=Direction.DESCENDING), NOW)

    assert _ids(asc) == ["d1", "d3", "d5", "none1", "none2"]
    assert _ids(desc) == ["d5", "d3", "d1", "none1", "none2"]


def test_created_sort() -> None:
    tasks = [_task("b", created_offset=2), _task("a", created_offset=1), _task("c", created_offset=3)]

    out = run_query(
        tasks, TaskQuery(order_by=OrderBy.CREATED, direction=Direction.DESCENDING), NOW
    )

    assert _ids(out) == ["c", "b", "a"]


def test_status_and_importance_filters_combine() -> None:
    tasks = [
        _task("a", importance=Importance.HIGH, status=TaskStatus.COMPLETED),
        _task("b", importance=Importance.HIGH),
        _task("c", importance=Importance.LOW),
    ]

    out = run_query(
        tasks, TaskQuery(status=TaskStatus.PENDING, importance=Importance.HIGH), NOW
    )

    assert _ids(out) == ["b"]


def test_period_today_week_month() -> None:
    tasks = [
        _task("yesterday", due_date=days(-1)),
        _task("today", due_date=days(0)),
        _task("in7", due_date=days(7)),
        _task("in8", due_date=days(8)),
        _task("nodate"),
    ]

    today = run_query(tasks, TaskQuery(period=Period.TODAY), NOW)
    week = run_query(tasks, TaskQuery(period=Period.THIS_WEEK), NOW)
    month = run_query(tasks, TaskQuery(period=Period.THIS_MONTH), NOW)

    assert _ids(today) == ["today"]
    assert _ids(week) == ["today", "in7"]
    # 2026-10-16 .. 2026-10-25 all fall in October.
    assert _ids(month) == ["yesterday", "today", "in7", "in8"]


def test_period_this_month_excludes_other_months() -> None:
    tasks = [
        _task("oct", due_date=date(2026, 10, 31)),
        _task("nov", due_date=date(2026, 11, 1)),
        _task("oct_last_year", due_date=date(2025, 10, 20)),
    ]

    out = run_query(tasks, TaskQuery(period=Period.THIS_MONTH), NOW)

    assert _ids(out) == ["oct"]


def test_period_due_soon_uses_due_time_and_pending_only() -> None:
    tasks = [
        _task("past_hour", due_date=days(0), due_time=time(11, 0)),
        _task("later_today", due_date=days(0), due_time=time(18, 0)),
        _task("in_two_days_noon", due_date=days(2), due_time=time(12, 0)),
        _task("in_two_days_eod", due_date=days(2)),
        _task("done", due_date=days(1), status=TaskStatus.COMPLETED),
        _task("nodate"),
    ]

    out = run_query(tasks, TaskQuery(period=Period.DUE_SOON), NOW)

    assert _ids(out) == ["later_today", "in_two_days_noon"]


def test_period_overdue_and_no_date() -> None:
    tasks = [
        _task("over", due_date=days(-1), status=TaskStatus.OVERDUE),
        _task("pending", due_date=days(1)),
        _task("nodate"),
    ]

    assert _ids(run_query(tasks, TaskQuery(period=Period.OVERDUE), NOW)) == ["over"]
    assert _ids(run_query(tasks, TaskQuery(period=Period.NO_DATE), NOW)) == ["nodate"]


def test_search_matches_title_or_description_case_insensitive() -> None:
    tasks = [
        _task("a", title="Pay BILLS"),
        _task("b", title="Groceries", description="and the electricity bill"),
        _task("c", title="Gym", description=None),
    ]

    out = run_query(tasks, TaskQuery(search="bill"), NOW)

    assert _ids(out) == ["a", "b"]


def test_query_does_not_mutate_input() -> None:
    tasks = [_task("b", due_date=days(2)), _task("a", due_date=days(1))]

    out = run_query(tasks, TaskQuery(), NOW)

    assert _ids(out) == ["a", "b"]
    assert _ids(tasks) == ["b", "a"]
