# tests/test_task_api.py

from __future__ import annotations

import pytest

from taskline.tasks import task_api
from taskline.tasks.task_errors import (
    IllegalStatusTransition,
    InvalidDueDate,
    InvalidFilter,
    InvalidImportance,
    PastDueDate,
)
from taskline.tasks.task_models import (
    ALL,
    ChangeKind,
    ChangeOrigin,
    Direction,
    Importance,
    OrderBy,
    Period,
    TaskStatus,
)

from .conftest import days


def _d(n: int) -> str:
    return days(n).strftime("%d/%m/%Y")


def test_create_parses_text_fields(state) -> None:
    task = task_api.create_task(
        state,
        title="Pay bills",
        description="",
        due_date=_d(1),
        due_time="18:00",
        importance="high",
    )

    assert task.importance == Importance.HIGH
    assert task.due_date == days(1)
    assert task.due_time.hour == 18
    assert task.description is None


def test_create_rejects_past_due_date(state) -> None:
    with pytest.raises(PastDueDate):
        task_api.create_task(state, title="late", due_date=_d(-1))

    # Today is fine even though "now" is past midnight.
    task_api.create_task(state, title="today", due_date=_d(0))


def test_create_rejects_bad_formats(state) -> None:
    with pytest.raises(InvalidDueDate):
        task_api.create_task(state, title="t", due_date="2026-10-20")
    with pytest.raises(InvalidImportance):
        task_api.create_task(state, title="t", importance="urgent")


def test_update_replaces_all_fields(state) -> None:
    task = task_api.create_task(state, title="t", description="d", importance="low")

    updated = task_api.update_task(state, task.id, title="t2")

    assert updated is not None
    assert updated.title == "t2"
    assert updated.description is None
    assert updated.importance == Importance.MEDIUM


def test_edit_changes_only_given_fields(state) -> None:
    task = task_api.create_task(state, title="t", description="d", importance="low")

    edited = task_api.edit_task(state, task.id, importance="high")

    assert edited is not None
    assert (edited.title, edited.description, edited.importance) == ("t", "d", Importance.HIGH)
    (edit,) = task_api.task_history(state, task.id, kind="Edit")
    assert edit.field == "importance"


def test_edit_overdue_task_title_without_moving_date(state, clock) -> None:
    task = task_api.create_task(state, title="t", due_date=_d(0), due_time="12:30")
    clock.advance(hours=1)
    task_api.list_tasks(state)

    edited = task_api.edit_task(state, task.id, title="renamed")

    assert edited is not None
    assert edited.status == TaskStatus.OVERDUE

    with pytest.raises(PastDueDate):
        task_api.edit_task(state, task.id, due_date=_d(-1))

    reopened = task_api.edit_task(state, task.id, due_date=_d(1))
    assert reopened is not None and reopened.status == TaskStatus.PENDING


def test_edit_unknown_id(state) -> None:
    assert task_api.edit_task(state, "missing", title="x") is None


def test_change_status_by_name(state) -> None:
    task = task_api.create_task(state, title="t")

    done = task_api.change_status(state, task.id, "completed")

    assert done is not None and done.status == TaskStatus.COMPLETED
    with pytest.raises(IllegalStatusTransition):
        task_api.change_status(state, task.id, "Overdue")


def test_build_query_defaults_and_aliases() -> None:
    q = task_api.build_query()
    assert (q.status, q.importance, q.period) == (ALL, ALL, Period.ALL)
    assert (q.order_by, q.direction) == (OrderBy.DUE_DATE, Direction.ASCENDING)

    q2 = task_api.build_query(
        status="overdue",
        importance="High",
        period="due soon",
        search="  bills ",
        order_by="importance",
        direction="DESCENDING",
    )
    assert q2.status == TaskStatus.OVERDUE
    assert q2.importance == Importance.HIGH
    assert q2.period == Period.DUE_SOON
    assert q2.search == "bills"
    assert q2.order_by == OrderBy.IMPORTANCE
    assert q2.direction == Direction.DESCENDING

    with pytest.raises(InvalidFilter):
        task_api.build_query(period="next year")

    with pytest.raises(InvalidFilter):
        task_api.build_query(order_by="All")


def test_pay_bills_scenario(state, clock) -> None:
    # Created yesterday (when the date was still valid), listed today.
    clock.advance(days=-1)
    task = task_api.create_task(state, title="Pay bills", due_date=_d(-1), importance="High")
    clock.advance(days=1)

    (listed,) = task_api.list_tasks(state)

    assert listed.id == task.id
    assert listed.status == TaskStatus.OVERDUE
    auto = task_api.task_history(state, task.id, kind="StatusChange", origin="Automatic")
    assert len(auto) == 1
    assert auto[0].origin == ChangeOrigin.AUTOMATIC
    assert auto[0].kind == ChangeKind.STATUS_CHANGE
