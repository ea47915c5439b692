# tests/test_task_rules.py

from __future__ import annotations

from datetime import date, time

import pytest

from taskline.tasks.task_errors import (
    DescriptionTooLong,
    InvalidDueDate,
    InvalidDueTime,
    PastDueDate,
    TaskError,
    TitleRequired,
    TitleTooLong,
)
from taskline.tasks.task_lifecycle import check_transition, due_moment
from taskline.tasks.task_models import TaskFields, TaskStatus
from taskline.tasks.task_rules import (
    parse_due_date,
    parse_due_time,
    validate_due_date_not_past,
    validate_fields,
)

from .conftest import TODAY, days


def test_title_limits() -> None:
    validate_fields(TaskFields(title="x"))
    validate_fields(TaskFields(title="x" * 100))

    with pytest.raises(TitleRequired):
        validate_fields(TaskFields(title=""))
    with pytest.raises(TitleRequired):
        validate_fields(TaskFields(title=" \t "))
    with pytest.raises(TitleTooLong):
        validate_fields(TaskFields(title="x" * 101))


def test_description_limit() -> None:
    validate_fields(TaskFields(title="t", description=None))
    validate_fields(TaskFields(title="t", description="d" * 500))

    with pytest.raises(DescriptionTooLong):
        validate_fields(TaskFields(title="t", description="d" * 501))


def test_errors_carry_codes() -> None:
    with pytest.raises(TaskError) as exc:
        validate_fields(TaskFields(title=""))
    assert exc.value.code == "TitleRequired"
    assert isinstance(exc.value, ValueError)


def test_parse_due_date() -> None:
    assert parse_due_date("05/03/2027") == date(2027, 3, 5)
    assert parse_due_date(None) is None
    assert parse_due_date("  ") is None

    for bad in ("5/3/2027", "2027-03-05", "31/02/2027", "aa/bb/cccc"):
        with pytest.raises(InvalidDueDate):
            parse_due_date(bad)


def test_parse_due_time() -> None:
    assert parse_due_time("09:05") == time(9, 5)
    assert parse_due_time("") is None

    for bad in ("9:05", "24:00", "12:60", "noon"):
        with pytest.raises(InvalidDueTime):
            parse_due_time(bad)


def test_past_due_date_ignores_time_of_day() -> None:
    validate_due_date_not_past(None, TODAY)
    validate_due_date_not_past(TODAY, TODAY)
    validate_due_date_not_past(days(1), TODAY)

    with pytest.raises(PastDueDate):
        validate_due_date_not_past(days(-1), TODAY)


def test_explicit_transitions() -> None:
    check_transition(TaskStatus.PENDING, TaskStatus.COMPLETED)
    check_transition(TaskStatus.COMPLETED, TaskStatus.PENDING)
    check_transition(TaskStatus.OVERDUE, TaskStatus.COMPLETED)

    with pytest.raises(TaskError):
        check_transition(TaskStatus.OVERDUE, TaskStatus.PENDING)
    with pytest.raises(TaskError):
        check_transition(TaskStatus.PENDING, TaskStatus.OVERDUE)


def test_due_moment_defaults_to_end_of_day() -> None:
    assert due_moment(TODAY, None).time() == time(23, 59, 59)
    assert due_moment(TODAY, time(8, 15)).time() == time(8, 15)
