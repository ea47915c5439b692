# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskline.core.state import AppState
from taskline.tasks.task_service import TaskService
from taskline.tasks.task_store import InMemoryTaskStore

from .fakes import FakeClock

# Saturday noon; every test sees the same "now" unless it moves the clock.
NOW = datetime(2026, 10, 17, 12, 0, 0)
TODAY = NOW.date()


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskline-test",
        log_level="DEBUG",
        console_enabled=False,
        store_backend="memory",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        due_soon_hours=48,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture()
def service(store: InMemoryTaskStore, clock: FakeClock) -> TaskService:
    return TaskService(store, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: InMemoryTaskStore, service: TaskService) -> AppState:
    """AppState wired with the in-memory store and the fake clock."""
    return AppState(settings=settings, store=store, tasks=service)


def days(n: int) -> date:
    """TODAY shifted by n days."""
    return date.fromordinal(TODAY.toordinal() + n)
