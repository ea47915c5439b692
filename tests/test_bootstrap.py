# tests/test_bootstrap.py

from __future__ import annotations

from taskline.cli.bootstrap import create_initial_state
from taskline.tasks.task_models import TaskFields
from taskline.tasks.task_store import InMemoryTaskStore, SqliteTaskStore


def test_bootstrap_memory_backend(settings) -> None:
    state = create_initial_state(settings=settings)

    assert isinstance(state.store, InMemoryTaskStore)
    task = state.tasks.create(TaskFields(title="wired"))
    assert state.tasks.get(task.id) is not None


def test_bootstrap_sqlite_backend(settings) -> None:
    settings.store_backend = "sqlite"

    state = create_initial_state(settings=settings)

    assert isinstance(state.store, SqliteTaskStore)
    assert settings.tasks_db_path.exists()
