# src/taskline/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the configured store backend and the task service into AppState.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from ..config import get_settings
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks.task_service import TaskService
from ..tasks.task_store import InMemoryTaskStore, SqliteTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(settings) -> TaskRepo:
    backend = str(getattr(settings, "store_backend", "sqlite"))
    if backend == "memory":
        logger.info("Using in-memory task store (nothing survives a restart).")
        return InMemoryTaskStore()
    return SqliteTaskStore(settings.tasks_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = create_store(settings)
    service = TaskService(
        store,
        due_soon=timedelta(hours=int(getattr(settings, "due_soon_hours", 48))),
    )
    return AppState(settings=settings, store=store, tasks=service)
