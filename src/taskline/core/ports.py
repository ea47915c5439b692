# src/taskline/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task service depends on Protocols instead of concrete implementations.
This keeps the storage backend swappable and makes testing easier.
"""

from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from ..tasks.task_models import HistoryEntry, Task

Clock = Callable[[], datetime]
# Returns the current naive local moment. Injected so tests can freeze time.


class TaskRepo(Protocol):
    """
    Storage contract for tasks and the append-only history log.

    Tasks handed out by the repo are copies: mutating them does not change
    stored state until replace() is called.
    """

    # Task records
    def insert(self, task: Task) -> None: ...
    def find(self, task_id: str) -> Task | None: ...
    def find_all(self) -> list[Task]: ...
    def replace(self, task_id: str, task: Task) -> None: ...
    def remove(self, task_id: str) -> bool: ...

    # History log (append-only)
    def append_history(self, entry: HistoryEntry) -> None: ...
    def history_for(self, task_id: str) -> list[HistoryEntry]: ...

    # Groups one mutation and all its history writes into a single unit.
    def transaction(self) -> AbstractContextManager[None]: ...

    def close(self) -> None: ...
