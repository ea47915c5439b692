# src/taskline/tasks/task_service.py

from __future__ import annotations

"""
Task service.

The five user-facing operations (create / update / delete / set_status / list)
plus the overdue sweep. Every mutating operation runs inside _mutation(), which:
- serializes writers with a re-entrant lock,
- opens one store transaction so the record change and all of its history
  entries commit together (or not at all).

HistoryRecorder.record() never raises; a failed append is counted instead and
_mutation() turns it into HistoryWriteFailed, which rolls the unit back.
"""

import contextlib
import logging
import threading
import uuid
from collections.abc import Iterator
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from ..core.ports import Clock, TaskRepo
from .task_errors import HistoryWriteFailed
from .task_history import HistoryRecorder
from .task_lifecycle import check_transition, is_past_due, reopens_overdue
from .task_models import (
    ChangeKind,
    ChangeOrigin,
    HistoryEntry,
    Task,
    TaskFields,
    TaskQuery,
    TaskStatus,
)
from .task_query import DEFAULT_DUE_SOON_WINDOW, run_query
from .task_rules import validate_fields

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(
        self,
        store: TaskRepo,
        *,
        clock: Clock = datetime.now,
        due_soon: timedelta = DEFAULT_DUE_SOON_WINDOW,
    ) -> None:
        self._store = store
        self._clock = clock
        self._due_soon = due_soon
        self._lock = threading.RLock()
        self.history = HistoryRecorder(store, clock)

    def now(self) -> datetime:
        return self._clock()

    @contextlib.contextmanager
    def _mutation(self) -> Iterator[None]:
        with self._lock, self._store.transaction():
            failures = self.history.failures
            yield
            if self.history.failures != failures:
                # Raised inside the transaction so the change is rolled back with it.
                raise HistoryWriteFailed("Audit log unavailable; the change was not saved.")

    # ---- mutations ----

    def create(self, fields: TaskFields) -> Task:
        validate_fields(fields)

        now = self._clock()
        task = Task(
            id=str(uuid.uuid4()),
            title=fields.title,
            description=fields.description,
            due_date=fields.due_date,
            due_time=fields.due_time,
            importance=fields.importance,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        with self._mutation():
            self._store.insert(task)
            self.history.record(task.id, ChangeKind.CREATION, origin=ChangeOrigin.MANUAL)

        logger.info("Task created id=%s importance=%s", task.id, task.importance.value)
        return task

    def update(self, task_id: str, fields: TaskFields) -> Task | None:
        with self._mutation():
            current = self._store.find(task_id)
            if current is None:
                return None
            return self._apply_update(current, fields)

    def edit(self, task_id: str, **changes: Any) -> Task | None:
        """Partial update: fields not named in `changes` keep their stored value."""
        with self._mutation():
            current = self._store.find(task_id)
            if current is None:
                return None
            return self._apply_update(current, replace(TaskFields.of(current), **changes))

    def _apply_update(self, current: Task, fields: TaskFields) -> Task:
        validate_fields(fields)

        task_id = current.id
        now = self._clock()
        reopen = reopens_overdue(current, fields, now.date())
        updated = replace(
            current,
            title=fields.title,
            description=fields.description,
            due_date=fields.due_date,
            due_time=fields.due_time,
            importance=fields.importance,
            status=TaskStatus.PENDING if reopen else current.status,
            updated_at=now,
        )
        self._store.replace(task_id, updated)

        if reopen:
            self.history.record(
                task_id,
                ChangeKind.STATUS_CHANGE,
                field="status",
                old_value=TaskStatus.OVERDUE.value,
                new_value=TaskStatus.PENDING.value,
                origin=ChangeOrigin.AUTOMATIC,
            )
            logger.info(
                "Task %s reopened: due moved to %s %s", task_id, fields.due_date, fields.due_time
            )

        edits = self.history.record_edits(task_id, TaskFields.of(current), fields)
        logger.info("Task updated id=%s changed_fields=%s", task_id, edits)
        return updated

    def delete(self, task_id: str) -> bool:
        with self._mutation():
            if self._store.find(task_id) is None:
                return False
            # Final entry goes in before the record disappears.
            self.history.record(task_id, ChangeKind.DELETION, origin=ChangeOrigin.MANUAL)
            removed = self._store.remove(task_id)

        logger.info("Task deleted id=%s", task_id)
        return removed

    def set_status(self, task_id: str, status: TaskStatus) -> Task | None:
        with self._mutation():
            current = self._store.find(task_id)
            if current is None:
                return None

            check_transition(current.status, status)
            if current.status == status:
                return current

            updated = replace(current, status=status, updated_at=self._clock())
            self._store.replace(task_id, updated)
            self.history.record(
                task_id,
                ChangeKind.STATUS_CHANGE,
                field="status",
                old_value=current.status.value,
                new_value=status.value,
                origin=ChangeOrigin.MANUAL,
            )

        logger.info("Task %s -> %s", task_id, status.value)
        return updated

    def check_overdue(self) -> list[str]:
        """
        Overdue sweep: promote every Pending task past its due moment to Overdue.

        Idempotent; returns the ids flipped by this pass.
        """
        flipped: list[str] = []
        with self._mutation():
            now = self._clock()
            for task in self._store.find_all():
                if not is_past_due(task, now):
                    continue
                self._store.replace(
                    task.id, replace(task, status=TaskStatus.OVERDUE, updated_at=now)
                )
                self.history.record(
                    task.id,
                    ChangeKind.STATUS_CHANGE,
                    field="status",
                    old_value=TaskStatus.PENDING.value,
                    new_value=TaskStatus.OVERDUE.value,
                    origin=ChangeOrigin.AUTOMATIC,
                )
                flipped.append(task.id)

        if flipped:
            logger.info("Overdue sweep flipped %d task(s)", len(flipped))
        return flipped

    # ---- reads ----

    def get(self, task_id: str) -> Task | None:
        with self._lock:
            return self._store.find(task_id)

    def resolve_id(self, raw: str) -> str | None:
        """Accept a full task id or a unique prefix of one."""
        with self._lock:
            if self._store.find(raw) is not None:
                return raw
            matches = [t.id for t in self._store.find_all() if t.id.startswith(raw)]
        return matches[0] if len(matches) == 1 else None

    def list_tasks(self, query: TaskQuery | None = None) -> list[Task]:
        """Run the overdue sweep, then filter and sort the current snapshot."""
        with self._lock:
            self.check_overdue()
            return run_query(
                self._store.find_all(),
                query or TaskQuery(),
                self._clock(),
                due_soon=self._due_soon,
            )

    def get_history(
        self,
        task_id: str,
        kind: ChangeKind | str | None = None,
        origin: ChangeOrigin | str | None = None,
    ) -> list[HistoryEntry]:
        with self._lock:
            return self.history.history(task_id, kind=kind, origin=origin)
