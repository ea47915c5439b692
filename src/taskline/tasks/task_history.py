# src/taskline/tasks/task_history.py

from __future__ import annotations

import logging
import uuid
from datetime import date, time
from enum import Enum

from ..core.ports import Clock, TaskRepo
from .task_models import (
    ALL,
    TRACKED_FIELDS,
    ChangeKind,
    ChangeOrigin,
    HistoryEntry,
    TaskFields,
)
from .task_rules import format_due_date, format_due_time

logger = logging.getLogger(__name__)


def render_value(value: object) -> str | None:
    """Text form of a field value as it appears in the audit log."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return format_due_date(value)
    if isinstance(value, time):
        return format_due_time(value)
    return str(value)


class HistoryRecorder:
    """
    Append-only audit log writer and reader.

    record() never raises: a failed append is logged and counted in `failures`,
    which TaskService checks before letting its transaction commit.
    """

    def __init__(self, store: TaskRepo, clock: Clock) -> None:
        self._store = store
        self._clock = clock
        self.failures = 0

    def record(
        self,
        task_id: str,
        kind: ChangeKind,
        *,
        field: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
        origin: ChangeOrigin = ChangeOrigin.MANUAL,
    ) -> HistoryEntry | None:
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            task_id=task_id,
            changed_at=self._clock(),
            kind=kind,
            field=field,
            old_value=old_value,
            new_value=new_value,
            origin=origin,
        )
        try:
            self._store.append_history(entry)
        except Exception:
            self.failures += 1
            logger.exception("append_history failed task_id=%s kind=%s", task_id, kind.value)
            return None

        logger.debug(
            "History task_id=%s kind=%s field=%s origin=%s",
            task_id,
            kind.value,
            field,
            origin.value,
        )
        return entry

    def record_edits(self, task_id: str, before: TaskFields, after: TaskFields) -> int:
        """One Edit entry per tracked field whose value changed. Returns the count."""
        written = 0
        for name in TRACKED_FIELDS:
            old = getattr(before, name)
            new = getattr(after, name)
            if old == new:
                continue
            self.record(
                task_id,
                ChangeKind.EDIT,
                field=name,
                old_value=render_value(old),
                new_value=render_value(new),
                origin=ChangeOrigin.MANUAL,
            )
            written += 1
        return written

    def history(
        self,
        task_id: str,
        kind: ChangeKind | str | None = None,
        origin: ChangeOrigin | str | None = None,
    ) -> list[HistoryEntry]:
        """
        Entries for task_id, most recent first.

        kind/origin narrow the result; None or the "All" sentinel disables the filter.
        """
        entries = self._store.history_for(task_id)

        if kind is not None and kind != ALL:
            entries = [e for e in entries if e.kind == kind]
        if origin is not None and origin != ALL:
            entries = [e for e in entries if e.origin == origin]

        # Reverse first so that equal timestamps keep latest-appended first.
        entries.reverse()
        entries.sort(key=lambda e: e.changed_at, reverse=True)
        return entries
