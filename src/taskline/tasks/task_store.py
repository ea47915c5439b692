# src/taskline/tasks/task_store.py

from __future__ import annotations

import contextlib
import dataclasses
import logging
import sqlite3
from collections.abc import Iterator
from datetime import date, datetime, time
from pathlib import Path

from .task_models import ChangeKind, ChangeOrigin, HistoryEntry, Importance, Task, TaskStatus

logger = logging.getLogger(__name__)


class InMemoryTaskStore:
    """
    Process-memory task store.

    Tasks are indexed by id; the history log is a plain list in append order.
    Every task that goes in or out is copied, so callers never hold a live
    reference to stored state.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._history: list[HistoryEntry] = []
        self._in_tx = False

    def close(self) -> None:
        """Compatibility hook for shutdown (nothing to release)."""
        return

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_tx:
            yield
            return

        tasks_before = dict(self._tasks)
        history_len = len(self._history)
        self._in_tx = True
        try:
            yield
        except BaseException:
            self._tasks = tasks_before
            del self._history[history_len:]
            raise
        finally:
            self._in_tx = False

    def insert(self, task: Task) -> None:
        self._tasks[task.id] = dataclasses.replace(task)

    def find(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return dataclasses.replace(task) if task is not None else None

    def find_all(self) -> list[Task]:
        return [dataclasses.replace(t) for t in self._tasks.values()]

    def replace(self, task_id: str, task: Task) -> None:
        if task_id not in self._tasks:
            raise KeyError(task_id)
        self._tasks[task_id] = dataclasses.replace(task)

    def remove(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    def append_history(self, entry: HistoryEntry) -> None:
        self._history.append(entry)

    def history_for(self, task_id: str) -> list[HistoryEntry]:
        return [h for h in self._history if h.task_id == task_id]


class SqliteTaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Connections:
    - outside a transaction each method opens its own SQLite connection
    - inside transaction() all calls share one connection, committed or
      rolled back as a unit
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._tx_conn: sqlite3.Connection | None = None
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        """Yield the open transaction connection, or a short-lived autocommitting one."""
        if self._tx_conn is not None:
            yield self._tx_conn
            return

        conn = self._get_conn()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        if self._tx_conn is not None:
            yield
            return

        conn = self._get_conn()
        self._tx_conn = conn
        try:
            yield
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._tx_conn = None
            conn.close()

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    description TEXT,
                    due_date TEXT,
                    due_time TEXT,
                    importance TEXT NOT NULL DEFAULT 'Medium',
                    status TEXT NOT NULL DEFAULT 'Pending',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS task_history (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    task_id TEXT NOT NULL,
                    changed_at TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    field TEXT,
                    old_value TEXT,
                    new_value TEXT,
                    origin TEXT NOT NULL DEFAULT 'Manual'
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT")
            add_col("due_date", "TEXT")
            add_col("due_time", "TEXT")
            add_col("importance", "TEXT NOT NULL DEFAULT 'Medium'")
            add_col("status", "TEXT NOT NULL DEFAULT 'Pending'")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status_due ON tasks(status, due_date)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_history_task ON task_history(task_id)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"]),
            description=row["description"],
            due_date=date.fromisoformat(row["due_date"]) if row["due_date"] else None,
            due_time=time.fromisoformat(row["due_time"]) if row["due_time"] else None,
            importance=Importance(row["importance"]),
            status=TaskStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> HistoryEntry:
        return HistoryEntry(
            id=str(row["id"]),
            task_id=str(row["task_id"]),
            changed_at=datetime.fromisoformat(row["changed_at"]),
            kind=ChangeKind(row["kind"]),
            field=row["field"],
            old_value=row["old_value"],
            new_value=row["new_value"],
            origin=ChangeOrigin(row["origin"]),
        )

    @staticmethod
    def _task_params(task: Task) -> tuple:
        return (
            task.title,
            task.description,
            task.due_date.isoformat() if task.due_date else None,
            task.due_time.isoformat(timespec="minutes") if task.due_time else None,
            task.importance.value,
            task.status.value,
            task.created_at.isoformat(),
            task.updated_at.isoformat(),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._conn() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def insert(self, task: Task) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO tasks(
                    title, description, due_date, due_time,
                    importance, status, created_at, updated_at, id
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (*self._task_params(task), task.id),
            )
        logger.debug("Task inserted id=%s status=%s", task.id, task.status.value)

    def find(self, task_id: str) -> Task | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row) if row else None

    def find_all(self) -> list[Task]:
        with self._conn() as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY seq ASC").fetchall()
            return [self._row_to_task(r) for r in rows]

    def replace(self, task_id: str, task: Task) -> None:
        with self._conn() as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, due_date = ?, due_time = ?,
                    importance = ?, status = ?, created_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (*self._task_params(task), task_id),
            )
            if cur.rowcount != 1:
                raise KeyError(task_id)

    def remove(self, task_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            return cur.rowcount == 1

    def append_history(self, entry: HistoryEntry) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO task_history(
                    id, task_id, changed_at, kind, field, old_value, new_value, origin
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.task_id,
                    entry.changed_at.isoformat(),
                    entry.kind.value,
                    entry.field,
                    entry.old_value,
                    entry.new_value,
                    entry.origin.value,
                ),
            )

    def history_for(self, task_id: str) -> list[HistoryEntry]:
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT * FROM task_history WHERE task_id = ? ORDER BY seq ASC",
                (task_id,),
            ).fetchall()
            return [self._row_to_entry(r) for r in rows]
