# src/dayplanner/storage/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..core.models import Task
from ..core.timeutil import from_epoch, to_epoch

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TaskStore:
    """
    SQLite task store.

    Every query that reads or writes a task filters by `user_id`; callers never
    see or touch a row owned by someone else. A foreign id behaves exactly like
    a missing one.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "dayplanner.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    created_on TEXT NOT NULL,
                    remind_on REAL,
                    is_important INTEGER NOT NULL DEFAULT 0,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    inserted_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("remind_on", "REAL")
            add_col("is_important", "INTEGER NOT NULL DEFAULT 0")
            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id, created_on)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            created_at=date.fromisoformat(str(row["created_on"])),
            remind_on=from_epoch(row["remind_on"]) if row["remind_on"] is not None else None,
            is_important=bool(row["is_important"]),
            is_completed=bool(row["is_completed"]),
            user_id=int(row["user_id"]),
        )

    def _fetch_one(self, conn: sqlite3.Connection, task_id: int, user_id: int) -> Task | None:
        row = conn.execute(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
            (int(task_id), int(user_id)),
        ).fetchone()
        return self._row_to_task(row) if row else None

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        user_id: int,
        title: str,
        created_at: date,
        remind_on: datetime | None = None,
        is_important: bool = False,
        is_completed: bool = False,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(
                    user_id, title, created_on, remind_on,
                    is_important, is_completed, inserted_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    int(user_id),
                    title.strip(),
                    created_at.isoformat(),
                    to_epoch(remind_on) if remind_on else None,
                    int(bool(is_important)),
                    int(bool(is_completed)),
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task = self._fetch_one(conn, int(rowid), user_id)
            if task is None:
                raise RuntimeError(f"task {rowid} vanished right after insert")
            logger.debug("Task added id=%s user=%s day=%s", task.id, user_id, task.created_at)
            return task
        finally:
            conn.close()

    def list_tasks(self, user_id: int) -> list[Task]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE user_id = ? ORDER BY created_on ASC, id ASC",
                (int(user_id),),
            ).fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def update_task(
        self,
        task_id: int,
        user_id: int,
        *,
        title: str | None = None,
        remind_on: datetime | None = _UNSET,
        is_important: bool | None = None,
        is_completed: bool | None = None,
    ) -> Task | None:
        """
        Apply a partial update to one of the user's tasks.

        `remind_on=None` clears the reminder; leaving it out keeps it.
        Returns the updated task, or None when no such task belongs to the user.
        """
        fields: list[str] = []
        params: list[Any] = []

        if title is not None:
            fields.append("title = ?")
            params.append(title.strip())

        if remind_on is not _UNSET:
            fields.append("remind_on = ?")
            params.append(to_epoch(remind_on) if remind_on else None)

        if is_important is not None:
            fields.append("is_important = ?")
            params.append(int(bool(is_important)))

        if is_completed is not None:
            fields.append("is_completed = ?")
            params.append(int(bool(is_completed)))

        conn = self._get_conn()
        try:
            if fields:
                fields.append("updated_at = ?")
                params.append(time.time())
                params.extend([int(task_id), int(user_id)])
                cur = conn.execute(
                    f"UPDATE tasks SET {', '.join(fields)} WHERE id = ? AND user_id = ?",
                    params,
                )
                conn.commit()
                if cur.rowcount == 0:
                    return None
            return self._fetch_one(conn, task_id, user_id)
        finally:
            conn.close()

    def delete_task(self, task_id: int, user_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "DELETE FROM tasks WHERE id = ? AND user_id = ?",
                (int(task_id), int(user_id)),
            )
            conn.commit()
            deleted = cur.rowcount == 1
            if deleted:
                logger.debug("Task deleted id=%s user=%s", task_id, user_id)
            return deleted
        finally:
            conn.close()
