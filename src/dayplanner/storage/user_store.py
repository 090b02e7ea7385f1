# src/dayplanner/storage/user_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import UsernameTakenError
from ..core.models import User

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class UserRecord:
    """Server-side user row; the password hash never leaves the server."""

    id: int
    username: str
    password_hash: str
    created_at: float

    def public(self) -> User:
        return User(id=self.id, username=self.username)


class UserStore:
    """
    SQLite user store.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "dayplanner.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_users()
        except Exception:
            total = -1
        logger.info("UserStore ready db=%s total=%s", self._db_path, total)

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
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserRecord:
        return UserRecord(
            id=int(row["id"]),
            username=str(row["username"]),
            password_hash=str(row["password_hash"]),
            created_at=float(row["created_at"] or 0.0),
        )

    # ---- public API ----

    def count_users(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
            return int(n)
        finally:
            conn.close()

    def create_user(self, username: str, password_hash: str) -> UserRecord:
        """Insert a user; a taken username raises UsernameTakenError and writes nothing."""
        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            try:
                cur.execute(
                    "INSERT INTO users(username, password_hash, created_at) VALUES (?, ?, ?)",
                    (username, password_hash, now),
                )
            except sqlite3.IntegrityError as e:
                raise UsernameTakenError() from e
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for users insert")
            logger.debug("User added id=%s username=%s", rowid, username)
            return UserRecord(id=int(rowid), username=username, password_hash=password_hash, created_at=now)
        finally:
            conn.close()

    def get_by_username(self, username: str) -> UserRecord | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, user_id: int) -> UserRecord | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (int(user_id),)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()
