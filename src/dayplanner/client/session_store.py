# src/dayplanner/client/session_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.models import User

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SessionRecord:
    user: User
    issued_at: float  # epoch seconds, client clock

    def to_json(self) -> dict[str, Any]:
        return {"user": self.user.to_json(), "timestamp": self.issued_at}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> SessionRecord:
        return cls(user=User.from_json(data["user"]), issued_at=float(data["timestamp"]))


class FileSessionStore:
    """
    Local mirror of the session: one small JSON file.

    A missing, unreadable or malformed file is simply "no session".
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SessionRecord | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
            if not isinstance(data, dict):
                return None
            return SessionRecord.from_json(data)
        except Exception:
            logger.warning("Ignoring unreadable session file %s", self._path, exc_info=True)
            return None

    def save(self, record: SessionRecord) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(record.to_json(), ensure_ascii=False), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            # Best-effort: keep the file private on disk.
            os.chmod(self._path, 0o600)
        logger.debug("Session saved for user_id=%s", record.user.id)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
