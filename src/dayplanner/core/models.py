# src/dayplanner/core/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from .timeutil import format_instant, parse_day, parse_instant

# Task fields a partial update may touch (python name -> wire name).
UPDATABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "remind_on": "remindOn",
    "is_important": "isImportant",
    "is_completed": "isCompleted",
}


@dataclass(slots=True, frozen=True)
class User:
    id: int
    username: str

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> User:
        return cls(id=int(data["id"]), username=str(data["username"]))


@dataclass(slots=True, frozen=True)
class Task:
    """
    A to-do item anchored to a calendar day.

    `created_at` is the day the task belongs to (not an audit timestamp).
    `remind_on` is an aware UTC datetime or None.
    """

    id: int
    title: str
    created_at: date
    remind_on: datetime | None = None
    is_important: bool = False
    is_completed: bool = False
    user_id: int | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "createdAt": self.created_at.isoformat(),
            "remindOn": format_instant(self.remind_on) if self.remind_on else None,
            "isImportant": self.is_important,
            "isCompleted": self.is_completed,
            "userID": self.user_id,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Task:
        remind_raw = data.get("remindOn")
        user_raw = data.get("userID")
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            created_at=parse_day(data["createdAt"]),
            remind_on=parse_instant(remind_raw) if remind_raw else None,
            is_important=bool(data.get("isImportant", False)),
            is_completed=bool(data.get("isCompleted", False)),
            user_id=int(user_raw) if user_raw is not None else None,
        )


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """Everything needed to create a task; the server assigns id and owner."""

    title: str
    created_at: date
    remind_on: datetime | None = None
    is_important: bool = False
    is_completed: bool = False

    def to_json(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "createdAt": self.created_at.isoformat(),
            "remindOn": format_instant(self.remind_on) if self.remind_on else None,
            "isImportant": self.is_important,
            "isCompleted": self.is_completed,
        }


def changes_to_json(changes: dict[str, Any]) -> dict[str, Any]:
    """Translate a python-side partial update into the wire body."""
    body: dict[str, Any] = {}
    for name, value in changes.items():
        wire = UPDATABLE_FIELDS.get(name)
        if wire is None:
            raise ValueError(f"unknown task field: {name}")
        if name == "remind_on":
            body[wire] = format_instant(value) if value else None
        else:
            body[wire] = value
    return body


@dataclass(slots=True)
class Notification:
    """Client-only reminder notice; never persisted."""

    id: int
    task_id: int
    title: str
    message: str
    created_at: datetime
    is_read: bool = False
