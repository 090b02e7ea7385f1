# src/dayplanner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the client state managers.

The managers depend on Protocols instead of concrete implementations.
This keeps the HTTP transport and the local session file swappable and makes
testing easier (see tests/fakes.py).
"""

from typing import Any, Protocol

from .models import Task, TaskDraft, User


class AuthApi(Protocol):
    """Authentication endpoints as seen by the session manager."""

    async def login(self, username: str, password: str) -> User: ...
    async def register(self, username: str, password: str) -> User: ...
    async def logout(self) -> None: ...
    async def current_user(self) -> User: ...


class TasksApi(Protocol):
    """Task endpoints as seen by the task manager. All calls are scoped by the session cookie."""

    async def list_tasks(self) -> list[Task]: ...
    async def create_task(self, draft: TaskDraft) -> Task: ...
    async def update_task(self, task_id: int, changes: dict[str, Any]) -> Task: ...
    async def delete_task(self, task_id: int) -> None: ...


class SessionStorage(Protocol):
    """Local persisted mirror of the session: {user, issued_at}."""

    def load(self) -> Any | None: ...
    def save(self, record: Any) -> None: ...
    def clear(self) -> None: ...
