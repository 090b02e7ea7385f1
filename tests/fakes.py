# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from dayplanner.client.session_store import SessionRecord
from dayplanner.core.errors import DayplannerError, InvalidCredentialsError, NotFoundOrUnauthorized
from dayplanner.core.models import Task, TaskDraft, User


class FakeClock:
    """Manually advanced epoch clock (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDateTimeClock:
    """Manually advanced aware-datetime clock for the reminder engine."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@dataclass
class MemorySessionStore:
    """In-memory SessionStorage."""

    record: SessionRecord | None = None
    saves: int = 0

    def load(self) -> SessionRecord | None:
        return self.record

    def save(self, record: SessionRecord) -> None:
        self.record = record
        self.saves += 1

    def clear(self) -> None:
        self.record = None


@dataclass
class FakeApi:
    """
    In-memory AuthApi + TasksApi.

    Set `fail_with` to make the next call(s) raise; `calls` records method names
    so tests can assert what hit the network.
    """

    users: dict[str, tuple[User, str]] = field(default_factory=dict)
    tasks: dict[int, Task] = field(default_factory=dict)
    server_user: User | None = None
    logged_in: User | None = None
    fail_with: DayplannerError | None = None
    fail_once: bool = True
    calls: list[str] = field(default_factory=list)
    closed: bool = False
    _next_id: int = 1

    def _check(self, name: str) -> None:
        self.calls.append(name)
        err = self.fail_with
        if err is not None:
            if self.fail_once:
                self.fail_with = None
            raise err

    # ---- auth ----

    async def login(self, username: str, password: str) -> User:
        self._check("login")
        entry = self.users.get(username)
        if entry is None or entry[1] != password:
            raise InvalidCredentialsError()
        self.logged_in = entry[0]
        return entry[0]

    async def register(self, username: str, password: str) -> User:
        self._check("register")
        user = User(id=len(self.users) + 1, username=username)
        self.users[username] = (user, password)
        self.logged_in = user
        return user

    async def logout(self) -> None:
        self._check("logout")
        self.logged_in = None
        self.server_user = None

    async def current_user(self) -> User:
        self._check("current_user")
        if self.server_user is None:
            raise InvalidCredentialsError("Not authenticated")
        return self.server_user

    # ---- tasks ----

    def seed(self, **kwargs: Any) -> Task:
        kwargs.setdefault("created_at", datetime(2024, 5, 1).date())
        task = Task(id=self._next_id, **kwargs)
        self._next_id += 1
        self.tasks[task.id] = task
        return task

    async def list_tasks(self) -> list[Task]:
        self._check("list_tasks")
        return list(self.tasks.values())

    async def create_task(self, draft: TaskDraft) -> Task:
        self._check("create_task")
        return self.seed(
            title=draft.title,
            created_at=draft.created_at,
            remind_on=draft.remind_on,
            is_important=draft.is_important,
            is_completed=draft.is_completed,
        )

    async def update_task(self, task_id: int, changes: dict[str, Any]) -> Task:
        self._check("update_task")
        if task_id not in self.tasks:
            raise NotFoundOrUnauthorized()
        self.tasks[task_id] = replace(self.tasks[task_id], **changes)
        return self.tasks[task_id]

    async def delete_task(self, task_id: int) -> None:
        self._check("delete_task")
        if self.tasks.pop(task_id, None) is None:
            raise NotFoundOrUnauthorized()

    async def aclose(self) -> None:
        self.closed = True
