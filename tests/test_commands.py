# tests/test_commands.py

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
import pytest_asyncio

from dayplanner.cli.commands import (
    NOT_LOGGED_IN,
    CommandRegistry,
    format_task,
    parse_day_arg,
    parse_reminder_arg,
    registry,
)
from dayplanner.client.reminders import ReminderEngine
from dayplanner.client.session import SessionManager
from dayplanner.client.tasks import TaskManager
from dayplanner.config import Settings
from dayplanner.core.models import Task, User
from dayplanner.core.state import ClientState

from .fakes import FakeApi, FakeClock, FakeDateTimeClock, MemorySessionStore


@pytest_asyncio.fixture()
async def state(settings: Settings):
    api = FakeApi()
    api.users["alice"] = (User(id=1, username="alice"), "pw")
    session = SessionManager(api, MemorySessionStore(), clock=FakeClock())
    tasks = TaskManager(api, session)
    reminders = ReminderEngine(lambda: tasks.tasks, local_tz=UTC, clock=FakeDateTimeClock())
    state = ClientState(settings=settings, api=api, session=session, tasks=tasks, reminders=reminders)
    yield state
    await state.aclose()


def test_helpers() -> None:
    today = date(2024, 5, 1)
    assert parse_day_arg("today", today) == today
    assert parse_day_arg("Tomorrow", today) == date(2024, 5, 2)
    assert parse_day_arg("yesterday", today) == date(2024, 4, 30)
    assert parse_day_arg("2024-06-10", today) == date(2024, 6, 10)
    with pytest.raises(ValueError):
        parse_day_arg("someday", today)

    assert parse_reminder_arg("2024-05-01 09:00") == datetime(2024, 5, 1, 9, 0, tzinfo=UTC)

    task = Task(
        id=4,
        title="dentist",
        created_at=today,
        remind_on=datetime(2024, 5, 1, 9, 30, tzinfo=UTC),
        is_important=True,
        is_completed=True,
    )
    assert format_task(task) == "#4 [x] * dentist (remind 2024-05-01 09:30)"


@pytest.mark.asyncio
async def test_registry_routing(state: ClientState) -> None:
    reg = CommandRegistry()

    async def echo(_: ClientState, args: list[str]) -> str:
        return " ".join(args)

    reg.register("echo", echo, help_text="Echo.", aliases=["e"])

    assert await reg.handle(state, "hello") is None
    assert await reg.handle(state, "/echo a b") == "a b"
    assert await reg.handle(state, "/E x") == "x"
    assert (await reg.handle(state, "/nope")).startswith("Unknown command: /nope")
    assert (await reg.handle(state, "/")).startswith("Empty command")
    assert "/echo - Echo." in reg.build_help()


@pytest.mark.asyncio
async def test_task_commands_require_login(state: ClientState) -> None:
    for line in ("/tasks", "/add today x", "/done 1", "/rm 1", "/remind 1 off", "/whoami"):
        assert await registry.handle(state, line) == NOT_LOGGED_IN


@pytest.mark.asyncio
async def test_task_flow(state: ClientState) -> None:
    assert await registry.handle(state, "/login alice wrong") == "Failed: Invalid username or password"
    assert await registry.handle(state, "/login alice pw") == "Logged in as alice."
    assert await registry.handle(state, "/whoami") == "alice (id=1)"

    added = await registry.handle(state, "/add 2024-05-01 buy milk")
    assert added == "Added #1 [ ] buy milk"

    assert await registry.handle(state, "/done 1") == "Task #1 completed."
    assert await registry.handle(state, "/star #1") == "Task #1 marked important."
    assert await registry.handle(state, "/remind 1 2024-05-01T09:00") == "Reminder set for #1 at 2024-05-01 09:00."

    listing = await registry.handle(state, "/tasks 2024-05-01")
    assert listing == "Tasks for 2024-05-01 (1/1 done):\n  #1 [x] * buy milk (remind 2024-05-01 09:00)"

    assert await registry.handle(state, "/tasks 2024-05-02") == "No tasks for 2024-05-02."
    assert (await registry.handle(state, "/done 42")).startswith("Failed:")

    assert await registry.handle(state, "/rm 1") == "Task #1 deleted."
    assert await registry.handle(state, "/logout") == "Logged out."
    assert state.session.user is None


@pytest.mark.asyncio
async def test_notification_commands(state: ClientState) -> None:
    assert await registry.handle(state, "/notifications") == "No notifications."

    n = state.reminders.add_notification(task_id=1, title="Task Reminder", message="It's time for: x")
    listing = await registry.handle(state, "/n")
    assert "(1 unread)" in listing
    assert "Task Reminder: It's time for: x" in listing

    assert await registry.handle(state, f"/read {n.id}") == f"Notification {n.id} marked as read."
    assert await registry.handle(state, "/read 99") == "No notification 99."
    assert await registry.handle(state, "/clear") == "Notifications cleared."
    assert state.reminders.notifications == []
