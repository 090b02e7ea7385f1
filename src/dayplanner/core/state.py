# src/dayplanner/core/state.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field

from ..client.api import ApiClient
from ..client.reminders import ReminderEngine
from ..client.session import SessionManager
from ..client.tasks import TaskManager
from ..config import Settings
from .models import User
from .polling import run_periodic

logger = logging.getLogger(__name__)


@dataclass
class ClientState:
    """
    Everything the console client works with, passed around explicitly.

    Owns the two polling loops (session expiry, reminder scan); `aclose()`
    cancels them and closes the HTTP client so nothing keeps running.
    """

    settings: Settings
    api: ApiClient
    session: SessionManager
    tasks: TaskManager
    reminders: ReminderEngine

    _loops: list[asyncio.Task] = field(default_factory=list, init=False, repr=False)
    _pending: set[asyncio.Task] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        self.session.add_listener(self._on_user_changed)

    def _on_user_changed(self, user: User | None) -> None:
        # Notifications quote task titles; they belong to the previous identity.
        self.tasks.on_user_changed(user)
        self.reminders.reset()
        if user is None:
            return
        # Refetch for the new identity without blocking the caller.
        try:
            job = asyncio.get_running_loop().create_task(self.tasks.fetch_tasks())
        except RuntimeError:
            return
        self._pending.add(job)
        job.add_done_callback(self._pending.discard)

    @property
    def loops_running(self) -> bool:
        return any(not t.done() for t in self._loops)

    async def start(self) -> None:
        """Resume the session, load tasks, start both timers."""
        await self.session.start()
        await self.tasks.fetch_tasks()
        self.start_loops()

    def start_loops(self) -> None:
        if self.loops_running:
            return
        s = self.settings
        self._loops = [
            asyncio.create_task(
                run_periodic(
                    self.session.check_session_expiration,
                    interval_seconds=s.session_check_interval_seconds,
                    name="session-check",
                ),
                name="session-check",
            ),
            asyncio.create_task(
                run_periodic(
                    self.reminders.check_reminders,
                    interval_seconds=s.reminder_interval_seconds,
                    name="reminder-scan",
                ),
                name="reminder-scan",
            ),
        ]
        logger.debug("Client loops started")

    async def stop_loops(self) -> None:
        loops, self._loops = self._loops, []
        pending = list(self._pending)
        for t in [*loops, *pending]:
            t.cancel()
        for t in [*loops, *pending]:
            with contextlib.suppress(asyncio.CancelledError):
                await t

    async def aclose(self) -> None:
        await self.stop_loops()
        await self.api.aclose()
        logger.debug("Client state closed")
