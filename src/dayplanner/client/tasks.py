# src/dayplanner/client/tasks.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any

from ..core.errors import DayplannerError, NotFoundOrUnauthorized
from ..core.models import UPDATABLE_FIELDS, Task, TaskDraft, User
from ..core.ports import TasksApi
from .api import describe_error
from .session import SessionManager

logger = logging.getLogger(__name__)


class TaskManager:
    """
    Client-side cache of the current user's tasks.

    - fetch replaces the whole cache
    - create appends the server's copy
    - update is optimistic: the cache changes first, and a rejected update puts
      back the exact entry that was there before
    - delete waits for the server before removing anything

    Every public operation reports failures through `error` and returns
    normally. Two overlapping updates of the same id are not coordinated.
    """

    def __init__(self, api: TasksApi, session: SessionManager) -> None:
        self._api = api
        self._session = session

        self.tasks: list[Task] = []
        self.is_loading = False
        self.error: str | None = None

    # ---- reads ----

    def get_task(self, task_id: int) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def tasks_for_day(self, day: date) -> list[Task]:
        return [t for t in self.tasks if t.created_at == day]

    def clear(self) -> None:
        self.tasks = []
        self.error = None

    def _replace_entry(self, task_id: int, task: Task) -> None:
        self.tasks = [task if t.id == task_id else t for t in self.tasks]

    def _fail(self, exc: BaseException, fallback: str) -> None:
        self.error = describe_error(exc, fallback)

    # ---- operations ----

    async def fetch_tasks(self) -> None:
        if self._session.user is None:
            return

        self.is_loading = True
        self.error = None
        try:
            fresh = await self._api.list_tasks()
        except DayplannerError as e:
            logger.warning("Fetching tasks failed: %s", e)
            self._fail(e, "Failed to fetch tasks")
            return
        finally:
            self.is_loading = False

        self.tasks = list(fresh)
        logger.debug("Task cache replaced: %d tasks", len(self.tasks))

    async def create_task(self, draft: TaskDraft) -> Task | None:
        self.is_loading = True
        self.error = None
        try:
            created = await self._api.create_task(draft)
        except DayplannerError as e:
            logger.warning("Creating task failed: %s", e)
            self._fail(e, "Failed to create task")
            return None
        finally:
            self.is_loading = False

        self.tasks = [*self.tasks, created]
        return created

    async def update_task(self, task_id: int, **changes: Any) -> bool:
        """
        Apply `changes` (title / remind_on / is_important / is_completed) optimistically.
        Returns True when the server accepted the update.
        """
        self.error = None

        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            self.error = f"Cannot update field(s): {', '.join(sorted(unknown))}"
            return False

        previous = self.get_task(task_id)
        if previous is None:
            self._fail(NotFoundOrUnauthorized(), "Task not found")
            return False

        self._replace_entry(task_id, replace(previous, **changes))

        try:
            confirmed = await self._api.update_task(task_id, changes)
        except DayplannerError as e:
            logger.warning("Updating task %s failed, rolling back: %s", task_id, e)
            # Only roll back if the entry is still cached (a concurrent fetch/delete may have replaced it).
            if self.get_task(task_id) is not None:
                self._replace_entry(task_id, previous)
            self._fail(e, "Failed to update task")
            return False

        if self.get_task(task_id) is not None:
            self._replace_entry(task_id, confirmed)
        return True

    async def delete_task(self, task_id: int) -> bool:
        self.error = None
        try:
            await self._api.delete_task(task_id)
        except DayplannerError as e:
            logger.warning("Deleting task %s failed: %s", task_id, e)
            self._fail(e, "Failed to delete task")
            return False

        self.tasks = [t for t in self.tasks if t.id != task_id]
        return True

    # ---- session wiring ----

    def on_user_changed(self, user: User | None) -> None:
        """Session listener: a different (or no) user invalidates the cache."""
        self.clear()
        logger.debug("Task cache cleared for user=%s", user.id if user else None)
