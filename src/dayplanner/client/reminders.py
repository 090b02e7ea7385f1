# src/dayplanner/client/reminders.py

from __future__ import annotations

"""
Reminder engine.

Derives in-app notifications from the task cache by polling. Each scan looks
at the half-open window (last_check_time, now]: a reminder landing exactly on
a scan boundary belongs to the earlier scan, so it is neither skipped nor
fired twice.
"""

import itertools
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, tzinfo

from ..core.models import Notification, Task
from ..core.timeutil import floating_to_local

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Task Reminder"

NotificationListener = Callable[[Notification], object]


def reminder_message(task: Task) -> str:
    return f"It's time for: {task.title}"


class ReminderEngine:
    """
    Notifications for tasks whose reminder time has just passed.

    `tasks` is a callable returning the current task cache, so a scan always
    sees whatever the task manager holds right now (possibly stale; reminders
    may then be late, never lost while the task stays cached).
    """

    def __init__(
        self,
        tasks: Callable[[], Iterable[Task]],
        *,
        local_tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._tasks = tasks
        self._tz = local_tz
        self._clock = clock or self._local_now
        self._ids = itertools.count(1)
        self._listeners: list[NotificationListener] = []

        self.notifications: list[Notification] = []
        self.last_check_time: datetime = self._clock()

    def _local_now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)

    def add_listener(self, callback: NotificationListener) -> None:
        """Called once for every newly emitted notification."""
        self._listeners.append(callback)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    def local_reminder_time(self, task: Task) -> datetime | None:
        if task.remind_on is None:
            return None
        return floating_to_local(task.remind_on, self._tz)

    def add_notification(self, *, task_id: int, title: str, message: str) -> Notification:
        notification = Notification(
            id=next(self._ids),
            task_id=task_id,
            title=title,
            message=message,
            created_at=self._clock(),
        )
        self.notifications.append(notification)
        for cb in list(self._listeners):
            try:
                cb(notification)
            except Exception:
                logger.exception("Notification listener failed")
        return notification

    def check_reminders(self, now: datetime | None = None) -> list[Notification]:
        """Emit one notification per incomplete task whose reminder is in (last_check_time, now]."""
        now = now or self._clock()
        since = self.last_check_time
        emitted: list[Notification] = []

        for task in list(self._tasks()):
            if task.is_completed:
                continue
            when = self.local_reminder_time(task)
            if when is None:
                continue
            if since < when <= now:
                emitted.append(
                    self.add_notification(
                        task_id=task.id,
                        title=REMINDER_TITLE,
                        message=reminder_message(task),
                    )
                )

        self.last_check_time = now
        if emitted:
            logger.info("Reminders fired: %s", [n.task_id for n in emitted])
        return emitted

    def mark_as_read(self, notification_id: int) -> bool:
        for n in self.notifications:
            if n.id == notification_id:
                n.is_read = True
                return True
        return False

    def clear_notifications(self) -> None:
        # last_check_time stays put: reminders already passed do not come back.
        self.notifications = []

    def reset(self) -> None:
        """Forget every notification and start the window at now (identity switch)."""
        self.notifications = []
        self.last_check_time = self._clock()
