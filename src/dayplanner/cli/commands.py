# src/dayplanner/cli/commands.py

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, date, datetime, timedelta

from ..core.models import Task, TaskDraft
from ..core.state import ClientState

CommandHandler = Callable[[ClientState, list[str]], Awaitable[str]]

NOT_LOGGED_IN = "Not logged in. Use /login <user> <password> or /register <user> <password>."


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: ClientState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / formatting helpers ----


def parse_day_arg(raw: str, today: date | None = None) -> date:
    today = today or date.today()
    s = raw.strip().lower()
    if s == "today":
        return today
    if s == "tomorrow":
        return today + timedelta(days=1)
    if s == "yesterday":
        return today - timedelta(days=1)
    return date.fromisoformat(s)


def parse_reminder_arg(raw: str) -> datetime:
    """
    Local wall-clock input ("2024-05-01T09:00" or "2024-05-01 09:00").

    Stored with the same digits in UTC; the reminder engine reads them back as local time.
    """
    local = datetime.fromisoformat(raw.strip().replace(" ", "T"))
    return local.replace(tzinfo=None).replace(tzinfo=UTC)


def format_task(task: Task) -> str:
    done = "x" if task.is_completed else " "
    star = " *" if task.is_important else ""
    remind = ""
    if task.remind_on is not None:
        remind = f" (remind {task.remind_on.strftime('%Y-%m-%d %H:%M')})"
    return f"#{task.id} [{done}]{star} {task.title}{remind}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def _outcome(ok: bool, success: str, error: str | None) -> str:
    if ok:
        return success
    return f"Failed: {error or 'unknown error'}"


# ---- session commands ----


async def cmd_help(state: ClientState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_login(state: ClientState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <user> <password>"
    ok = await state.session.login(args[0], args[1])
    return _outcome(ok, f"Logged in as {args[0]}.", state.session.error)


async def cmd_register(state: ClientState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /register <user> <password>"
    ok = await state.session.register(args[0], args[1])
    return _outcome(ok, f"Registered and logged in as {args[0]}.", state.session.error)


async def cmd_logout(state: ClientState, args: list[str]) -> str:
    await state.session.logout()
    if state.session.error:
        return f"Logged out locally ({state.session.error})."
    return "Logged out."


async def cmd_whoami(state: ClientState, args: list[str]) -> str:
    user = state.session.user
    if user is None:
        return NOT_LOGGED_IN
    return f"{user.username} (id={user.id})"


# ---- task commands ----


async def cmd_tasks(state: ClientState, args: list[str]) -> str:
    """
    /tasks             -> today's tasks
    /tasks 2024-05-01  -> tasks of that day
    /tasks all         -> everything, grouped by day
    """
    if state.session.user is None:
        return NOT_LOGGED_IN

    if args and args[0].lower() == "all":
        tasks = sorted(state.tasks.tasks, key=lambda t: (t.created_at, t.id))
        if not tasks:
            return "No tasks."
        lines: list[str] = []
        current: date | None = None
        for t in tasks:
            if t.created_at != current:
                current = t.created_at
                lines.append(f"{current.isoformat()}:")
            lines.append(f"  {format_task(t)}")
        return "\n".join(lines)

    try:
        day = parse_day_arg(args[0]) if args else date.today()
    except ValueError:
        return "Usage: /tasks [YYYY-MM-DD|today|tomorrow|all]"

    tasks = state.tasks.tasks_for_day(day)
    if not tasks:
        return f"No tasks for {day.isoformat()}."
    done = sum(1 for t in tasks if t.is_completed)
    lines = [f"Tasks for {day.isoformat()} ({done}/{len(tasks)} done):"]
    lines.extend(f"  {format_task(t)}" for t in tasks)
    return "\n".join(lines)


async def cmd_add(state: ClientState, args: list[str]) -> str:
    if state.session.user is None:
        return NOT_LOGGED_IN
    if len(args) < 2:
        return "Usage: /add <YYYY-MM-DD|today|tomorrow> <title...>"
    try:
        day = parse_day_arg(args[0])
    except ValueError:
        return f"Invalid date: {args[0]}"

    created = await state.tasks.create_task(TaskDraft(title=" ".join(args[1:]), created_at=day))
    if created is None:
        return _outcome(False, "", state.tasks.error)
    return f"Added {format_task(created)}"


def _flag_command(field: str, value: bool, verb: str, label: str):
    async def handler(state: ClientState, args: list[str]) -> str:
        if state.session.user is None:
            return NOT_LOGGED_IN
        task_id = _parse_id(args)
        if task_id is None:
            return f"Usage: /{verb} <id>"
        ok = await state.tasks.update_task(task_id, **{field: value})
        return _outcome(ok, f"Task #{task_id} {label}.", state.tasks.error)

    return handler


async def cmd_rename(state: ClientState, args: list[str]) -> str:
    if state.session.user is None:
        return NOT_LOGGED_IN
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /rename <id> <title...>"
    ok = await state.tasks.update_task(task_id, title=" ".join(args[1:]))
    return _outcome(ok, f"Task #{task_id} renamed.", state.tasks.error)


async def cmd_remind(state: ClientState, args: list[str]) -> str:
    """
    /remind <id> 2024-05-01T09:00  -> set a reminder (local time)
    /remind <id> off               -> remove it
    """
    if state.session.user is None:
        return NOT_LOGGED_IN
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /remind <id> <YYYY-MM-DDTHH:MM|off>"

    raw = " ".join(args[1:])
    if raw.lower() in ("off", "none", "clear"):
        ok = await state.tasks.update_task(task_id, remind_on=None)
        return _outcome(ok, f"Reminder removed from #{task_id}.", state.tasks.error)

    try:
        when = parse_reminder_arg(raw)
    except ValueError:
        return f"Invalid reminder time: {raw}"
    ok = await state.tasks.update_task(task_id, remind_on=when)
    return _outcome(ok, f"Reminder set for #{task_id} at {when.strftime('%Y-%m-%d %H:%M')}.", state.tasks.error)


async def cmd_rm(state: ClientState, args: list[str]) -> str:
    if state.session.user is None:
        return NOT_LOGGED_IN
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    ok = await state.tasks.delete_task(task_id)
    return _outcome(ok, f"Task #{task_id} deleted.", state.tasks.error)


async def cmd_refresh(state: ClientState, args: list[str]) -> str:
    if state.session.user is None:
        return NOT_LOGGED_IN
    await state.tasks.fetch_tasks()
    if state.tasks.error:
        return f"Failed: {state.tasks.error}"
    return f"{len(state.tasks.tasks)} task(s) loaded."


# ---- notification commands ----


async def cmd_notifications(state: ClientState, args: list[str]) -> str:
    items = state.reminders.notifications
    if not items:
        return "No notifications."
    lines = [f"Notifications ({state.reminders.unread_count} unread):"]
    for n in items:
        mark = " " if n.is_read else "*"
        lines.append(f"  {mark} {n.id}. [{n.created_at.strftime('%H:%M:%S')}] {n.title}: {n.message}")
    return "\n".join(lines)


async def cmd_read(state: ClientState, args: list[str]) -> str:
    nid = _parse_id(args)
    if nid is None:
        return "Usage: /read <notification id>"
    if not state.reminders.mark_as_read(nid):
        return f"No notification {nid}."
    return f"Notification {nid} marked as read."


async def cmd_clear(state: ClientState, args: list[str]) -> str:
    state.reminders.clear_notifications()
    return "Notifications cleared."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Log in: /login <user> <password>.")
registry.register("register", cmd_register, help_text="Create an account: /register <user> <password>.")
registry.register("logout", cmd_logout, help_text="Log out (always clears the local session).")
registry.register("whoami", cmd_whoami, help_text="Show the current user.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [YYYY-MM-DD|today|tomorrow|all].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <YYYY-MM-DD|today|tomorrow> <title...>.")
registry.register("done", _flag_command("is_completed", True, "done", "completed"), help_text="Complete a task: /done <id>.")
registry.register("undone", _flag_command("is_completed", False, "undone", "reopened"), help_text="Reopen a task: /undone <id>.")
registry.register("star", _flag_command("is_important", True, "star", "marked important"), help_text="Mark important: /star <id>.")
registry.register("unstar", _flag_command("is_important", False, "unstar", "no longer important"), help_text="Unmark important: /unstar <id>.")
registry.register("rename", cmd_rename, help_text="Rename a task: /rename <id> <title...>.")
registry.register("remind", cmd_remind, help_text="Set/clear a reminder: /remind <id> <YYYY-MM-DDTHH:MM|off>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the server.")
registry.register("notifications", cmd_notifications, help_text="Show reminder notifications.", aliases=["n"])
registry.register("read", cmd_read, help_text="Mark a notification as read: /read <id>.")
registry.register("clear", cmd_clear, help_text="Clear all notifications.")
