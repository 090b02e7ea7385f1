# src/dayplanner/cli/console.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..core.models import Notification
from ..core.state import ClientState
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


async def run_console_loop(
    state: ClientState,
    *,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], object] = print,
) -> None:
    """
    Read commands until /exit or EOF.

    `read_line` is blocking, so it runs in a worker thread; the polling loops
    keep ticking on the event loop meanwhile and reminders are printed as they
    fire.
    """
    logger.info("Console started.")

    def on_notification(n: Notification) -> None:
        write(f"\n[{_ts_local()}] [{n.title}] {n.message}  (/read {n.id})")

    state.reminders.add_listener(on_notification)

    user = state.session.user
    greeting = f"Welcome back, {user.username}." if user else "Not logged in."
    write(f"[{_ts_local()}] {greeting} Use /help for commands, /exit to quit.\n")

    while True:
        try:
            line = (await asyncio.to_thread(read_line, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        write(f"[{_ts_local()}] {reply}")

    logger.info("Console finished.")
