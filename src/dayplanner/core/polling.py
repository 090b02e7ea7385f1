# src/dayplanner/core/polling.py

from __future__ import annotations

"""
Cooperative periodic loops.

Both client timers (session expiry check, reminder scan) are asyncio tasks
running `run_periodic`. A tick that raises is logged and the loop carries on;
the loop ends only when its task is cancelled.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Tick = Callable[[], Awaitable[object] | object]


async def run_periodic(tick: Tick, *, interval_seconds: float, name: str = "loop") -> None:
    """
    Call `tick` every `interval_seconds` (first call after one interval).

    `tick` may be a plain function or a coroutine function.
    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    logger.debug("%s started interval=%.2fs", name, sleep_s)

    try:
        while True:
            await asyncio.sleep(sleep_s)
            try:
                result = tick()
                if asyncio.iscoroutine(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("%s tick failed", name)
    finally:
        logger.debug("%s stopped", name)
