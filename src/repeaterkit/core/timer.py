"""Cancellable single-shot timer owned by one stateful component."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("repeaterkit.timer")


class SingleShotTimer:
    """One pending callback at most, re-armed atomically.

    ``arm`` cancels whatever was pending before scheduling the new callback,
    and every arm/cancel bumps a generation counter, so a callback that was
    already queued on the loop when it got cancelled is ignored instead of
    firing late.  Coroutine callbacks run as a tracked task which
    ``cancel()`` also cancels.

    Must be armed from inside a running event loop.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._generation = 0
        self._handle: asyncio.TimerHandle | None = None
        self._deadline: float | None = None
        self._task: asyncio.Task[Any] | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def running(self) -> bool:
        """True while a coroutine callback started by this timer is in flight."""
        return self._task is not None and not self._task.done()

    @property
    def remaining(self) -> float | None:
        """Seconds until the pending callback fires, or None when disarmed."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - asyncio.get_running_loop().time())

    def arm(self, delay: float, callback: Callable[[], Any]) -> None:
        """Schedule *callback* in *delay* seconds, replacing any pending one."""
        self._disarm()
        loop = asyncio.get_running_loop()
        generation = self._generation
        delay = max(0.0, delay)
        self._deadline = loop.time() + delay
        self._handle = loop.call_later(delay, self._fire, generation, callback)
        logger.debug("Timer %s armed for %.3fs", self._name, delay)

    def _disarm(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._deadline = None

    def cancel(self) -> None:
        """Drop the pending callback and cancel an in-flight coroutine callback."""
        self._disarm()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _fire(self, generation: int, callback: Callable[[], Any]) -> None:
        if generation != self._generation:
            return
        self._handle = None
        self._deadline = None
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            task.set_name(f"timer:{self._name}")
            task.add_done_callback(self._task_done)
            self._task = task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        if self._task is task:
            self._task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Timer %s callback failed: %s", self._name, exc, exc_info=exc
            )
