"""Typed event listener registration for repeater components."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("repeaterkit.listeners")

EventListener = Callable[[Any], Any]


class ListenerSet:
    """Observers registered on one component.

    Sync listeners run inline; coroutine listeners are scheduled as tasks on
    the running loop.  A failing listener is logged and never breaks the
    component that emitted the event.
    """

    def __init__(self, owner: str) -> None:
        self._owner = owner
        self._listeners: list[EventListener] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._listeners)

    def add(self, listener: EventListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: Any) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
            except Exception:
                logger.exception("%s listener failed on %s", self._owner, type(event).__name__)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                task.add_done_callback(self._task_done)
                self._tasks.add(task)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s async listener failed: %s", self._owner, exc, exc_info=exc)
