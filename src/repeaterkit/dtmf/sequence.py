"""Group confirmed DTMF digits into command sequences."""

from __future__ import annotations

import logging

from repeaterkit.core.listeners import EventListener, ListenerSet
from repeaterkit.core.timer import SingleShotTimer
from repeaterkit.models.events import DTMFSequenceEvent

logger = logging.getLogger("repeaterkit.dtmf.sequence")


class DTMFSequenceCollector:
    """Collect digits until the keypad has been idle for *timeout_ms*.

    Each digit re-arms the inter-digit timer; when it expires the whole
    sequence (e.g. ``"*9"``) is delivered to listeners as a
    :class:`DTMFSequenceEvent`.
    """

    def __init__(self, timeout_ms: float = 2000.0, *, max_length: int = 16) -> None:
        self._timeout_s = timeout_ms / 1000.0
        self._max_length = max_length
        self._digits: list[str] = []
        self._timer = SingleShotTimer("dtmf-sequence")
        self._listeners = ListenerSet("DTMFSequenceCollector")

    @property
    def pending(self) -> str:
        return "".join(self._digits)

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: EventListener) -> None:
        self._listeners.remove(listener)

    def add_digit(self, digit: str) -> None:
        self._digits.append(digit)
        if len(self._digits) >= self._max_length:
            logger.warning("DTMF sequence reached %d digits, flushing", self._max_length)
            self.flush()
            return
        self._timer.arm(self._timeout_s, self.flush)

    def flush(self) -> DTMFSequenceEvent | None:
        """Deliver the pending sequence now."""
        self._timer.cancel()
        if not self._digits:
            return None
        event = DTMFSequenceEvent(sequence="".join(self._digits))
        self._digits.clear()
        logger.info("DTMF sequence received: %s", event.sequence)
        self._listeners.emit(event)
        return event

    def reset(self) -> None:
        """Discard the pending sequence."""
        self._timer.cancel()
        self._digits.clear()
