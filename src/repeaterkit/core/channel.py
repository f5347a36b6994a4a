"""Channel occupancy detection from receiver audio.

The channel is considered busy while the receiver audio's RMS level is
above ``threshold`` and for ``sustain_time_ms`` after the last loud block,
which bridges the short pauses of normal speech.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from repeaterkit.audio.frame import as_samples, rms
from repeaterkit.core.listeners import EventListener, ListenerSet
from repeaterkit.models.config import (
    MAX_CHANNEL_THRESHOLD,
    MIN_CHANNEL_THRESHOLD,
    ChannelConfig,
    clamp_setting,
)
from repeaterkit.models.events import ChannelActiveEvent, ChannelInactiveEvent
from repeaterkit.models.status import ChannelStatus

logger = logging.getLogger("repeaterkit.channel")


class ChannelActivityDetector:
    """RMS carrier/voice detector feeding the transmit gate."""

    def __init__(
        self,
        config: ChannelConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        config = config or ChannelConfig()
        self._threshold = config.threshold
        self._sustain_s = config.sustain_time_ms / 1000.0
        self._clock = clock
        self._listeners = ListenerSet("ChannelActivityDetector")

        self._active = False
        self._level = 0.0
        self._active_since = 0.0
        self._last_activity = 0.0

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: EventListener) -> None:
        self._listeners.remove(listener)

    @property
    def level(self) -> float:
        """RMS level of the most recent block."""
        return self._level

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def is_active(self) -> bool:
        self._expire(self._clock())
        return self._active

    def set_threshold(self, threshold: float) -> float:
        self._threshold = clamp_setting(
            "channel.threshold",
            threshold,
            low=MIN_CHANNEL_THRESHOLD,
            high=MAX_CHANNEL_THRESHOLD,
            default=self._threshold,
        )
        logger.info("Channel threshold set to %.4f", self._threshold)
        return self._threshold

    def _expire(self, now: float) -> None:
        if self._active and now - self._last_activity >= self._sustain_s:
            self._active = False
            duration_ms = (self._last_activity - self._active_since) * 1000.0
            logger.debug("Channel inactive after %.0f ms", duration_ms)
            self._listeners.emit(ChannelInactiveEvent(duration_ms=duration_ms))

    def process(self, samples: Any) -> bool:
        """Update occupancy from one block of receiver audio.

        Returns:
            Whether the channel is busy after this block.
        """
        now = self._clock()
        self._level = rms(as_samples(samples))
        self._expire(now)
        if self._level > self._threshold:
            self._last_activity = now
            if not self._active:
                self._active = True
                self._active_since = now
                logger.debug("Channel active, level %.4f", self._level)
                self._listeners.emit(ChannelActiveEvent(level=self._level))
        return self._active

    def reset(self) -> None:
        self._active = False
        self._level = 0.0

    def status(self, *, transmitting: bool = False) -> ChannelStatus:
        return ChannelStatus(
            active=self.is_active,
            level=self._level,
            threshold=self._threshold,
            transmitting=transmitting,
        )
