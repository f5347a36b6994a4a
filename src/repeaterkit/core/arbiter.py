"""Half-duplex transmit gate.

The repeater has one RF output, so every tone or voice transmission goes
through a single global gate.  A transmission may start only while the
receiver hears nothing and no other transmission is in progress.

Usage::

    arbiter = TransmitArbiter(occupancy=channel_detector)

    async with arbiter.acquire(timeout_ms=30_000):
        await sink.play(pcm, sample_rate)

**Concurrency note:** the safety check and the claim in ``acquire`` run with
no ``await`` in between, which makes them atomic within one event-loop
iteration.  All callers must share the same loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Protocol

from repeaterkit.errors import ChannelBusyTimeoutError
from repeaterkit.models.config import ArbiterConfig

if TYPE_CHECKING:
    from repeaterkit.audio.sinks.base import AudioSink

logger = logging.getLogger("repeaterkit.arbiter")


class ChannelOccupancy(Protocol):
    """Anything that knows whether the receiver currently hears a signal."""

    @property
    def is_active(self) -> bool: ...


class TransmitArbiter:
    """Serialise all transmissions against channel occupancy.

    Acquisition order is not FIFO; a waiter's starvation is bounded by its
    own timeout.

    Args:
        occupancy: Receiver activity source.  ``None`` means the channel is
            always considered quiet.
        config: Polling interval and default timeout.
    """

    def __init__(
        self,
        occupancy: ChannelOccupancy | None = None,
        config: ArbiterConfig | None = None,
    ) -> None:
        self._occupancy = occupancy
        self._config = config or ArbiterConfig()
        self._transmitting = False
        self._waiters = 0
        self._grants = 0

    @property
    def transmitting(self) -> bool:
        return self._transmitting

    @property
    def waiters(self) -> int:
        """Number of callers currently waiting inside ``acquire``."""
        return self._waiters

    @property
    def grants(self) -> int:
        """Total number of transmissions granted so far."""
        return self._grants

    def channel_busy(self) -> bool:
        return self._occupancy is not None and self._occupancy.is_active

    def is_safe_to_transmit(self) -> bool:
        return not self._transmitting and not self.channel_busy()

    @asynccontextmanager
    async def acquire(self, timeout_ms: float | None = None) -> AsyncIterator[None]:
        """Wait until the channel is free, then hold it for the ``async with`` body.

        Polls every ``poll_interval_ms`` with ``asyncio.sleep``, so the loop
        keeps consuming receiver audio while a caller waits.

        Raises:
            ChannelBusyTimeoutError: The channel did not free up within
                *timeout_ms*.  Nothing is transmitted in that case.
        """
        if timeout_ms is None:
            timeout_ms = self._config.default_timeout_ms
        poll_s = self._config.poll_interval_ms / 1000.0
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000.0

        self._waiters += 1
        try:
            while not self.is_safe_to_transmit():
                remaining = deadline - loop.time()
                if remaining <= 0:
                    logger.warning("Channel busy, giving up after %.0f ms", timeout_ms)
                    raise ChannelBusyTimeoutError(timeout_ms)
                await asyncio.sleep(min(poll_s, remaining))
            self._transmitting = True
            self._grants += 1
        finally:
            self._waiters -= 1

        logger.debug("Transmit gate acquired")
        try:
            yield
        finally:
            self._transmitting = False
            logger.debug("Transmit gate released")

    async def transmit(
        self,
        sink: AudioSink,
        pcm: bytes,
        sample_rate: int,
        *,
        timeout_ms: float | None = None,
    ) -> None:
        """Acquire the gate, play *pcm* to completion, release."""
        async with self.acquire(timeout_ms):
            await sink.play(pcm, sample_rate)
