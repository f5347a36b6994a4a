"""Hourly beacon ("baliza") scheduler.

The beacon plays the BBC pips on the top of every clock hour, whenever the
service was started.  If the channel is busy at that moment the same firing
is retried every ``retry_delay_s`` until it succeeds or the scheduler is
stopped; after a successful firing the next top of the hour is armed.

State machine::

    IDLE -> ARMED -> FIRING -> ARMED (next hour)
      ^________________________|  stop()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from repeaterkit.audio.sequencer import ToneSequencer
from repeaterkit.core.listeners import EventListener, ListenerSet
from repeaterkit.core.timer import SingleShotTimer
from repeaterkit.errors import ChannelBusyTimeoutError, SynthesisIoError
from repeaterkit.models.config import BalizaConfig
from repeaterkit.models.enums import SchedulerState
from repeaterkit.models.events import (
    BalizaErrorEvent,
    BalizaStartedEvent,
    BalizaStoppedEvent,
    BalizaTransmittedEvent,
)
from repeaterkit.models.status import BalizaStatus

if TYPE_CHECKING:
    from repeaterkit.audio.sinks.base import AudioSink
    from repeaterkit.core.arbiter import TransmitArbiter

logger = logging.getLogger("repeaterkit.baliza")

# Fields whose change restarts a running schedule.
_SCHEDULING_FIELDS = ("enabled", "interval_minutes", "retry_delay_s")


def _local_now() -> datetime:
    return datetime.now().astimezone()


def next_top_of_hour(moment: datetime) -> datetime:
    """Return the first full hour strictly after *moment*."""
    return moment.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)


@dataclass
class ScheduleState:
    """Bookkeeping for one start()..stop() run."""

    interval_minutes: int
    next_fire_at: datetime
    transmission_count: int = 0
    last_fire_at: datetime | None = None


class BalizaScheduler:
    """Fire the BBC-pips beacon aligned to the top of every hour.

    Args:
        arbiter: Shared transmit gate.
        sink: Playback device.
        config: Beacon settings.
        sequencer: Renders the pips; its sample rate is used for playback.
        now: Wall clock, injectable for tests.
    """

    def __init__(
        self,
        arbiter: TransmitArbiter,
        sink: AudioSink,
        config: BalizaConfig | None = None,
        *,
        sequencer: ToneSequencer | None = None,
        now: Callable[[], datetime] = _local_now,
    ) -> None:
        self._arbiter = arbiter
        self._sink = sink
        self._config = config or BalizaConfig()
        self._sequencer = sequencer or ToneSequencer()
        self._now = now
        self._timer = SingleShotTimer("baliza")
        self._listeners = ListenerSet("BalizaScheduler")
        self._schedule: ScheduleState | None = None
        self._state = SchedulerState.IDLE

    # -- Observers --

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: EventListener) -> None:
        self._listeners.remove(listener)

    # -- Introspection --

    @property
    def config(self) -> BalizaConfig:
        return self._config

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._schedule is not None

    @property
    def schedule(self) -> ScheduleState | None:
        return self._schedule

    @property
    def next_fire_at(self) -> datetime | None:
        return self._schedule.next_fire_at if self._schedule else None

    def status(self) -> BalizaStatus:
        schedule = self._schedule
        return BalizaStatus(
            enabled=self._config.enabled,
            running=schedule is not None,
            state=self._state,
            interval_minutes=self._config.interval_minutes,
            next_fire_at=schedule.next_fire_at if schedule else None,
            last_fire_at=schedule.last_fire_at if schedule else None,
            transmission_count=schedule.transmission_count if schedule else 0,
        )

    # -- Lifecycle --

    def start(self) -> None:
        """Arm the beacon for the next top of the hour.

        Must be called from inside a running event loop.
        """
        if self._schedule is not None:
            logger.warning("Baliza already running")
            return
        if not self._config.enabled:
            logger.warning("Baliza is disabled, not starting")
            return

        now = self._now()
        self._schedule = ScheduleState(
            interval_minutes=self._config.interval_minutes,
            next_fire_at=next_top_of_hour(now),
        )
        self._arm(self._schedule.next_fire_at, now)
        logger.info("Baliza started, next transmission at %s", self._schedule.next_fire_at)
        self._listeners.emit(BalizaStartedEvent(next_fire_at=self._schedule.next_fire_at))

    def stop(self) -> None:
        """Cancel the pending firing and any firing in progress."""
        self._timer.cancel()
        was_running = self._schedule is not None
        self._schedule = None
        self._state = SchedulerState.IDLE
        if was_running:
            logger.info("Baliza stopped")
            self._listeners.emit(BalizaStoppedEvent())

    def configure(self, **changes: Any) -> BalizaConfig:
        """Apply configuration changes.

        Changing ``enabled`` or a scheduling parameter restarts a running
        schedule from now; disabling stops it.
        """
        previous = self._config
        self._config = BalizaConfig.model_validate({**previous.model_dump(), **changes})
        logger.info(
            "Baliza configured: %d min (informational), %.0f Hz, enabled=%s",
            self._config.interval_minutes,
            self._config.pip_frequency_hz,
            self._config.enabled,
        )
        rescheduled = any(
            getattr(previous, name) != getattr(self._config, name) for name in _SCHEDULING_FIELDS
        )
        if self.running and rescheduled:
            self.stop()
            if self._config.enabled:
                self.start()
        return self._config

    # -- Firing --

    def _arm(self, fire_at: datetime, now: datetime) -> None:
        assert self._schedule is not None
        self._schedule.next_fire_at = fire_at
        self._timer.arm((fire_at - now).total_seconds(), self._fire)
        self._state = SchedulerState.ARMED

    def _arm_next_hour(self) -> None:
        if self._schedule is None:
            return
        now = self._now()
        # The loop timer and the wall clock can disagree by a few ms; never
        # re-arm for the hour that just fired.
        self._arm(next_top_of_hour(max(now, self._schedule.next_fire_at)), now)
        logger.info("Next baliza at %s", self.next_fire_at)

    def _arm_retry(self) -> None:
        now = self._now()
        self._arm(now + timedelta(seconds=self._config.retry_delay_s), now)

    async def _fire(self) -> None:
        if self._schedule is None:
            return
        self._state = SchedulerState.FIRING

        if not self._arbiter.is_safe_to_transmit():
            logger.info("Channel busy, retrying baliza in %.0fs", self._config.retry_delay_s)
            self._arm_retry()
            return

        try:
            await self._transmit(manual=False)
        except (ChannelBusyTimeoutError, SynthesisIoError) as exc:
            logger.warning(
                "Baliza firing failed (%s), retrying in %.0fs", exc, self._config.retry_delay_s
            )
            self._arm_retry()
            return
        except Exception as exc:
            logger.exception("Unexpected error transmitting baliza")
            self._listeners.emit(BalizaErrorEvent(error=str(exc)))
            self._arm_next_hour()
            return

        self._arm_next_hour()

    async def _transmit(self, *, manual: bool) -> BalizaTransmittedEvent:
        pcm, duration_ms = self._sequencer.render_bbc_pips_sequence(
            self._config.volume, self._config.pip_frequency_hz
        )
        async with self._arbiter.acquire(self._config.acquire_timeout_ms):
            fired_at = self._now()
            logger.info("Transmitting baliza (%d ms)", duration_ms)
            await self._sink.play(pcm, self._sequencer.sample_rate)

        count = 0
        if self._schedule is not None:
            self._schedule.transmission_count += 1
            self._schedule.last_fire_at = fired_at
            count = self._schedule.transmission_count
        event = BalizaTransmittedEvent(
            fired_at=fired_at,
            transmission_count=count,
            duration_ms=duration_ms,
            manual=manual,
        )
        self._listeners.emit(event)
        return event

    async def transmit_now(self) -> BalizaTransmittedEvent:
        """Play the beacon immediately (manual trigger); the hourly schedule is untouched.

        Raises:
            ChannelBusyTimeoutError: The gate could not be acquired.
            SynthesisIoError: The sink failed to play the buffer.
        """
        logger.info("Manual baliza requested")
        return await self._transmit(manual=True)
