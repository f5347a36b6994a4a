"""Thin controller wiring receiver audio to the transmitting modules.

Receiver audio flows through the channel-activity detector and, while the
repeater is not transmitting itself, the DTMF decoder.  Confirmed digits are
grouped into sequences and dispatched to registered command handlers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from repeaterkit.audio.sequencer import ToneSequencer
from repeaterkit.audio.synth import ToneSpec, render_tone
from repeaterkit.core.arbiter import TransmitArbiter
from repeaterkit.core.channel import ChannelActivityDetector
from repeaterkit.core.listeners import EventListener
from repeaterkit.dtmf.fft import FFTDTMFDecoder
from repeaterkit.dtmf.sequence import DTMFSequenceCollector
from repeaterkit.errors import ChannelBusyTimeoutError
from repeaterkit.features.baliza import BalizaScheduler
from repeaterkit.features.roger_beep import RogerBeep
from repeaterkit.models.config import RepeaterConfig

if TYPE_CHECKING:
    from repeaterkit.audio.frame import AudioFrame
    from repeaterkit.audio.sinks.base import AudioSink
    from repeaterkit.dtmf.base import DTMFDetector, DTMFEvent
    from repeaterkit.models.events import DTMFSequenceEvent
    from repeaterkit.models.status import ModuleStatus

logger = logging.getLogger("repeaterkit.repeater")

CommandHandler = Callable[[str], Awaitable[None]]

BALIZA_COMMAND = "*9"
UNKNOWN_COMMAND_TONE = ToneSpec(frequency_hz=400.0, duration_ms=200, amplitude=0.5)


@dataclass
class _Command:
    handler: CommandHandler
    gated: bool


class Repeater:
    """Controller for one radio.

    Args:
        sink: Playback device keyed by VOX.
        config: Repeater configuration.
        detector: DTMF detector; defaults to an :class:`FFTDTMFDecoder`
            built from ``config.dtmf`` at ``config.sample_rate``.
        channel: Occupancy detector; defaults to one built from
            ``config.channel``.
    """

    def __init__(
        self,
        sink: AudioSink,
        config: RepeaterConfig | None = None,
        *,
        detector: DTMFDetector | None = None,
        channel: ChannelActivityDetector | None = None,
    ) -> None:
        self._config = config or RepeaterConfig()
        self._sink = sink
        self._sequencer = ToneSequencer(self._config.sample_rate)
        self.channel = channel or ChannelActivityDetector(self._config.channel)
        self.arbiter = TransmitArbiter(self.channel, self._config.arbiter)
        self.detector = detector or FFTDTMFDecoder(
            self._config.dtmf.model_copy(update={"sample_rate": self._config.sample_rate})
        )
        self.sequences = DTMFSequenceCollector(self._config.dtmf.sequence_timeout_ms)
        self.sequences.add_listener(self._on_sequence)
        self.roger_beep = RogerBeep(
            self.arbiter, sink, self._config.roger_beep, sequencer=self._sequencer
        )
        self.baliza = BalizaScheduler(
            self.arbiter, sink, self._config.baliza, sequencer=self._sequencer
        )

        self._commands: dict[str, _Command] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self.register_command(BALIZA_COMMAND, self._manual_baliza, gated=False)

    @property
    def config(self) -> RepeaterConfig:
        return self._config

    def add_listener(self, listener: EventListener) -> None:
        """Receive channel, DTMF sequence and beacon events."""
        self.channel.add_listener(listener)
        self.sequences.add_listener(listener)
        self.baliza.add_listener(listener)

    # -- Commands --

    def register_command(self, sequence: str, handler: CommandHandler, *, gated: bool = True) -> None:
        """Bind a DTMF *sequence* to *handler*.

        Gated handlers run while holding the transmit gate and may play
        audio directly on the sink; the roger beep follows before the gate
        is released.  Handlers that acquire the gate themselves (feature
        modules) must be registered with ``gated=False``; the gate is not
        reentrant.
        """
        self._commands[sequence] = _Command(handler=handler, gated=gated)

    async def _manual_baliza(self, sequence: str) -> None:
        await self.baliza.transmit_now()

    async def dispatch(self, sequence: str) -> bool:
        """Run the handler bound to *sequence*.

        Returns:
            True if a handler ran to completion.  Busy-channel timeouts
            abandon the command and return False.
        """
        command = self._commands.get(sequence)
        try:
            if command is None:
                logger.info("Unknown DTMF command: %s", sequence)
                pcm = render_tone(UNKNOWN_COMMAND_TONE, self._sequencer.sample_rate)
                await self.arbiter.transmit(self._sink, pcm, self._sequencer.sample_rate)
                return False
            logger.info("Executing DTMF command: %s", sequence)
            if command.gated:
                async with self.arbiter.acquire():
                    await command.handler(sequence)
                    await self.roger_beep.play(acquire_gate=False)
            else:
                await command.handler(sequence)
        except ChannelBusyTimeoutError:
            logger.warning("Command %s abandoned: channel busy", sequence)
            return False
        return True

    def _on_sequence(self, event: DTMFSequenceEvent) -> None:
        task = asyncio.get_running_loop().create_task(
            self.dispatch(event.sequence), name=f"dtmf:{event.sequence}"
        )
        task.add_done_callback(self._task_done)
        self._tasks.add(task)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Command task %s failed: %s", task.get_name(), exc, exc_info=exc)

    # -- Audio input --

    def process_audio(self, frame: AudioFrame) -> DTMFEvent | None:
        """Consume one block of receiver audio, in capture order."""
        self.channel.process(frame.samples())
        if self.arbiter.transmitting:
            # Simplex: our own transmission must not be decoded as commands.
            return None
        event = self.detector.process(frame)
        if event is not None:
            self.sequences.add_digit(event.digit)
        return event

    # -- Lifecycle --

    def start(self) -> None:
        self.baliza.start()
        logger.info("Repeater started")

    async def stop(self) -> None:
        self.baliza.stop()
        self.sequences.reset()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self.detector.reset()
        await self._sink.close()
        logger.info("Repeater stopped")

    def status(self) -> list[ModuleStatus]:
        statuses: list[ModuleStatus] = [
            self.roger_beep.status(),
            self.baliza.status(),
            self.channel.status(transmitting=self.arbiter.transmitting),
        ]
        if isinstance(self.detector, FFTDTMFDecoder):
            statuses.append(self.detector.status())
        return statuses
