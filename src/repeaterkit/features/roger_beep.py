"""Roger-beep feature module."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from repeaterkit.audio.sequencer import ToneSequencer
from repeaterkit.models.config import RogerBeepConfig
from repeaterkit.models.enums import RogerBeepStyle
from repeaterkit.models.status import RogerBeepStatus

if TYPE_CHECKING:
    from repeaterkit.audio.sinks.base import AudioSink
    from repeaterkit.core.arbiter import TransmitArbiter

logger = logging.getLogger("repeaterkit.roger_beep")


class RogerBeep:
    """Play the end-of-transmission courtesy tone.

    Settings are clamped rather than rejected, so a bad value from the
    configuration layer never takes the repeater off the air.
    """

    def __init__(
        self,
        arbiter: TransmitArbiter,
        sink: AudioSink,
        config: RogerBeepConfig | None = None,
        *,
        sequencer: ToneSequencer | None = None,
    ) -> None:
        self._arbiter = arbiter
        self._sink = sink
        self._config = config or RogerBeepConfig()
        self._sequencer = sequencer or ToneSequencer()
        logger.info(
            "Roger beep ready: %s (%s)",
            self._config.style,
            "enabled" if self._config.enabled else "disabled",
        )

    @property
    def config(self) -> RogerBeepConfig:
        return self._config

    def update(self, **changes: Any) -> RogerBeepConfig:
        """Apply configuration changes; out-of-range values are clamped."""
        self._config = RogerBeepConfig.model_validate({**self._config.model_dump(), **changes})
        logger.info("Roger beep config updated: %s", changes)
        return self._config

    def set_enabled(self, enabled: bool) -> None:
        self.update(enabled=enabled)

    def set_style(self, style: RogerBeepStyle | str) -> None:
        self.update(style=style)

    def set_volume(self, volume: float) -> float:
        return self.update(volume=volume).volume

    def set_duration(self, duration_ms: int) -> int:
        return self.update(duration_ms=duration_ms).duration_ms

    def set_delay(self, delay_ms: int) -> int:
        return self.update(delay_ms=delay_ms).delay_ms

    def render(self, style: RogerBeepStyle | None = None) -> bytes:
        cfg = self._config
        return self._sequencer.render_roger_beep(style or cfg.style, cfg.volume, cfg.duration_ms)

    async def play(
        self,
        style: RogerBeepStyle | None = None,
        *,
        acquire_gate: bool = True,
        timeout_ms: float | None = None,
    ) -> bool:
        """Wait the configured delay, then play the beep.

        Args:
            style: Override the configured style for this beep.
            acquire_gate: Set to False when the caller already holds the
                transmit gate (beep appended to its own transmission).
            timeout_ms: Gate acquisition timeout.

        Returns:
            False when the beep is disabled, True once it has been played.

        Raises:
            ChannelBusyTimeoutError: The gate could not be acquired.
        """
        if not self._config.enabled:
            return False
        if self._config.delay_ms > 0:
            await asyncio.sleep(self._config.delay_ms / 1000.0)

        pcm = self.render(style)
        sample_rate = self._sequencer.sample_rate
        logger.debug("Roger beep: %s", style or self._config.style)
        if acquire_gate:
            await self._arbiter.transmit(self._sink, pcm, sample_rate, timeout_ms=timeout_ms)
        else:
            await self._sink.play(pcm, sample_rate)
        return True

    def status(self) -> RogerBeepStatus:
        cfg = self._config
        return RogerBeepStatus(
            enabled=cfg.enabled,
            style=cfg.style,
            volume=cfg.volume,
            duration_ms=cfg.duration_ms,
            delay_ms=cfg.delay_ms,
        )
