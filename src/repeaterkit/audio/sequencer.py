"""Named tone patterns built on top of the synthesizer.

All renderers are pure: they return a single PCM buffer and never play
audio.  Callers hold the transmit gate for the buffer's duration.
"""

from __future__ import annotations

import logging

from repeaterkit.audio.synth import (
    ToneSpec,
    concat,
    duration_ms_of,
    render_silence,
    render_sweep,
    render_tone,
)
from repeaterkit.models.config import (
    MAX_BEEP_DURATION_MS,
    MAX_VOLUME,
    MIN_BEEP_DURATION_MS,
    MIN_VOLUME,
    clamp_setting,
)
from repeaterkit.models.enums import RogerBeepStyle

logger = logging.getLogger("repeaterkit.audio.sequencer")

KENWOOD_FREQUENCIES: tuple[float, float, float] = (1500.0, 1200.0, 1000.0)
KENWOOD_LEVELS: tuple[float, float, float] = (1.0, 0.9, 0.8)
KENWOOD_GAP_MS = 10

CLASSIC_FREQUENCIES: tuple[float, float] = (1000.0, 800.0)
MOTOROLA_FREQUENCIES: tuple[float, float] = (1200.0, 900.0)
CUSTOM_FREQUENCIES: tuple[float, float] = (1100.0, 850.0)

BBC_PIP_FREQUENCY_HZ = 1000.0
BBC_SHORT_PIP_MS = 100
BBC_PIP_GAP_MS = 900
BBC_LONG_PIP_MS = 500
BBC_SHORT_PIPS = 5


class ToneSequencer:
    """Render roger beeps and the BBC-pips beacon at a fixed sample rate."""

    def __init__(self, sample_rate: int = 48000) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self._sample_rate = sample_rate

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def _tone(self, frequency_hz: float, duration_ms: int, amplitude: float) -> bytes:
        return render_tone(ToneSpec(frequency_hz, duration_ms, amplitude), self._sample_rate)

    def _gap(self, duration_ms: int) -> bytes:
        return render_silence(duration_ms, self._sample_rate)

    @staticmethod
    def _volume(volume: float) -> float:
        return clamp_setting("volume", volume, low=MIN_VOLUME, high=MAX_VOLUME, default=0.7)

    @staticmethod
    def _duration(duration_ms: float) -> int:
        return int(
            clamp_setting(
                "duration_ms",
                duration_ms,
                low=MIN_BEEP_DURATION_MS,
                high=MAX_BEEP_DURATION_MS,
                default=250,
            )
        )

    # -- Roger beeps --

    def render_kenwood_beep(
        self,
        volume: float,
        total_duration_ms: int,
        frequencies: tuple[float, float, float] = KENWOOD_FREQUENCIES,
    ) -> bytes:
        """Three descending tones of ``total_duration_ms // 3`` each.

        Tones are separated by 10 ms of silence and drop to 100 %, 90 % and
        80 % of *volume*, which gives the falling Kenwood signature.
        """
        volume = self._volume(volume)
        tone_ms = self._duration(total_duration_ms) // 3
        segments: list[bytes] = []
        for i, (freq, level) in enumerate(zip(frequencies, KENWOOD_LEVELS, strict=True)):
            if i:
                segments.append(self._gap(KENWOOD_GAP_MS))
            segments.append(self._tone(freq, tone_ms, volume * level))
        return concat(segments)

    def render_classic_beep(self, volume: float, duration_ms: int) -> bytes:
        """1000 Hz for 60 % of the duration, a 20 ms gap, then 800 Hz for 40 %."""
        volume = self._volume(volume)
        duration_ms = self._duration(duration_ms)
        high, low = CLASSIC_FREQUENCIES
        return concat(
            [
                self._tone(high, int(duration_ms * 0.6), volume),
                self._gap(20),
                self._tone(low, int(duration_ms * 0.4), volume * 0.8),
            ]
        )

    def render_motorola_beep(self, volume: float, duration_ms: int) -> bytes:
        """Single 1200 to 900 Hz sweep."""
        start, end = MOTOROLA_FREQUENCIES
        return render_sweep(
            start, end, self._duration(duration_ms), self._volume(volume), self._sample_rate
        )

    def render_custom_beep(self, volume: float) -> bytes:
        """Short-long-short pattern (80/120/50 ms)."""
        volume = self._volume(volume)
        first, second = CUSTOM_FREQUENCIES
        return concat(
            [
                self._tone(first, 80, volume),
                self._gap(30),
                self._tone(second, 120, volume * 0.9),
                self._gap(20),
                self._tone(first, 50, volume * 0.7),
            ]
        )

    def render_roger_beep(self, style: RogerBeepStyle, volume: float, duration_ms: int) -> bytes:
        match style:
            case RogerBeepStyle.KENWOOD:
                return self.render_kenwood_beep(volume, duration_ms)
            case RogerBeepStyle.MOTOROLA:
                return self.render_motorola_beep(volume, duration_ms)
            case RogerBeepStyle.CUSTOM:
                return self.render_custom_beep(volume)
            case _:
                return self.render_classic_beep(volume, duration_ms)

    # -- Beacon --

    def render_bbc_pips_sequence(
        self,
        volume: float,
        frequency_hz: float = BBC_PIP_FREQUENCY_HZ,
    ) -> tuple[bytes, int]:
        """Five short pips and one long pip as one continuous buffer.

        One buffer means one playback call, so the radio's VOX stays keyed
        through the silences between pips.

        Returns:
            The PCM buffer and its playback duration in milliseconds
            (5500 ms with the default timings).
        """
        volume = self._volume(volume)
        segments: list[bytes] = []
        for _ in range(BBC_SHORT_PIPS):
            segments.append(self._tone(frequency_hz, BBC_SHORT_PIP_MS, volume))
            segments.append(self._gap(BBC_PIP_GAP_MS))
        segments.append(self._tone(frequency_hz, BBC_LONG_PIP_MS, volume))
        pcm = concat(segments)
        return pcm, round(duration_ms_of(pcm, self._sample_rate))
