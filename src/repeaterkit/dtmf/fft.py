"""FFT-based DTMF decoder with debounce.

Each fixed-size window goes through a Hamming window and a real FFT; the
four low-group and four high-group frequencies are scored from the
magnitude spectrum.  A digit is only confirmed after ``required_count``
identical consecutive detections, and a cooldown coalesces repeated
confirmations of the same physical keypress.

State machine::

    IDLE -> CANDIDATE -> CONFIRMED -> (cooldown) -> IDLE
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from repeaterkit.audio.frame import Samples, as_samples, rms
from repeaterkit.dtmf.base import (
    DTMF_HIGH_FREQUENCIES,
    DTMF_LOW_FREQUENCIES,
    DTMF_MATRIX,
    DTMFDetector,
    DTMFEvent,
)
from repeaterkit.errors import InvalidWindowSizeError
from repeaterkit.models.config import DTMFConfig
from repeaterkit.models.enums import DetectorState
from repeaterkit.models.status import DecoderStatus

if TYPE_CHECKING:
    from repeaterkit.audio.frame import AudioFrame

logger = logging.getLogger("repeaterkit.dtmf")

_PEAK_SCALE = 1.5
_DEBUG_SUMMARY_INTERVAL = 100  # windows


@dataclass
class DetectionState:
    """Debounce state owned by a single decoder."""

    last_digit: str | None = None
    consecutive_count: int = 0
    armed_timeout: float | None = None
    """Monotonic deadline after which an idle candidate is discarded."""

    cooldown_digit: str | None = None
    cooldown_until: float | None = None

    def clear_candidate(self) -> None:
        self.last_digit = None
        self.consecutive_count = 0


def _owned_bins(
    frequencies: tuple[float, ...], window_size: int, sample_rate: int, n_bins: int
) -> list[list[int]]:
    """Candidate bins for each frequency of one tone group.

    Each frequency inspects its nearest bin and the two neighbours.  At small
    window sizes adjacent group frequencies share neighbours (697 and 770 Hz
    are only ~1.5 bins apart at 1024/48000), so a bin is only scored for the
    group frequency whose exact position is closest to it.
    """
    exact = [f * window_size / sample_rate for f in frequencies]
    owned: list[list[int]] = []
    for i, pos in enumerate(exact):
        center = round(pos)
        bins = []
        for k in (center - 1, center, center + 1):
            if k < 1 or k >= n_bins - 1:
                continue
            nearest = min(range(len(exact)), key=lambda j: abs(k - exact[j]))
            if nearest == i:
                bins.append(k)
        owned.append(bins)
    return owned


class FFTDTMFDecoder(DTMFDetector):
    """Decode DTMF keypresses from fixed-size audio windows.

    Args:
        config: Decoder tuning; defaults match a 48 kHz receiver.
        clock: Monotonic clock in seconds, injectable for tests.
    """

    def __init__(
        self,
        config: DTMFConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or DTMFConfig()
        self._clock = clock
        n = self._config.window_size
        self._window = np.hamming(n)
        # Coherent gain: a sine of amplitude A peaks at ~A after scaling.
        self._scale = float(self._window.sum()) / 2.0
        n_bins = n // 2 + 1
        self._low_bins = _owned_bins(DTMF_LOW_FREQUENCIES, n, self._config.sample_rate, n_bins)
        self._high_bins = _owned_bins(DTMF_HIGH_FREQUENCIES, n, self._config.sample_rate, n_bins)
        self._peak_threshold = self._config.threshold * _PEAK_SCALE
        self._window_ms = n * 1000.0 / self._config.sample_rate

        self._state = DetectionState()
        self._pending: Samples = np.zeros(0, dtype=np.float64)
        self._last_balance = 0.0

        self._debug_windows = 0
        self._debug_gated = 0

    @property
    def name(self) -> str:
        return "FFTDTMFDecoder"

    @property
    def config(self) -> DTMFConfig:
        return self._config

    @property
    def state(self) -> DetectionState:
        return self._state

    # -- Spectrum analysis --

    def _magnitude_spectrum(self, samples: Samples) -> Samples:
        return np.abs(np.fft.rfft(samples * self._window)) / self._scale

    def _strongest(self, spectrum: Samples, groups: list[list[int]]) -> tuple[int, float] | None:
        best_index: int | None = None
        best_mag = self._peak_threshold
        for index, bins in enumerate(groups):
            for k in bins:
                mag = float(spectrum[k])
                if mag >= spectrum[k - 1] and mag >= spectrum[k + 1] and mag > best_mag:
                    best_index = index
                    best_mag = mag
        if best_index is None:
            return None
        return best_index, best_mag

    def analyze(self, window: Any) -> str | None:
        """Classify a single window without touching the debounce state.

        Raises:
            InvalidWindowSizeError: The window is shorter than ``window_size``.
        """
        samples = as_samples(window)
        n = self._config.window_size
        if samples.size < n:
            raise InvalidWindowSizeError(samples.size, n)
        samples = samples[:n]

        if rms(samples) < self._config.min_signal_level:
            self._debug_gated += 1
            return None

        spectrum = self._magnitude_spectrum(samples)
        low = self._strongest(spectrum, self._low_bins)
        high = self._strongest(spectrum, self._high_bins)
        if low is None or high is None:
            return None

        low_index, low_mag = low
        high_index, high_mag = high
        balance = min(low_mag, high_mag) / max(low_mag, high_mag)
        if balance <= self._config.purity_ratio:
            return None
        self._last_balance = balance
        return DTMF_MATRIX[low_index][high_index]

    # -- Debounce --

    def _expire(self, now: float) -> None:
        state = self._state
        if state.armed_timeout is not None and now >= state.armed_timeout:
            if state.last_digit is not None:
                logger.debug("DTMF candidate %s expired", state.last_digit)
            state.clear_candidate()
            state.armed_timeout = None
        if state.cooldown_until is not None and now >= state.cooldown_until:
            state.cooldown_digit = None
            state.cooldown_until = None

    def detect(self, window: Any) -> str | None:
        """Feed one window through the debounce state machine.

        Windows must arrive in capture order.  Returns the digit on the
        window that confirms it, ``None`` otherwise (the common case).
        Short windows are logged and dropped.
        """
        now = self._clock()
        self._expire(now)
        try:
            digit = self.analyze(window)
        except InvalidWindowSizeError as exc:
            logger.warning("Dropping DTMF window: %s", exc)
            return None

        if logger.isEnabledFor(logging.DEBUG):
            self._debug_windows += 1
            if self._debug_windows >= _DEBUG_SUMMARY_INTERVAL:
                logger.debug(
                    "DTMF: windows=%d gated=%d candidate=%s count=%d",
                    self._debug_windows,
                    self._debug_gated,
                    self._state.last_digit,
                    self._state.consecutive_count,
                )
                self._debug_windows = 0
                self._debug_gated = 0

        if digit is None:
            return None

        state = self._state
        cooldown_s = self._config.cooldown_ms / 1000.0
        state.armed_timeout = now + self._config.cleanup_interval_ms / 1000.0

        if state.cooldown_digit == digit and state.cooldown_until is not None:
            if state.last_digit in (None, digit):
                # Same keypress still held down.
                state.cooldown_until = now + cooldown_s
                state.clear_candidate()
            # Else a stray window of the previous key: keep the new candidate.
            return None

        if digit == state.last_digit:
            state.consecutive_count += 1
        else:
            state.last_digit = digit
            state.consecutive_count = 1

        if state.consecutive_count < self._config.required_count:
            return None

        state.clear_candidate()
        state.cooldown_digit = digit
        state.cooldown_until = now + cooldown_s
        logger.info("DTMF confirmed: %s", digit)
        return digit

    def feed(self, samples: Any) -> list[DTMFEvent]:
        """Buffer an arbitrary-length block and decode every complete window."""
        block = as_samples(samples)
        buf = np.concatenate((self._pending, block)) if self._pending.size else block
        n = self._config.window_size
        events: list[DTMFEvent] = []
        offset = 0
        while buf.size - offset >= n:
            digit = self.detect(buf[offset : offset + n])
            offset += n
            if digit is not None:
                events.append(
                    DTMFEvent(
                        digit=digit,
                        duration_ms=self._config.required_count * self._window_ms,
                        confidence=self._last_balance,
                    )
                )
        self._pending = buf[offset:].copy()
        return events

    def process(self, frame: AudioFrame) -> DTMFEvent | None:
        events = self.feed(frame.samples())
        return events[-1] if events else None

    def status(self) -> DecoderStatus:
        state = self._state
        now = self._clock()
        if state.cooldown_until is not None and now < state.cooldown_until:
            current = DetectorState.COOLDOWN
        elif state.last_digit is not None:
            current = DetectorState.CANDIDATE
        else:
            current = DetectorState.IDLE
        return DecoderStatus(
            state=current,
            candidate=state.last_digit,
            consecutive_count=state.consecutive_count,
        )

    def force_reset(self) -> None:
        """Discard the candidate, the cooldown and any buffered samples."""
        self._state = DetectionState()
        self._pending = np.zeros(0, dtype=np.float64)
        logger.debug("DTMF state reset")

    def reset(self) -> None:
        self.force_reset()

    def close(self) -> None:
        self.force_reset()
