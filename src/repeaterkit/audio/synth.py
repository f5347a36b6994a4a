"""Deterministic PCM16 tone synthesis and WAV serialisation.

Every renderer computes its own exact sample count,
``floor(sample_rate * duration_ms / 1000)``, so concatenating independently
rendered segments never re-times earlier ones and the total duration of a
sequence is the exact sum of its parts.
"""

from __future__ import annotations

import io
import logging
import math
import wave
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from repeaterkit.errors import SynthesisIoError

logger = logging.getLogger("repeaterkit.audio.synth")

FULL_SCALE = 32767
WAV_HEADER_SIZE = 44


@dataclass(frozen=True)
class ToneSpec:
    """A single sine segment."""

    frequency_hz: float
    duration_ms: int
    amplitude: float = 1.0

    def __post_init__(self) -> None:
        if self.frequency_hz < 0:
            raise ValueError(f"frequency_hz must be >= 0, got {self.frequency_hz}")
        if self.duration_ms < 0:
            raise ValueError(f"duration_ms must be >= 0, got {self.duration_ms}")
        if not 0.0 <= self.amplitude <= 1.0:
            raise ValueError(f"amplitude must be between 0 and 1, got {self.amplitude}")


def sample_count(duration_ms: float, sample_rate: int) -> int:
    """Number of samples for *duration_ms*, rounded down."""
    if isinstance(duration_ms, int):
        return (sample_rate * duration_ms) // 1000
    return math.floor(sample_rate * duration_ms / 1000)


def duration_ms_of(pcm: bytes, sample_rate: int) -> float:
    """Playback duration of a PCM16 mono buffer in milliseconds."""
    return (len(pcm) // 2) * 1000.0 / sample_rate


def _to_pcm16(values: np.ndarray) -> bytes:
    return np.round(values * FULL_SCALE).astype("<i2").tobytes()


def render_tone(spec: ToneSpec, sample_rate: int) -> bytes:
    """Render a sine tone as PCM16 LE mono."""
    n = sample_count(spec.duration_ms, sample_rate)
    phase = 2.0 * np.pi * spec.frequency_hz * np.arange(n, dtype=np.float64) / sample_rate
    return _to_pcm16(np.sin(phase) * spec.amplitude)


def render_silence(duration_ms: float, sample_rate: int) -> bytes:
    """Render digital silence of the same length a tone would have."""
    return b"\x00\x00" * sample_count(duration_ms, sample_rate)


def render_sweep(
    start_hz: float,
    end_hz: float,
    duration_ms: float,
    amplitude: float,
    sample_rate: int,
) -> bytes:
    """Render a tone whose frequency ramps linearly from *start_hz* to *end_hz*.

    The instantaneous frequency at sample ``i`` is interpolated over the
    segment and evaluated as ``sin(2*pi*f(i)*i/sample_rate)``, which gives
    the characteristic chirp of the motorola-style beep.
    """
    n = sample_count(duration_ms, sample_rate)
    if n == 0:
        return b""
    idx = np.arange(n, dtype=np.float64)
    freq = start_hz + (end_hz - start_hz) * (idx / n)
    return _to_pcm16(np.sin(2.0 * np.pi * freq * idx / sample_rate) * amplitude)


def concat(segments: Iterable[bytes]) -> bytes:
    """Join rendered segments into one continuous buffer."""
    return b"".join(segments)


def write_wav(pcm: bytes, sample_rate: int) -> bytes:
    """Wrap a PCM16 mono payload in a 44-byte RIFF/WAVE header."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buf.getvalue()


def write_wav_file(path: str | Path, pcm: bytes, sample_rate: int) -> Path:
    """Materialise *pcm* as a WAV file on disk.

    Raises:
        SynthesisIoError: The file could not be written.
    """
    target = Path(path)
    try:
        target.write_bytes(write_wav(pcm, sample_rate))
    except OSError as exc:
        raise SynthesisIoError(f"cannot write WAV file {target}: {exc}") from exc
    logger.debug("Wrote %d samples to %s", len(pcm) // 2, target)
    return target
