"""AudioFrame data model for inbound receiver audio."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

Samples = npt.NDArray[np.float64]


@dataclass
class AudioFrame:
    """A block of inbound audio captured from the receiver.

    Only 16-bit little-endian mono PCM is accepted.  Frames are handed to
    the channel-activity detector and the DTMF decoder in arrival order.
    """

    data: bytes
    """Raw audio bytes (PCM16 LE, mono)."""

    sample_rate: int = 48000
    """Sample rate in Hz."""

    timestamp_ms: float | None = None
    """Timestamp in milliseconds (relative to capture start)."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            raise ValueError("AudioFrame.data must be bytes")
        if self.sample_rate <= 0 or self.sample_rate > 192_000:
            raise ValueError(f"sample_rate must be between 1 and 192000, got {self.sample_rate}")
        if len(self.data) % 2 != 0:
            raise ValueError(f"data length ({len(self.data)}) must be a whole number of int16 samples")

    @property
    def sample_count(self) -> int:
        return len(self.data) // 2

    @property
    def duration_ms(self) -> float:
        return self.sample_count * 1000.0 / self.sample_rate

    def samples(self) -> Samples:
        """Return the frame as float64 samples normalised to [-1, 1)."""
        return pcm16_to_float(self.data)


def pcm16_to_float(data: bytes) -> Samples:
    """Convert int16 LE PCM bytes to float64 samples in [-1, 1)."""
    n = len(data) // 2
    return np.frombuffer(data[: n * 2], dtype="<i2").astype(np.float64) / 32768.0


def as_samples(window: Any) -> Samples:
    """Normalise any supported window representation to float64 samples.

    Accepts PCM16 bytes, an :class:`AudioFrame`, an int16 numpy array, or a
    sequence of floats already in [-1, 1].
    """
    if isinstance(window, AudioFrame):
        return window.samples()
    if isinstance(window, (bytes, bytearray, memoryview)):
        return pcm16_to_float(bytes(window))
    arr = np.asarray(window)
    if arr.dtype == np.int16:
        return arr.astype(np.float64) / 32768.0
    return arr.astype(np.float64, copy=False)


def rms(samples: Samples) -> float:
    """Root-mean-square level of normalised samples (0.0 for empty input)."""
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(samples))))
