"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import numpy as np
import pytest

from repeaterkit.audio.frame import AudioFrame
from repeaterkit.dtmf.base import digit_frequencies


@pytest.fixture
def advance() -> Callable[[int], Coroutine[Any, Any, None]]:
    """Yield control to let pending tasks run without real delay.

    Replaces ``await asyncio.sleep(0.05)`` patterns with zero-delay
    event loop yields::

        await advance()       # 5 yields (default)
        await advance(10)     # 10 yields for heavier workloads
    """

    async def _advance(n: int = 5) -> None:
        for _ in range(n):
            await asyncio.sleep(0)

    return _advance


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


class StubChannel:
    """Occupancy source with a settable busy flag."""

    def __init__(self, active: bool = False) -> None:
        self.is_active = active


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def sine(frequency: float, n: int, sample_rate: int = 48000, amplitude: float = 0.4) -> np.ndarray:
    t = np.arange(n) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def dual_tone(
    digit: str, n: int = 1024, sample_rate: int = 48000, amplitude: float = 0.4
) -> np.ndarray:
    """Synthesise the two-tone pair for a keypad symbol as float samples."""
    low, high = digit_frequencies(digit)
    return sine(low, n, sample_rate, amplitude) + sine(high, n, sample_rate, amplitude)


def to_frame(samples: np.ndarray, sample_rate: int = 48000) -> AudioFrame:
    pcm = np.round(np.clip(samples, -1.0, 1.0) * 32767).astype("<i2").tobytes()
    return AudioFrame(data=pcm, sample_rate=sample_rate)
