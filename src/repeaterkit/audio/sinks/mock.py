"""Mock audio sink for testing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from repeaterkit.audio.sinks.base import AudioSink
from repeaterkit.audio.synth import duration_ms_of


@dataclass
class PlayedBuffer:
    pcm: bytes
    sample_rate: int

    @property
    def duration_ms(self) -> float:
        return duration_ms_of(self.pcm, self.sample_rate)


class MockAudioSink(AudioSink):
    """Records every buffer instead of playing it.

    Args:
        realtime: Sleep for the buffer's duration, as a real device would.
        fail_with: Exception raised by every ``play`` call.
    """

    def __init__(self, *, realtime: bool = False, fail_with: Exception | None = None) -> None:
        self._realtime = realtime
        self.fail_with = fail_with
        self.played: list[PlayedBuffer] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "MockAudioSink"

    async def play(self, pcm: bytes, sample_rate: int) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        buffer = PlayedBuffer(pcm=pcm, sample_rate=sample_rate)
        self.played.append(buffer)
        if self._realtime:
            await asyncio.sleep(buffer.duration_ms / 1000.0)

    async def close(self) -> None:
        self.closed = True
