"""AudioSink abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AudioSink(ABC):
    """Playback device for rendered transmit audio.

    ``play`` must not return until the whole buffer has been played: feature
    modules hold the transmit gate for exactly that long, so a roger beep or
    beacon can never be interleaved with other audio.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Sink name (e.g. 'sounddevice')."""
        ...

    @abstractmethod
    async def play(self, pcm: bytes, sample_rate: int) -> None:
        """Play a PCM16 LE mono buffer and wait for it to finish.

        Args:
            pcm: The audio to play.
            sample_rate: Sample rate of *pcm* in Hz.
        """
        ...

    async def close(self) -> None:  # noqa: B027
        """Release resources."""
