"""Audio sink that plays through the local sound card.

Requires the ``sounddevice`` optional dependency::

    pip install repeaterkit[local-audio]

The radio's audio input is wired to the sound card output; VOX keys the
transmitter while the buffer plays.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import numpy as np

from repeaterkit.audio.sinks.base import AudioSink

logger = logging.getLogger("repeaterkit.audio.local")


def _import_sounddevice() -> Any:
    """Import sounddevice, raising a clear error if missing."""
    try:
        import sounddevice as _sd

        return _sd
    except ImportError as exc:
        raise ImportError(
            "sounddevice is required for SoundDeviceAudioSink. "
            "Install it with: pip install repeaterkit[local-audio]"
        ) from exc


class SoundDeviceAudioSink(AudioSink):
    """Play PCM buffers with ``sounddevice.play`` in a worker thread.

    Args:
        output_device: Sounddevice output device index or name (None = default).
    """

    def __init__(self, *, output_device: int | str | None = None) -> None:
        self._sd = _import_sounddevice()
        self._output_device = output_device

    @property
    def name(self) -> str:
        return "sounddevice"

    async def play(self, pcm: bytes, sample_rate: int) -> None:
        n_samples = len(pcm) // 2
        if n_samples == 0:
            return
        sd = self._sd
        data = np.frombuffer(pcm[: n_samples * 2], dtype="<i2").reshape(-1, 1)

        def _play() -> None:
            sd.play(data, samplerate=sample_rate, device=self._output_device)
            sd.wait()

        logger.debug("Playing %d samples at %d Hz", n_samples, sample_rate)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _play)
        except asyncio.CancelledError:
            sd.stop()
            raise

    async def close(self) -> None:
        self._sd.stop()
