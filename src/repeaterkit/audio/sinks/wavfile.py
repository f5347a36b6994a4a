"""Audio sink that hands a temporary WAV file to an external player."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import tempfile
import uuid
from collections.abc import Sequence
from pathlib import Path

from repeaterkit.audio.sinks.base import AudioSink
from repeaterkit.audio.synth import write_wav_file
from repeaterkit.errors import SynthesisIoError

logger = logging.getLogger("repeaterkit.audio.wavfile")


class TempWavAudioSink(AudioSink):
    """Write each buffer to a temp WAV file, run *player* on it, delete it.

    Args:
        player: Command prefix; the WAV path is appended (default ``aplay -q``).
        temp_dir: Directory for the temporary files (default: system temp).
    """

    def __init__(
        self,
        player: Sequence[str] = ("aplay", "-q"),
        *,
        temp_dir: str | Path | None = None,
    ) -> None:
        self._player = list(player)
        self._temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())

    @property
    def name(self) -> str:
        return "TempWavAudioSink"

    async def play(self, pcm: bytes, sample_rate: int) -> None:
        path = self._temp_dir / f"repeaterkit_{uuid.uuid4().hex}.wav"
        write_wav_file(path, pcm, sample_rate)
        try:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *self._player,
                    str(path),
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise SynthesisIoError(f"cannot start player {self._player[0]!r}: {exc}") from exc
            try:
                _, stderr = await proc.communicate()
            except asyncio.CancelledError:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()
                raise
            if proc.returncode != 0:
                raise SynthesisIoError(
                    f"player exited with {proc.returncode}: {stderr.decode(errors='replace').strip()}"
                )
        finally:
            with contextlib.suppress(OSError):
                path.unlink()
            logger.debug("Removed temp WAV %s", path)
