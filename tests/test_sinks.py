"""Tests for audio sinks."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import numpy as np
import pytest

from repeaterkit.audio.sinks.local import SoundDeviceAudioSink
from repeaterkit.audio.sinks.mock import MockAudioSink
from repeaterkit.audio.sinks.wavfile import TempWavAudioSink
from repeaterkit.errors import SynthesisIoError

PCM = b"\x10\x00\xf0\xff" * 240


class TestMockAudioSink:
    async def test_records_buffers(self) -> None:
        sink = MockAudioSink()
        await sink.play(PCM, 48000)
        assert len(sink.played) == 1
        assert sink.played[0].pcm == PCM
        assert sink.played[0].duration_ms == pytest.approx(10.0)
        await sink.close()
        assert sink.closed

    async def test_fail_with(self) -> None:
        sink = MockAudioSink(fail_with=SynthesisIoError("nope"))
        with pytest.raises(SynthesisIoError):
            await sink.play(PCM, 48000)
        assert sink.played == []


class TestTempWavAudioSink:
    async def test_runs_player_and_removes_file(self, tmp_path: Path) -> None:
        sink = TempWavAudioSink(player=("true",), temp_dir=tmp_path)
        await sink.play(PCM, 48000)
        assert list(tmp_path.iterdir()) == []

    async def test_player_receives_wav_path(self, tmp_path: Path) -> None:
        copy = tmp_path / "copy.wav"
        script = f"import shutil, sys; shutil.copy(sys.argv[1], {str(copy)!r})"
        sink = TempWavAudioSink(player=(sys.executable, "-c", script), temp_dir=tmp_path)
        await sink.play(PCM, 8000)
        data = copy.read_bytes()
        assert data[:4] == b"RIFF"
        assert data[44:] == PCM
        assert [p.name for p in tmp_path.iterdir()] == ["copy.wav"]

    async def test_missing_player(self, tmp_path: Path) -> None:
        sink = TempWavAudioSink(player=("repeaterkit-no-such-player",), temp_dir=tmp_path)
        with pytest.raises(SynthesisIoError, match="cannot start player"):
            await sink.play(PCM, 48000)
        assert list(tmp_path.iterdir()) == []

    async def test_player_failure(self, tmp_path: Path) -> None:
        sink = TempWavAudioSink(player=("false",), temp_dir=tmp_path)
        with pytest.raises(SynthesisIoError, match="exited with 1"):
            await sink.play(PCM, 48000)
        assert list(tmp_path.iterdir()) == []

    async def test_cancel_kills_and_reaps_player(self, tmp_path: Path, advance) -> None:
        async def never_finishes() -> tuple[bytes, bytes]:
            await asyncio.Event().wait()
            return b"", b""

        proc = MagicMock()
        proc.communicate = AsyncMock(side_effect=never_finishes)
        proc.wait = AsyncMock(return_value=-9)
        sink = TempWavAudioSink(player=("aplay",), temp_dir=tmp_path)

        with patch(
            "repeaterkit.audio.sinks.wavfile.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            task = asyncio.create_task(sink.play(PCM, 48000))
            await advance(10)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()
        assert list(tmp_path.iterdir()) == []

    async def test_unwritable_temp_dir(self, tmp_path: Path) -> None:
        sink = TempWavAudioSink(player=("true",), temp_dir=tmp_path / "missing")
        with pytest.raises(SynthesisIoError, match="cannot write"):
            await sink.play(PCM, 48000)


class TestSoundDeviceAudioSink:
    async def test_plays_int16_column(self) -> None:
        sd = MagicMock()
        with patch("repeaterkit.audio.sinks.local._import_sounddevice", return_value=sd):
            sink = SoundDeviceAudioSink(output_device=3)
        await sink.play(PCM, 48000)

        sd.play.assert_called_once()
        data = sd.play.call_args.args[0]
        assert data.shape == (480, 1)
        assert data.dtype == np.dtype("<i2")
        assert sd.play.call_args.kwargs == {"samplerate": 48000, "device": 3}
        sd.wait.assert_called_once()

    async def test_empty_buffer_skipped(self) -> None:
        sd = MagicMock()
        with patch("repeaterkit.audio.sinks.local._import_sounddevice", return_value=sd):
            sink = SoundDeviceAudioSink()
        await sink.play(b"", 48000)
        sd.play.assert_not_called()

    async def test_close_stops_playback(self) -> None:
        sd = MagicMock()
        with patch("repeaterkit.audio.sinks.local._import_sounddevice", return_value=sd):
            sink = SoundDeviceAudioSink()
        await sink.close()
        sd.stop.assert_called_once()

    def test_missing_dependency(self) -> None:
        with (
            patch.dict(sys.modules, {"sounddevice": None}),
            pytest.raises(ImportError, match="local-audio"),
        ):
            SoundDeviceAudioSink()
