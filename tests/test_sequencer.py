"""Tests for the roger-beep and beacon pattern renderers."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from repeaterkit.audio.sequencer import ToneSequencer
from repeaterkit.audio.synth import ToneSpec, render_silence, render_tone
from repeaterkit.models.enums import RogerBeepStyle


def _peak_frequency(pcm: bytes, sample_rate: int) -> float:
    samples = np.frombuffer(pcm, dtype="<i2").astype(np.float64)
    spectrum = np.abs(np.fft.rfft(samples * np.hanning(samples.size)))
    return float(np.argmax(spectrum) * sample_rate / samples.size)


class TestKenwoodBeep:
    def test_layout(self) -> None:
        seq = ToneSequencer(48000)
        pcm = seq.render_kenwood_beep(0.7, 250)
        tone = 83 * 48  # 250 // 3 ms at 48 samples/ms
        gap = 10 * 48
        assert len(pcm) // 2 == 3 * tone + 2 * gap

    def test_matches_segment_rendering(self) -> None:
        seq = ToneSequencer(48000)
        expected = b"".join(
            [
                render_tone(ToneSpec(1500.0, 100, 0.5), 48000),
                render_silence(10, 48000),
                render_tone(ToneSpec(1200.0, 100, 0.5 * 0.9), 48000),
                render_silence(10, 48000),
                render_tone(ToneSpec(1000.0, 100, 0.5 * 0.8), 48000),
            ]
        )
        assert seq.render_kenwood_beep(0.5, 300) == expected

    def test_descending_frequencies(self) -> None:
        seq = ToneSequencer(48000)
        pcm = seq.render_kenwood_beep(1.0, 300)
        step = (100 + 10) * 48 * 2
        seg = 100 * 48 * 2
        freqs = [_peak_frequency(pcm[i * step : i * step + seg], 48000) for i in range(3)]
        assert freqs[0] == pytest.approx(1500, abs=15)
        assert freqs[1] == pytest.approx(1200, abs=15)
        assert freqs[2] == pytest.approx(1000, abs=15)

    def test_out_of_range_volume_is_clamped(self, caplog: pytest.LogCaptureFixture) -> None:
        seq = ToneSequencer(48000)
        with caplog.at_level(logging.WARNING, logger="repeaterkit.config"):
            loud = seq.render_kenwood_beep(5.0, 300)
        assert loud == seq.render_kenwood_beep(1.0, 300)
        assert "clamped" in caplog.text

    def test_duration_is_clamped(self) -> None:
        seq = ToneSequencer(48000)
        assert seq.render_kenwood_beep(0.7, 5000) == seq.render_kenwood_beep(0.7, 1000)


class TestBbcPips:
    def test_total_duration_is_5500ms(self) -> None:
        seq = ToneSequencer(48000)
        pcm, duration_ms = seq.render_bbc_pips_sequence(0.7)
        assert duration_ms == 5500
        assert len(pcm) // 2 == 48000 * 5500 // 1000

    @pytest.mark.parametrize("sample_rate", [8000, 16000, 44100])
    def test_duration_matches_buffer(self, sample_rate: int) -> None:
        pcm, duration_ms = ToneSequencer(sample_rate).render_bbc_pips_sequence(0.7)
        assert duration_ms == round((len(pcm) // 2) * 1000 / sample_rate)

    def test_single_continuous_buffer_with_silent_gaps(self) -> None:
        sr = 8000
        pcm, _ = ToneSequencer(sr).render_bbc_pips_sequence(0.7)
        samples = np.frombuffer(pcm, dtype="<i2")
        per_ms = sr // 1000
        for pip in range(5):
            start = pip * 1000 * per_ms
            assert np.abs(samples[start : start + 100 * per_ms]).max() > 0
            gap = samples[start + 100 * per_ms : start + 1000 * per_ms]
            assert not gap.any()
        long_pip = samples[5000 * per_ms :]
        assert long_pip.size == 500 * per_ms
        assert np.abs(long_pip).max() > 0


class TestOtherStyles:
    def test_classic_layout(self) -> None:
        pcm = ToneSequencer(48000).render_classic_beep(0.7, 250)
        assert len(pcm) // 2 == (150 + 20 + 100) * 48

    def test_motorola_is_single_sweep(self) -> None:
        pcm = ToneSequencer(48000).render_motorola_beep(0.7, 250)
        assert len(pcm) // 2 == 250 * 48

    def test_custom_layout(self) -> None:
        pcm = ToneSequencer(48000).render_custom_beep(0.7)
        assert len(pcm) // 2 == (80 + 30 + 120 + 20 + 50) * 48

    @pytest.mark.parametrize("style", list(RogerBeepStyle))
    def test_dispatch(self, style: RogerBeepStyle) -> None:
        seq = ToneSequencer(16000)
        assert seq.render_roger_beep(style, 0.7, 250)

    def test_invalid_sample_rate(self) -> None:
        with pytest.raises(ValueError):
            ToneSequencer(0)
