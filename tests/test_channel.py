"""Tests for ChannelActivityDetector."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from repeaterkit.core.channel import ChannelActivityDetector
from repeaterkit.models.config import ChannelConfig
from repeaterkit.models.events import ChannelActiveEvent, ChannelInactiveEvent
from tests.conftest import FakeClock, sine

LOUD = sine(440.0, 960, amplitude=0.5)
QUIET = np.zeros(960)


class TestChannelActivityDetector:
    def test_quiet_channel_stays_inactive(self, clock: FakeClock) -> None:
        detector = ChannelActivityDetector(clock=clock)
        assert detector.process(QUIET) is False
        assert not detector.is_active
        assert detector.level == 0.0

    def test_loud_block_activates(self, clock: FakeClock) -> None:
        detector = ChannelActivityDetector(clock=clock)
        assert detector.process(LOUD) is True
        assert detector.is_active
        assert detector.level == pytest.approx(0.5 / np.sqrt(2), rel=0.01)

    def test_sustain_bridges_pauses(self, clock: FakeClock) -> None:
        detector = ChannelActivityDetector(ChannelConfig(sustain_time_ms=1000), clock=clock)
        detector.process(LOUD)
        clock.advance_ms(600)
        assert detector.process(QUIET) is True
        clock.advance_ms(300)
        assert detector.is_active
        clock.advance_ms(200)
        assert not detector.is_active

    def test_events(self, clock: FakeClock) -> None:
        detector = ChannelActivityDetector(clock=clock)
        events: list[object] = []
        detector.add_listener(events.append)

        detector.process(LOUD)
        clock.advance_ms(500)
        detector.process(LOUD)
        clock.advance_ms(1500)
        detector.process(QUIET)

        assert len(events) == 2
        assert isinstance(events[0], ChannelActiveEvent)
        assert isinstance(events[1], ChannelInactiveEvent)
        assert events[1].duration_ms == pytest.approx(500.0)

        detector.remove_listener(events.append)
        detector.process(LOUD)
        assert len(events) == 2

    def test_set_threshold_clamps(self, caplog: pytest.LogCaptureFixture) -> None:
        detector = ChannelActivityDetector()
        with caplog.at_level(logging.WARNING, logger="repeaterkit.config"):
            assert detector.set_threshold(0.5) == pytest.approx(0.1)
        assert "clamped" in caplog.text
        assert detector.set_threshold(0.0001) == pytest.approx(0.001)
        assert detector.set_threshold(0.05) == pytest.approx(0.05)

    def test_set_threshold_keeps_current_on_garbage(self) -> None:
        detector = ChannelActivityDetector(ChannelConfig(threshold=0.03))
        assert detector.set_threshold("loud") == pytest.approx(0.03)  # type: ignore[arg-type]

    def test_threshold_from_config_is_clamped(self) -> None:
        assert ChannelConfig(threshold=1.0).threshold == pytest.approx(0.1)

    def test_reset_and_status(self, clock: FakeClock) -> None:
        detector = ChannelActivityDetector(clock=clock)
        detector.process(LOUD)
        status = detector.status(transmitting=True)
        assert status.active
        assert status.transmitting
        assert status.threshold == pytest.approx(0.02)
        detector.reset()
        assert not detector.is_active
        assert detector.level == 0.0
