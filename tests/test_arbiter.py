"""Tests for TransmitArbiter."""

from __future__ import annotations

import asyncio

import pytest

from repeaterkit.audio.sinks.mock import MockAudioSink
from repeaterkit.core.arbiter import TransmitArbiter
from repeaterkit.errors import ChannelBusyTimeoutError
from repeaterkit.models.config import ArbiterConfig
from tests.conftest import StubChannel

FAST = ArbiterConfig(poll_interval_ms=10, default_timeout_ms=2000)


class TestTransmitArbiter:
    async def test_acquire_on_quiet_channel(self) -> None:
        arbiter = TransmitArbiter(StubChannel(False), FAST)
        assert arbiter.is_safe_to_transmit()
        async with arbiter.acquire():
            assert arbiter.transmitting
            assert not arbiter.is_safe_to_transmit()
        assert not arbiter.transmitting
        assert arbiter.grants == 1

    async def test_no_occupancy_source_means_quiet(self) -> None:
        arbiter = TransmitArbiter()
        assert not arbiter.channel_busy()
        assert arbiter.is_safe_to_transmit()

    async def test_mutual_exclusion(self) -> None:
        arbiter = TransmitArbiter(StubChannel(False), FAST)
        inside = 0
        peak = 0

        async def transmission() -> None:
            nonlocal inside, peak
            async with arbiter.acquire():
                inside += 1
                peak = max(peak, inside)
                await asyncio.sleep(0.02)
                inside -= 1

        await asyncio.gather(*(transmission() for _ in range(4)))
        assert peak == 1
        assert arbiter.grants == 4
        assert arbiter.waiters == 0

    async def test_busy_channel_times_out_not_early(self) -> None:
        arbiter = TransmitArbiter(StubChannel(True))
        loop = asyncio.get_running_loop()
        started = loop.time()
        with pytest.raises(ChannelBusyTimeoutError) as exc_info:
            async with arbiter.acquire(timeout_ms=1000):
                pytest.fail("gate granted on a busy channel")
        elapsed = loop.time() - started
        assert elapsed >= 0.95
        assert elapsed < 2.0
        assert exc_info.value.timeout_ms == 1000
        assert arbiter.waiters == 0
        assert not arbiter.transmitting
        assert arbiter.grants == 0

    async def test_waits_for_channel_to_clear(self) -> None:
        channel = StubChannel(True)
        arbiter = TransmitArbiter(channel, FAST)

        async def clear_later() -> None:
            await asyncio.sleep(0.05)
            channel.is_active = False

        clearer = asyncio.create_task(clear_later())
        async with arbiter.acquire(timeout_ms=1000):
            assert arbiter.transmitting
            assert not channel.is_active
        await clearer

    async def test_waiter_count_while_blocked(self, advance) -> None:
        channel = StubChannel(True)
        arbiter = TransmitArbiter(channel, FAST)

        async def waiter() -> None:
            async with arbiter.acquire(timeout_ms=1000):
                pass

        task = asyncio.create_task(waiter())
        await advance()
        assert arbiter.waiters == 1
        channel.is_active = False
        await task
        assert arbiter.waiters == 0

    async def test_released_after_body_raises(self) -> None:
        arbiter = TransmitArbiter(StubChannel(False), FAST)
        with pytest.raises(RuntimeError):
            async with arbiter.acquire():
                raise RuntimeError("sink exploded")
        assert not arbiter.transmitting
        async with arbiter.acquire(timeout_ms=100):
            pass

    async def test_cancelled_waiter_leaves_no_residue(self, advance) -> None:
        arbiter = TransmitArbiter(StubChannel(True), FAST)

        async def waiter() -> None:
            async with arbiter.acquire(timeout_ms=5000):
                pass

        task = asyncio.create_task(waiter())
        await advance()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert arbiter.waiters == 0
        assert not arbiter.transmitting

    async def test_transmit_plays_through_sink(self) -> None:
        arbiter = TransmitArbiter(StubChannel(False), FAST)
        sink = MockAudioSink()
        await arbiter.transmit(sink, b"\x01\x00" * 480, 48000)
        assert len(sink.played) == 1
        assert sink.played[0].duration_ms == pytest.approx(10.0)
        assert not arbiter.transmitting

    async def test_transmit_does_not_play_on_timeout(self) -> None:
        arbiter = TransmitArbiter(StubChannel(True), FAST)
        sink = MockAudioSink()
        with pytest.raises(ChannelBusyTimeoutError):
            await arbiter.transmit(sink, b"\x00\x00", 48000, timeout_ms=30)
        assert sink.played == []
