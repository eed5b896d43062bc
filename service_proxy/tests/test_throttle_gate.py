"""
Unit tests for the throttle gate.
"""

import asyncio

import pytest

from service_proxy.app.throttle import ThrottleGate
from shared.errors import ThrottleError


class FakeClock:
    """Deterministic clock whose sleep advances time instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class TestThrottleGate:
    """Test cases for ThrottleGate."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def gate(self, clock):
        return ThrottleGate(0.5, clock=clock, sleep=clock.sleep)

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self, gate, clock):
        ticket = await gate.acquire()

        assert ticket.position == 0
        assert ticket.waited == 0
        assert clock.sleeps == []
        assert gate.last_release == 0.0

    @pytest.mark.asyncio
    async def test_back_to_back_acquires_are_spaced(self, gate, clock):
        tickets = [await gate.acquire() for _ in range(3)]

        assert [t.released_at for t in tickets] == [0.0, 0.5, 1.0]
        assert clock.sleeps == [0.5, 0.5]

    @pytest.mark.asyncio
    async def test_only_remaining_interval_is_waited(self, gate, clock):
        await gate.acquire()
        clock.now = 0.25

        ticket = await gate.acquire()

        assert clock.sleeps == [0.25]
        assert ticket.released_at == pytest.approx(0.5)
        assert ticket.waited == 0.25

    @pytest.mark.asyncio
    async def test_idle_gate_admits_immediately(self, gate, clock):
        await gate.acquire()
        clock.now = 2.0

        ticket = await gate.acquire()

        assert clock.sleeps == []
        assert ticket.released_at == 2.0

    @pytest.mark.asyncio
    async def test_concurrent_acquires_release_in_fifo_order(self):
        gate = ThrottleGate(0.02)
        released = []

        async def worker(tag):
            ticket = await gate.acquire()
            released.append((tag, ticket.position))

        tasks = [asyncio.create_task(worker(tag)) for tag in range(8)]
        await asyncio.gather(*tasks)

        assert [tag for tag, _ in released] == list(range(8))
        assert [position for _, position in released] == list(range(8))

    @pytest.mark.asyncio
    async def test_concurrent_releases_respect_min_interval(self):
        gate = ThrottleGate(0.05)

        tickets = await asyncio.gather(*(gate.acquire() for _ in range(5)))

        ordered = sorted(tickets, key=lambda t: t.position)
        for previous, current in zip(ordered, ordered[1:]):
            assert current.released_at - previous.released_at >= 0.05 - 1e-9

    @pytest.mark.asyncio
    async def test_release_time_is_monotonic(self, gate, clock):
        seen = []
        for step in (0.0, 0.1, 0.9, 0.9, 3.0):
            clock.now = max(clock.now, step)
            await gate.acquire()
            seen.append(gate.last_release)

        assert seen == sorted(seen)

    @pytest.mark.asyncio
    async def test_wait_failure_is_reported_and_gate_recovers(self, clock):
        async def broken_sleep(delay):
            raise RuntimeError("timer exploded")

        gate = ThrottleGate(0.5, clock=clock, sleep=broken_sleep)
        await gate.acquire()

        with pytest.raises(ThrottleError) as exc_info:
            await gate.acquire()

        assert "timer exploded" in exc_info.value.message
        assert exc_info.value.status_code == 500
        assert not gate._lock.locked()

        gate._sleep = clock.sleep
        ticket = await gate.acquire()
        assert ticket.released_at == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_block_later_callers(self):
        gate = ThrottleGate(0.2)
        await gate.acquire()

        waiting = asyncio.create_task(gate.acquire())
        await asyncio.sleep(0.01)
        waiting.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiting

        assert not gate._lock.locked()
        ticket = await asyncio.wait_for(gate.acquire(), timeout=1.0)
        assert ticket.position == 2

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            ThrottleGate(-1)
