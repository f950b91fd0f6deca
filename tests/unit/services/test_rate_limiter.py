"""
Unit tests for the client-side RateLimiter.

Uses a fake millisecond clock; sleeps advance it instead of waiting.
"""

from unittest.mock import AsyncMock, patch

import pytest

from hookbridge.models.contracts.api import RateLimitConfig
from hookbridge.services.api.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep(clock):
    with patch(
        "hookbridge.services.api.rate_limiter.asyncio.sleep",
        new_callable=AsyncMock,
        side_effect=lambda seconds: clock.advance(seconds * 1000),
    ) as mock_sleep:
        yield mock_sleep


def limiter(clock, strategy):
    return RateLimiter(RateLimitConfig(requests=2, window=1000, strategy=strategy), clock=clock)


class TestFixedWindow:
    @pytest.mark.asyncio
    async def test_slots_within_budget_do_not_wait(self, clock, sleep):
        rl = limiter(clock, "fixed")

        await rl.wait_for_slot()
        await rl.wait_for_slot()

        sleep.assert_not_called()
        assert rl.get_remaining_requests() == 0

    @pytest.mark.asyncio
    async def test_waits_for_window_reset(self, clock, sleep):
        rl = limiter(clock, "fixed")
        await rl.wait_for_slot()
        await rl.wait_for_slot()
        clock.advance(700)

        await rl.wait_for_slot()

        sleep.assert_awaited_once_with(pytest.approx(0.3))
        assert clock.now == pytest.approx(1000)
        assert rl.get_remaining_requests() == 1

    @pytest.mark.asyncio
    async def test_state_and_time_to_reset(self, clock, sleep):
        rl = limiter(clock, "fixed")
        await rl.wait_for_slot()
        clock.advance(250)

        state = rl.get_state()

        assert state.requests == 1
        assert state.window_start == 0
        assert state.next_reset == 1000
        assert rl.get_time_to_reset() == 750

    def test_expired_window_restores_budget(self, clock):
        rl = limiter(clock, "fixed")
        clock.advance(5000)

        assert rl.get_remaining_requests() == 2


class TestSlidingWindow:
    @pytest.mark.asyncio
    async def test_waits_for_oldest_request_to_expire(self, clock, sleep):
        rl = limiter(clock, "sliding")
        await rl.wait_for_slot()
        clock.advance(600)
        await rl.wait_for_slot()
        clock.advance(100)

        await rl.wait_for_slot()

        sleep.assert_awaited_once_with(pytest.approx(0.3))
        # The request at t=600 is still inside the window
        assert rl.get_remaining_requests() == 0

    @pytest.mark.asyncio
    async def test_budget_frees_one_request_at_a_time(self, clock, sleep):
        rl = limiter(clock, "sliding")
        await rl.wait_for_slot()
        clock.advance(600)
        await rl.wait_for_slot()

        clock.advance(401)
        assert rl.get_remaining_requests() == 1
        assert rl.get_time_to_reset() == pytest.approx(599)

        clock.advance(600)
        assert rl.get_remaining_requests() == 2
        assert rl.get_time_to_reset() == 0
