"""Tests for publish pacing."""

import pytest

from event_pingpong.core.pacing import RateLimiter


class TestRateLimiter:
    """Minimum interval between publishes."""

    @pytest.mark.asyncio
    async def test_first_publish_never_waits(self, fake_clock):
        limiter = RateLimiter(250, clock=fake_clock, sleep=fake_clock.sleep)

        delay = await limiter.wait()

        assert delay == 0
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_for_the_remaining_interval(self, fake_clock):
        limiter = RateLimiter(250, clock=fake_clock, sleep=fake_clock.sleep)
        limiter.mark()
        fake_clock.advance(0.1)

        delay = await limiter.wait()

        assert delay == pytest.approx(150)
        assert fake_clock.sleeps == [pytest.approx(0.15)]

    @pytest.mark.asyncio
    async def test_no_wait_once_interval_has_passed(self, fake_clock):
        limiter = RateLimiter(250, clock=fake_clock, sleep=fake_clock.sleep)
        limiter.mark()
        fake_clock.advance(0.3)

        assert await limiter.wait() == 0
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_zero_interval_never_waits(self, fake_clock):
        limiter = RateLimiter(0, clock=fake_clock, sleep=fake_clock.sleep)
        limiter.mark()

        assert await limiter.wait() == 0

    def test_mark_records_clock_time(self, fake_clock):
        limiter = RateLimiter(250, clock=fake_clock)

        assert limiter.last_publish_time is None
        assert limiter.mark() == fake_clock.now
        assert limiter.last_publish_time == fake_clock.now
