"""
Unit tests for the per-client fixed-window RateLimiter
"""

import asyncio
import time
import pytest

from app.core.rate_limiter import RateLimiter


class TestRateLimiter:
    """Test rate limiting functionality"""

    @pytest.mark.asyncio
    async def test_allows_requests_under_limit(self):
        """Requests up to the limit are allowed"""
        rate_limiter = RateLimiter(max_requests=10, window_seconds=60)

        results = [await rate_limiter.check("203.0.113.7") for _ in range(10)]

        assert all(results)

    @pytest.mark.asyncio
    async def test_blocks_requests_over_limit(self):
        """The eleventh request in the window is refused"""
        rate_limiter = RateLimiter(max_requests=10, window_seconds=60)

        for _ in range(10):
            await rate_limiter.check("203.0.113.7")

        assert await rate_limiter.check("203.0.113.7") is False
        assert await rate_limiter.check("203.0.113.7") is False

    @pytest.mark.asyncio
    async def test_refused_requests_are_not_counted(self):
        """Refused requests do not extend the count"""
        rate_limiter = RateLimiter(max_requests=2, window_seconds=60)

        for _ in range(5):
            await rate_limiter.check("client")

        count, _ = rate_limiter.windows["client"]
        assert count == 2

    @pytest.mark.asyncio
    async def test_limits_are_per_key(self):
        """One client filling its window does not affect another"""
        rate_limiter = RateLimiter(max_requests=2, window_seconds=60)

        await rate_limiter.check("client-a")
        await rate_limiter.check("client-a")

        assert await rate_limiter.check("client-a") is False
        assert await rate_limiter.check("client-b") is True

    @pytest.mark.asyncio
    async def test_window_resets_after_expiry(self):
        """An expired window starts over"""
        rate_limiter = RateLimiter(max_requests=2, window_seconds=60)
        rate_limiter.windows["client"] = (2, time.monotonic() - 1)

        assert await rate_limiter.check("client") is True
        count, reset_time = rate_limiter.windows["client"]
        assert count == 1
        assert reset_time > time.monotonic()

    @pytest.mark.asyncio
    async def test_short_window_expires(self):
        """Real expiry with a short window"""
        rate_limiter = RateLimiter(max_requests=1, window_seconds=0.05)

        assert await rate_limiter.check("client") is True
        assert await rate_limiter.check("client") is False

        await asyncio.sleep(0.1)

        assert await rate_limiter.check("client") is True

    @pytest.mark.asyncio
    async def test_concurrent_checks_respect_limit(self):
        """Concurrent requests never exceed the limit"""
        rate_limiter = RateLimiter(max_requests=10, window_seconds=60)

        results = await asyncio.gather(*[rate_limiter.check("client") for _ in range(25)])

        assert sum(results) == 10

    @pytest.mark.asyncio
    async def test_expired_windows_are_dropped(self):
        """Rotating keys do not grow the table once their windows expire"""
        rate_limiter = RateLimiter(max_requests=10, window_seconds=0.01, sweep_threshold=100)

        for index in range(100):
            await rate_limiter.check(f"198.51.100.{index}")
        assert len(rate_limiter.windows) == 100

        await asyncio.sleep(0.05)
        await rate_limiter.check("203.0.113.7")

        assert list(rate_limiter.windows) == ["203.0.113.7"]

    @pytest.mark.asyncio
    async def test_sweep_keeps_active_windows(self):
        """Only expired windows are dropped"""
        rate_limiter = RateLimiter(max_requests=2, window_seconds=60, sweep_threshold=3)
        rate_limiter.windows["stale"] = (2, time.monotonic() - 1)
        await rate_limiter.check("active")
        await rate_limiter.check("active")
        await rate_limiter.check("other")

        assert await rate_limiter.check("active") is False
        assert set(rate_limiter.windows) == {"active", "other"}
        assert rate_limiter.windows["active"][0] == 2

    @pytest.mark.asyncio
    async def test_table_stays_bounded_under_key_rotation(self):
        """Table size stays near the threshold when every key is new"""
        rate_limiter = RateLimiter(max_requests=10, window_seconds=0.001, sweep_threshold=50)

        for index in range(500):
            await rate_limiter.check(f"key-{index}")
            if index % 50 == 0:
                await asyncio.sleep(0.005)

        assert len(rate_limiter.windows) <= 100

    @pytest.mark.asyncio
    async def test_reset(self):
        """reset() clears every window"""
        rate_limiter = RateLimiter(max_requests=1, window_seconds=60)
        await rate_limiter.check("client")

        rate_limiter.reset()

        assert rate_limiter.windows == {}
        assert await rate_limiter.check("client") is True
