"""
In-memory fixed-window rate limiter for the parse endpoint.
"""

import asyncio
import time
from typing import Dict, Tuple
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window request counter per client key (normally the client IP).

    Keys come from request headers, so expired windows are swept whenever the
    table reaches ``sweep_threshold`` entries.
    """

    def __init__(self, max_requests: int = 10, window_seconds: float = 60, sweep_threshold: int = 1000):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_threshold = sweep_threshold
        # key -> (request count, window reset time)
        self.windows: Dict[str, Tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, reset_time) in self.windows.items() if now > reset_time]
        for key in expired:
            del self.windows[key]
        if expired:
            logger.debug(f"Dropped {len(expired)} expired rate limit windows, {len(self.windows)} active")

    async def check(self, key: str) -> bool:
        """Record a request for ``key``; False when its window is already full"""
        async with self._lock:
            now = time.monotonic()
            if len(self.windows) >= self.sweep_threshold:
                self._sweep(now)

            record = self.windows.get(key)

            if record is None or now > record[1]:
                self.windows[key] = (1, now + self.window_seconds)
                return True

            count, reset_time = record
            if count >= self.max_requests:
                logger.info(f"Rate limit reached for {key}, resets in {reset_time - now:.1f} seconds")
                return False

            self.windows[key] = (count + 1, reset_time)
            return True

    def reset(self) -> None:
        """Forget all recorded requests"""
        self.windows.clear()
