"""
Rate limiter for LLM requests.

This module keeps remote enhancer traffic under the provider's
per-minute and per-hour limits with a token bucket, and caps bursts
within any one second.
"""

import asyncio
import logging
import time
from collections import deque
from typing import Dict, Any


logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Token bucket rate limiter.

    Instances are not shared between processes; each worker keeps
    its own buckets.
    """

    def __init__(
        self,
        requests_per_minute: int = 60,
        requests_per_hour: int = 1000,
        burst_size: int = 10
    ):
        """
        Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests per minute
            requests_per_hour: Maximum requests per hour
            burst_size: Maximum requests within one second
        """
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.burst_size = burst_size

        now = time.monotonic()
        self.minute_tokens = float(requests_per_minute)
        self.hour_tokens = float(requests_per_hour)
        self.last_refill = now

        self.recent_requests = deque()
        self.total_requests = 0
        self.delayed_requests = 0

        logger.info(f"RateLimiter initialized: {requests_per_minute}/min, {requests_per_hour}/hour")

    async def wait_if_needed(self):
        """
        Block until a request fits within the limits, then record it.
        """
        now = time.monotonic()
        self._refill(now)

        wait_time = self._wait_time(now)
        if wait_time > 0:
            self.delayed_requests += 1
            logger.debug(f"Rate limit reached, waiting {wait_time:.2f} seconds")
            await asyncio.sleep(wait_time)
            now = time.monotonic()
            self._refill(now)

        self._record(now)

    def _refill(self, now: float):
        elapsed = now - self.last_refill
        self.minute_tokens = min(
            self.requests_per_minute,
            self.minute_tokens + elapsed * self.requests_per_minute / 60
        )
        self.hour_tokens = min(
            self.requests_per_hour,
            self.hour_tokens + elapsed * self.requests_per_hour / 3600
        )
        self.last_refill = now

    def _wait_time(self, now: float) -> float:
        waits = [0.0]

        if self.minute_tokens < 1:
            waits.append((1 - self.minute_tokens) / (self.requests_per_minute / 60))

        if self.hour_tokens < 1:
            waits.append((1 - self.hour_tokens) / (self.requests_per_hour / 3600))

        while self.recent_requests and now - self.recent_requests[0] >= 1.0:
            self.recent_requests.popleft()
        if len(self.recent_requests) >= self.burst_size:
            waits.append(1.0 - (now - self.recent_requests[0]))

        return max(waits)

    def _record(self, now: float):
        self.recent_requests.append(now)
        self.total_requests += 1
        self.minute_tokens -= 1
        self.hour_tokens -= 1

    def get_stats(self) -> Dict[str, Any]:
        """Get rate limiter statistics."""
        return {
            "total_requests": self.total_requests,
            "delayed_requests": self.delayed_requests,
            "minute_tokens_remaining": max(0, int(self.minute_tokens)),
            "hour_tokens_remaining": max(0, int(self.hour_tokens)),
            "requests_per_minute_limit": self.requests_per_minute,
            "requests_per_hour_limit": self.requests_per_hour,
            "burst_size": self.burst_size
        }
