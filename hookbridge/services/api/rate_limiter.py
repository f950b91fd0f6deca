"""
Rate Limiting

Client-side request budget for outbound platform API calls.

Two window types:
- fixed: a counter reset every ``window`` ms
- sliding: a log of request times, pruned to the last ``window`` ms
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable

from hookbridge.models.contracts.api import RateLimitConfig
from hookbridge.models.enums import RateLimitStrategy

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class RateLimitState:
    """Snapshot of the limiter (times in the limiter's clock, ms)"""
    requests: int
    window_start: float
    next_reset: float


class RateLimiter:
    """
    In-process rate limiter for one ApiClient.

    Not shared across processes; a platform's own 429s are still handled by
    the client's retry loop.
    """

    def __init__(self, config: RateLimitConfig, clock: Callable[[], float] = monotonic_ms):
        """
        Args:
            config: Request budget and window
            clock: Millisecond clock, injectable for tests
        """
        self.config = config
        self._clock = clock
        now = clock()
        self._requests = 0
        self._window_start = now
        self._log: deque[float] = deque()

    @property
    def sliding(self) -> bool:
        return self.config.strategy == RateLimitStrategy.SLIDING

    async def wait_for_slot(self) -> None:
        """Wait until a request may be sent, then claim the slot."""
        while True:
            now = self._clock()
            self._advance(now)

            if self._used() < self.config.requests:
                self._claim(now)
                return

            wait_ms = self._time_to_reset(now)
            logger.debug(
                f"Rate limit reached, waiting {wait_ms:.0f}ms",
                extra={"limit": self.config.requests, "window": self.config.window},
            )
            await asyncio.sleep(wait_ms / 1000)

    def get_state(self) -> RateLimitState:
        now = self._clock()
        self._advance(now)
        window_start = self._log[0] if self.sliding and self._log else self._window_start
        return RateLimitState(
            requests=self._used(),
            window_start=window_start,
            next_reset=now + self._time_to_reset(now),
        )

    def get_remaining_requests(self) -> int:
        self._advance(self._clock())
        return max(0, self.config.requests - self._used())

    def get_time_to_reset(self) -> float:
        """Milliseconds until the window resets (sliding: until the oldest request ages out)."""
        now = self._clock()
        self._advance(now)
        return self._time_to_reset(now)

    # ==================== INTERNALS ====================

    def _used(self) -> int:
        return len(self._log) if self.sliding else self._requests

    def _claim(self, now: float) -> None:
        if self.sliding:
            self._log.append(now)
        else:
            self._requests += 1

    def _advance(self, now: float) -> None:
        if self.sliding:
            cutoff = now - self.config.window
            while self._log and self._log[0] <= cutoff:
                self._log.popleft()
        elif now >= self._window_start + self.config.window:
            self._reset(now)

    def _reset(self, now: float) -> None:
        self._requests = 0
        self._window_start = now
        self._log.clear()

    def _time_to_reset(self, now: float) -> float:
        if self.sliding:
            if not self._log:
                return 0
            return max(0.0, self._log[0] + self.config.window - now)
        return max(0.0, self._window_start + self.config.window - now)
