"""Request pacing for the vision model.

One limiter is shared by every request that uses the same credential. It
enforces two rules together: at most ``requests_per_minute`` admissions per
window, and at least ``min_interval`` seconds between admissions. The window
resets lazily: the first check after it has aged past ``window`` seconds
zeroes the count and restarts the window at that moment.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from loguru import logger

from ..exceptions import ConfigurationError
from ..settings import Settings, get_settings


class RateLimiter:
    def __init__(
        self,
        requests_per_minute: int,
        min_interval: float = 0.0,
        window: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if requests_per_minute < 1:
            raise ConfigurationError(f"requests_per_minute must be at least 1, got {requests_per_minute}")
        if min_interval < 0 or window <= 0:
            raise ConfigurationError("min_interval must be >= 0 and window must be > 0")
        self.requests_per_minute = requests_per_minute
        self.min_interval = min_interval
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._count = 0
        self._window_start = clock()
        self._last_request: float | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RateLimiter:
        s = settings or get_settings()
        return cls(s.requests_per_minute, s.min_request_interval_seconds, s.rate_window_seconds)

    # ---- pure queries ---- #

    def _window_expired(self, now: float) -> bool:
        return now - self._window_start >= self.window

    def _count_at(self, now: float) -> int:
        return 0 if self._window_expired(now) else self._count

    def _delay_at(self, now: float) -> float:
        """Seconds until both the interval and the window cap admit a request."""
        delay = 0.0
        if self._last_request is not None:
            delay = max(delay, self._last_request + self.min_interval - now)
        if self._count_at(now) >= self.requests_per_minute:
            delay = max(delay, self._window_start + self.window - now)
        return delay

    def can_make_request(self) -> bool:
        return self._delay_at(self._clock()) <= 0.0

    def remaining(self) -> int:
        """Admissions left in the current window."""
        return max(self.requests_per_minute - self._count_at(self._clock()), 0)

    def time_until_reset(self) -> float:
        now = self._clock()
        if self._window_expired(now):
            return 0.0
        return self._window_start + self.window - now

    # ---- admission ---- #

    async def wait(self) -> None:
        """Suspend until a request may be made, then record it.

        The lock is held only while checking and recording; sleeping happens
        outside it, so cancellation while waiting leaves no trace.
        """
        while True:
            async with self._lock:
                now = self._clock()
                if self._window_expired(now):
                    self._count = 0
                    self._window_start = now
                delay = self._delay_at(now)
                if delay <= 0.0:
                    self._count += 1
                    self._last_request = now
                    return
            logger.debug(f"Rate limit: waiting {delay:.2f}s ({self._count}/{self.requests_per_minute} in window)")
            await self._sleep(delay)


__all__ = ["RateLimiter"]
