"""Sliding-window rate limiter for client frames.

Each WebSocket connection gets one limiter. Every ``open``, ``trigger`` and
``close`` frame consumes a slot; control frames (ping/pong/end) do not.

The limiter keeps the timestamps of accepted frames in a deque. On each
``consume`` it drops timestamps older than the window, then either records
the new frame or raises RateLimitError with the time until the oldest
recorded frame leaves the window.

Example:
    limiter = SlidingWindowRateLimiter(limit=20, window_seconds=10)
    try:
        limiter.consume()
    except RateLimitError as err:
        await send_error(ws, error_code="message_rate_limited", extra={"retry_in": err.retry_in})
"""

from __future__ import annotations

import collections
import time
from collections.abc import Callable

from ..errors import RateLimitError

# Type alias for injectable time functions (used in testing)
TimeFn = Callable[[], float]


class SlidingWindowRateLimiter:
    """Allow at most ``limit`` events in any rolling ``window_seconds``.

    A limit or window of zero disables the limiter.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._events: collections.deque[float] = collections.deque()
        self._enabled = self.limit > 0 and self.window_seconds > 0

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        events = self._events
        while events and events[0] <= cutoff:
            events.popleft()

    def consume(self) -> None:
        """Record one event.

        Raises:
            RateLimitError: If the window already holds ``limit`` events.
        """
        if not self._enabled:
            return
        now = self._now()
        self._prune(now)
        if len(self._events) >= self.limit:
            raise RateLimitError(
                retry_in=(self._events[0] + self.window_seconds) - now,
                limit=self.limit,
                window_seconds=self.window_seconds,
            )
        self._events.append(now)

    def remaining(self) -> int:
        """Slots left in the current window (``limit`` when disabled)."""
        if not self._enabled:
            return self.limit
        self._prune(self._now())
        return self.limit - len(self._events)


__all__ = ["RateLimitError", "SlidingWindowRateLimiter"]
