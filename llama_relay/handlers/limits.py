"""Sliding-window rate limiting for per-connection WebSocket traffic.

Each admitted connection owns one limiter. Every inbound frame except
``ping`` consumes a slot; once the rolling window holds ``limit`` events the
next frame is answered with an error frame carrying ``retryIn`` instead of
being processed.

The window is a deque of monotonic timestamps. Expired entries are dropped
from the left on every call, so memory stays bounded by ``limit``.
"""

from __future__ import annotations

import time
import collections
from collections.abc import Callable

from ..errors import RateLimitError

# Injectable clock (tests pass a fake)
TimeFn = Callable[[], float]


class SlidingWindowRateLimiter:
    """Allow at most ``limit`` events in any ``window_seconds`` span.

    A zero limit or zero window disables the limiter.
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

    def consume(self) -> None:
        """Record one event.

        Raises:
            RateLimitError: When the window is already full; nothing is recorded.
        """
        if not self._enabled:
            return

        now = self._now()
        cutoff = now - self.window_seconds
        events = self._events
        while events and events[0] <= cutoff:
            events.popleft()

        if len(events) >= self.limit:
            raise RateLimitError(
                retry_in=(events[0] + self.window_seconds) - now,
                limit=self.limit,
                window_seconds=self.window_seconds,
            )
        events.append(now)

    @property
    def remaining(self) -> int:
        if not self._enabled:
            return self.limit
        cutoff = self._now() - self.window_seconds
        return self.limit - sum(1 for ts in self._events if ts > cutoff)


__all__ = ["SlidingWindowRateLimiter"]
