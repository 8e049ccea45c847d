"""Unit tests for sliding window rate limiter."""

from __future__ import annotations

import pytest

from llama_relay.errors import RateLimitError
from llama_relay.handlers.limits import SlidingWindowRateLimiter


def _clock(start: float = 0.0):
    clock = [start]
    return clock, lambda: clock[0]


def test_consume_under_limit_succeeds() -> None:
    _, now_fn = _clock()
    limiter = SlidingWindowRateLimiter(limit=3, window_seconds=10.0, now_fn=now_fn)
    limiter.consume()
    limiter.consume()
    assert limiter.remaining == 1


def test_consume_at_limit_raises_with_metadata() -> None:
    clock, now_fn = _clock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=5.0, now_fn=now_fn)
    limiter.consume()
    clock[0] = 1.0
    with pytest.raises(RateLimitError) as exc_info:
        limiter.consume()
    err = exc_info.value
    assert err.limit == 1
    assert err.window_seconds == 5.0
    assert err.retry_in == pytest.approx(4.0)


def test_rejected_event_is_not_recorded() -> None:
    clock, now_fn = _clock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=5.0, now_fn=now_fn)
    limiter.consume()
    for _ in range(3):
        with pytest.raises(RateLimitError):
            limiter.consume()
    clock[0] = 5.0
    limiter.consume()


def test_window_slides() -> None:
    clock, now_fn = _clock()
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10.0, now_fn=now_fn)
    limiter.consume()
    clock[0] = 6.0
    limiter.consume()
    clock[0] = 10.5
    limiter.consume()
    with pytest.raises(RateLimitError):
        limiter.consume()


@pytest.mark.parametrize(("limit", "window"), [(0, 10.0), (5, 0.0)])
def test_disabled_limiter_never_raises(limit: int, window: float) -> None:
    limiter = SlidingWindowRateLimiter(limit=limit, window_seconds=window)
    for _ in range(100):
        limiter.consume()
