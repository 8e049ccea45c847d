"""Unit tests for error classification labels."""

from __future__ import annotations

import pytest

from llama_relay.errors import (
    AuthenticationError,
    BlockedContentError,
    GenerateError,
    QuotaExceededError,
    RateLimitError,
    StreamInterruptedError,
    UpstreamError,
    UpstreamStreamError,
    ValidationError,
    classify_error,
)


@pytest.mark.parametrize(
    ("exc", "label"),
    [
        (ValidationError("x", "bad"), "validation"),
        (AuthenticationError(), "unauthenticated"),
        (BlockedContentError("word"), "blocked_content"),
        (QuotaExceededError(quota=1, usage=1), "quota"),
        (RateLimitError(retry_in=1, limit=1, window_seconds=1), "rate_limit"),
        (UpstreamStreamError("reset"), "upstream_stream"),
        (UpstreamError("down", status_code=502), "upstream"),
        (StreamInterruptedError("cut"), "stream_interrupted"),
        (GenerateError("no", status_code=400), "generate"),
        (TimeoutError(), "timeout"),
        (ConnectionRefusedError(), "connection"),
        (KeyError("x"), "unknown"),
    ],
)
def test_classify_error(exc: BaseException, label: str) -> None:
    assert classify_error(exc) == label


def test_rate_limit_error_clamps_metadata() -> None:
    err = RateLimitError(retry_in=-3, limit=-1, window_seconds=-2)
    assert (err.retry_in, err.limit, err.window_seconds) == (0.0, 0, 0.0)
