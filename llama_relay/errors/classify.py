"""Exception classification helpers for log and telemetry labels."""

from __future__ import annotations

from .validation import ValidationError
from .upstream import UpstreamError, UpstreamStreamError
from .auth import AuthenticationError, BlockedContentError
from .limits import QuotaExceededError, RateLimitError
from .client import GenerateError, StreamInterruptedError

ERROR_CATEGORIES: tuple[tuple[type[BaseException], str], ...] = (
    (ValidationError, "validation"),
    (AuthenticationError, "unauthenticated"),
    (BlockedContentError, "blocked_content"),
    (QuotaExceededError, "quota"),
    (RateLimitError, "rate_limit"),
    (UpstreamStreamError, "upstream_stream"),
    (UpstreamError, "upstream"),
    (StreamInterruptedError, "stream_interrupted"),
    (GenerateError, "generate"),
    (TimeoutError, "timeout"),
    (ConnectionError, "connection"),
)


def classify_error(exc: BaseException) -> str:
    """Map an exception to a short category label."""

    for cls, label in ERROR_CATEGORIES:
        if isinstance(exc, cls):
            return label
    return "unknown"


__all__ = ["ERROR_CATEGORIES", "classify_error"]
