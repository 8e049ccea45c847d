"""Sentry error reporting for relay failures.

Only server-side faults are worth an event: upstream outages, broken
streams and unexpected exceptions. Client mistakes (bad bodies, missing
sessions, exhausted quotas, blocked prompts) are filtered in
``before_send``. Events are throttled per error category so a dead backend
produces one event per SENTRY_RATE_LIMIT_S instead of one per request.
"""

from __future__ import annotations

import time
import logging
from typing import Any

from ..errors import classify_error
from ..logging.context import current_log_context
from ..config.telemetry import (
    SENTRY_DSN,
    SENTRY_RELEASE,
    SENTRY_ENVIRONMENT,
    SENTRY_SAMPLE_RATE,
    SENTRY_RATE_LIMIT_S,
    SENTRY_TAG_USER_ID,
    SENTRY_TAG_REQUEST_ID,
    SENTRY_TAG_CONNECTION_ID,
)

logger = logging.getLogger(__name__)

# Categories caused by the caller, not the relay
CLIENT_ERROR_CATEGORIES = frozenset(
    {"validation", "unauthenticated", "blocked_content", "quota", "rate_limit"}
)

_last_sent: dict[str, float] = {}
_initialized: bool = False


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Drop events whose exception is a client error."""
    exc_info = hint.get("exc_info")
    if exc_info and classify_error(exc_info[1]) in CLIENT_ERROR_CATEGORIES:
        return None
    return event


def init_sentry() -> None:
    """Initialize the Sentry SDK once per process."""
    global _initialized  # noqa: PLW0603
    if _initialized:
        return
    import sentry_sdk

    options: dict[str, Any] = {
        "dsn": SENTRY_DSN,
        "environment": SENTRY_ENVIRONMENT,
        "sample_rate": SENTRY_SAMPLE_RATE,
        "traces_sample_rate": 0.0,
        "before_send": before_send,
    }
    if SENTRY_RELEASE:
        options["release"] = SENTRY_RELEASE

    sentry_sdk.init(**options)
    _initialized = True
    logger.info("Sentry initialized: environment=%s", SENTRY_ENVIRONMENT)


def shutdown_sentry() -> None:
    global _initialized  # noqa: PLW0603
    if not _initialized:
        return
    try:
        import sentry_sdk

        sentry_sdk.flush(timeout=2.0)
    except Exception:  # noqa: BLE001
        logger.debug("Sentry flush failed", exc_info=True)
    _initialized = False


def should_report(category: str, now: float | None = None) -> bool:
    """Throttle gate: True at most once per SENTRY_RATE_LIMIT_S per category."""
    if category in CLIENT_ERROR_CATEGORIES:
        return False
    now = time.monotonic() if now is None else now
    last = _last_sent.get(category)
    if last is not None and (now - last) < SENTRY_RATE_LIMIT_S:
        return False
    _last_sent[category] = now
    return True


def capture_error(
    error: BaseException,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Report ``error`` tagged with the current user, request and connection."""
    if not _initialized:
        return
    category = classify_error(error)
    if not should_report(category):
        return

    import sentry_sdk

    context = current_log_context()
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("error.category", category)
        scope.set_tag(SENTRY_TAG_USER_ID, context["user_id"])
        scope.set_tag(SENTRY_TAG_REQUEST_ID, context["request_id"])
        scope.set_tag(SENTRY_TAG_CONNECTION_ID, context["connection_id"])
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(error)


__all__ = ["CLIENT_ERROR_CATEGORIES", "before_send", "init_sentry", "shutdown_sentry", "should_report", "capture_error"]
