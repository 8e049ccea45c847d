"""Telemetry configuration: Sentry env vars and tag names."""

import os

SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "production")
SENTRY_RELEASE: str = os.getenv("SENTRY_RELEASE", "")
SENTRY_SAMPLE_RATE: float = float(os.getenv("SENTRY_SAMPLE_RATE", "1.0"))

# Minimum seconds between two reports in the same error category
SENTRY_RATE_LIMIT_S: float = float(os.getenv("SENTRY_RATE_LIMIT_S", "10.0"))
SENTRY_TAG_USER_ID = "user_id"
SENTRY_TAG_REQUEST_ID = "request_id"
SENTRY_TAG_CONNECTION_ID = "connection_id"


__all__ = [
    "SENTRY_DSN",
    "SENTRY_ENVIRONMENT",
    "SENTRY_RELEASE",
    "SENTRY_SAMPLE_RATE",
    "SENTRY_RATE_LIMIT_S",
    "SENTRY_TAG_USER_ID",
    "SENTRY_TAG_REQUEST_ID",
    "SENTRY_TAG_CONNECTION_ID",
]
