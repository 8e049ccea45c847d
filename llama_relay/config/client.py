"""Python stream consumer configuration values."""

import os


CLIENT_RECONNECT_BASE_DELAY_S = float(os.getenv("CLIENT_RECONNECT_BASE_DELAY_S", "0.5"))
CLIENT_RECONNECT_MAX_DELAY_S = float(os.getenv("CLIENT_RECONNECT_MAX_DELAY_S", "30"))
CLIENT_RECONNECT_BACKOFF_FACTOR = float(os.getenv("CLIENT_RECONNECT_BACKOFF_FACTOR", "2.0"))
CLIENT_HTTP_TIMEOUT_S = float(os.getenv("CLIENT_HTTP_TIMEOUT_S", "300"))
CLIENT_DEFAULT_WS_PATH = "/ws"
CLIENT_ERROR_ANNOTATION = "[generation interrupted: {error}]"


__all__ = [
    "CLIENT_RECONNECT_BASE_DELAY_S",
    "CLIENT_RECONNECT_MAX_DELAY_S",
    "CLIENT_RECONNECT_BACKOFF_FACTOR",
    "CLIENT_HTTP_TIMEOUT_S",
    "CLIENT_DEFAULT_WS_PATH",
    "CLIENT_ERROR_ANNOTATION",
]
