"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- upstream: inference backend endpoint and timeouts
- limits: sampling bounds, quotas and concurrency limits
- websocket: WebSocket lifecycle values and message types
- auth: sessions, seed account and blocked keywords
- logging / telemetry: observability settings
- client: Python stream consumer settings
"""

from .upstream import (
    LLAMA_API_URL,
    LLAMA_DEFAULT_MODEL,
    LLAMA_CANCEL_SUFFIX,
    LLAMA_MODEL_DISPLAY_NAME,
    UPSTREAM_CONNECT_TIMEOUT_S,
    UPSTREAM_READ_TIMEOUT_S,
)
from .limits import (
    CHAT_TEMPERATURE_MIN,
    CHAT_TEMPERATURE_MAX,
    CHAT_TOP_P_MIN,
    CHAT_TOP_P_MAX,
    CHAT_TOP_K_MIN,
    CHAT_TOP_K_MAX,
    CHAT_MAX_TOKENS_MIN,
    CHAT_MAX_TOKENS_MAX,
    PROMPT_MAX_CHARS,
    DEFAULT_USER_QUOTA,
    WS_MESSAGE_WINDOW_SECONDS,
    WS_MAX_MESSAGES_PER_WINDOW,
    MAX_CONCURRENT_CONNECTIONS,
    RELAY_SINK_QUEUE_SIZE,
    RELAY_SINK_STALL_TIMEOUT_S,
)
from .auth import (
    SESSION_COOKIE_NAME,
    SESSION_HEADER_NAME,
    SESSION_TTL_SECONDS,
    SESSION_COOKIE_SECURE,
    ADMIN_USERNAME,
    ADMIN_PASSWORD,
    BLOCKED_KEYWORDS,
)
from .websocket import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_HANDSHAKE_ACQUIRE_TIMEOUT_S,
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
)

__all__ = [
    "LLAMA_API_URL",
    "LLAMA_DEFAULT_MODEL",
    "LLAMA_CANCEL_SUFFIX",
    "LLAMA_MODEL_DISPLAY_NAME",
    "UPSTREAM_CONNECT_TIMEOUT_S",
    "UPSTREAM_READ_TIMEOUT_S",
    "CHAT_TEMPERATURE_MIN",
    "CHAT_TEMPERATURE_MAX",
    "CHAT_TOP_P_MIN",
    "CHAT_TOP_P_MAX",
    "CHAT_TOP_K_MIN",
    "CHAT_TOP_K_MAX",
    "CHAT_MAX_TOKENS_MIN",
    "CHAT_MAX_TOKENS_MAX",
    "PROMPT_MAX_CHARS",
    "DEFAULT_USER_QUOTA",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "MAX_CONCURRENT_CONNECTIONS",
    "RELAY_SINK_QUEUE_SIZE",
    "RELAY_SINK_STALL_TIMEOUT_S",
    "SESSION_COOKIE_NAME",
    "SESSION_HEADER_NAME",
    "SESSION_TTL_SECONDS",
    "SESSION_COOKIE_SECURE",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "BLOCKED_KEYWORDS",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_HANDSHAKE_ACQUIRE_TIMEOUT_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
]
