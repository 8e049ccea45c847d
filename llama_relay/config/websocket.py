"""WebSocket-specific runtime configuration values.

This module defines constants for WebSocket connection lifecycle management:

Timeouts:
    WS_IDLE_TIMEOUT_S: Close connections after this many seconds of inactivity.
        Browser tabs keep the channel open across chat sessions, so the
        default is generous.

    WS_WATCHDOG_TICK_S: How often the idle watchdog checks activity.

    WS_HANDSHAKE_ACQUIRE_TIMEOUT_S: Max time to wait for a registry slot.
        If the server is at capacity, connections wait this long before
        being rejected.

Close Codes (RFC 6455):
    1000: Normal closure (client requested)
    1013: Try again later (server at capacity)
    4000+: Application-defined (idle timeout)

Message Types:
    The envelope is ``{"type": ..., "payload": {...}}``. The relay publishes
    ``stream``, ``streamEnd`` and ``streamError``; the server answers
    ``auth``, ``acknowledge``, ``pong`` and ``error``.
"""

from __future__ import annotations

import os

# ============================================================================
# Timeout Configuration
# ============================================================================

WS_IDLE_TIMEOUT_S = float(os.getenv("WS_IDLE_TIMEOUT_S", "900"))  # 15 minutes
WS_WATCHDOG_TICK_S = float(os.getenv("WS_WATCHDOG_TICK_S", "5"))  # Check every 5s
WS_HANDSHAKE_ACQUIRE_TIMEOUT_S = float(os.getenv("WS_HANDSHAKE_ACQUIRE_TIMEOUT_S", "0.5"))

# ============================================================================
# WebSocket Close Codes
# ============================================================================

WS_CLOSE_BUSY_CODE = int(os.getenv("WS_CLOSE_BUSY_CODE", "1013"))  # Try again later
WS_CLOSE_IDLE_CODE = int(os.getenv("WS_CLOSE_IDLE_CODE", "4000"))  # Application-defined
WS_CLOSE_IDLE_REASON = os.getenv("WS_CLOSE_IDLE_REASON", "idle_timeout")

# ============================================================================
# Message Types
# ============================================================================

WS_MSG_CONNECTION = "connection"
WS_MSG_AUTH = "auth"
WS_MSG_STREAM = "stream"
WS_MSG_STREAM_END = "streamEnd"
WS_MSG_STREAM_ERROR = "streamError"
WS_MSG_ACKNOWLEDGE = "acknowledge"
WS_MSG_ERROR = "error"
WS_MSG_PING = "ping"
WS_MSG_PONG = "pong"

WS_INVALID_FORMAT_MESSAGE = "Invalid message format"
WS_INTERNAL_ERROR_MESSAGE = "Internal server error"
WS_CONNECTED_MESSAGE = "Connected to WebSocket server"

__all__ = [
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_HANDSHAKE_ACQUIRE_TIMEOUT_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_MSG_CONNECTION",
    "WS_MSG_AUTH",
    "WS_MSG_STREAM",
    "WS_MSG_STREAM_END",
    "WS_MSG_STREAM_ERROR",
    "WS_MSG_ACKNOWLEDGE",
    "WS_MSG_ERROR",
    "WS_MSG_PING",
    "WS_MSG_PONG",
    "WS_INVALID_FORMAT_MESSAGE",
    "WS_INTERNAL_ERROR_MESSAGE",
    "WS_CONNECTED_MESSAGE",
]
