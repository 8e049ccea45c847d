"""Envelope builders and safe send helpers for the WebSocket channel.

Every frame on the channel is a JSON object ``{"type": ..., "payload": {...}}``.
Server-originated payloads carry a millisecond ``timestamp``.
"""

from __future__ import annotations

import json
import time
import logging
from typing import Any

from fastapi import WebSocket

from .disconnects import is_expected_disconnect

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def envelope(msg_type: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"type": msg_type, "payload": payload if payload is not None else {}}


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    """Send text to the client, returning False if the socket is gone."""
    try:
        await ws.send_text(text)
    except Exception as exc:
        if not is_expected_disconnect(exc):
            raise
        logger.info("WebSocket disconnected while sending %s bytes", len(text))
        return False
    return True


async def safe_send_json(ws: WebSocket, payload: dict[str, Any]) -> bool:
    """Serialize and send ``payload``; False when the client already left."""
    return await safe_send_text(ws, json.dumps(payload))


async def send_envelope(ws: WebSocket, msg_type: str, payload: dict[str, Any]) -> bool:
    """Send a server frame, stamping the payload with ``timestamp``."""
    stamped = dict(payload)
    stamped.setdefault("timestamp", now_ms())
    return await safe_send_json(ws, envelope(msg_type, stamped))


__all__ = ["now_ms", "envelope", "safe_send_text", "safe_send_json", "send_envelope"]
