"""Error frames and connection rejection for the WebSocket channel.

Error frames use the regular envelope:

    {
        "type": "error",
        "payload": {
            "message": "Invalid message format",
            "errorCode": "invalid_message",
            "timestamp": 1700000000000,
            ...extra fields
        }
    }

Error codes:
    - invalid_message: Malformed JSON, non-object body or missing type
    - missing_user_id: ``auth`` frame without ``userId``
    - message_rate_limited: Too many frames in the rolling window
    - server_at_capacity: Connection limit reached
    - internal_error: Unexpected server error
"""

from __future__ import annotations

from typing import Any

from fastapi import WebSocket

from ...config.websocket import WS_MSG_ERROR
from .helpers import send_envelope


async def send_error(
    ws: WebSocket,
    *,
    message: str,
    error_code: str | None = None,
    extra: dict[str, Any] | None = None,
) -> bool:
    """Send an error frame; the connection stays open."""
    payload: dict[str, Any] = {"message": message}
    if error_code:
        payload["errorCode"] = error_code
    if extra:
        payload.update(extra)
    return await send_envelope(ws, WS_MSG_ERROR, payload)


async def reject_connection(
    ws: WebSocket,
    *,
    message: str,
    error_code: str,
    close_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Accept just long enough to explain the rejection, then close.

    Browsers only see a bare close code otherwise.
    """
    await ws.accept()
    await send_error(ws, message=message, error_code=error_code, extra=extra)
    await ws.close(code=close_code)


__all__ = ["send_error", "reject_connection"]
