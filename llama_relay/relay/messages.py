"""WebSocket payloads published by the relay."""

from __future__ import annotations

from typing import Any

from ..config.websocket import WS_MSG_STREAM, WS_MSG_STREAM_END, WS_MSG_STREAM_ERROR


def stream_message(request_id: str, seq: int, fragment: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": WS_MSG_STREAM,
        "payload": fragment,
        "requestId": request_id,
        "seq": seq,
    }


def stream_end_message(request_id: str, fragments: int) -> dict[str, Any]:
    return {
        "type": WS_MSG_STREAM_END,
        "payload": {"completed": True, "fragments": fragments},
        "requestId": request_id,
    }


def stream_error_message(request_id: str, error: str) -> dict[str, Any]:
    return {
        "type": WS_MSG_STREAM_ERROR,
        "payload": {"error": error},
        "requestId": request_id,
    }


__all__ = ["stream_message", "stream_end_message", "stream_error_message"]
