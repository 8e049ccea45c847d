"""Classification of exceptions raised by a WebSocket that went away."""

from __future__ import annotations

from anyio import BrokenResourceError, ClosedResourceError, EndOfStream
from fastapi import WebSocketDisconnect
from websockets.exceptions import ConnectionClosed

_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    WebSocketDisconnect,
    ConnectionClosed,
    ConnectionResetError,
    BrokenPipeError,
    EOFError,
    BrokenResourceError,
    ClosedResourceError,
    EndOfStream,
)

# Starlette raises plain RuntimeErrors once the socket is closed
_CLOSED_SOCKET_MESSAGES = (
    "websocket is not connected",
    "cannot call receive once a disconnect message has been received",
    'cannot call "send" once a close message has been sent',
    "unexpected asgi message 'websocket.send', after sending 'websocket.close'",
)


def is_expected_disconnect(exc: BaseException) -> bool:
    """Return True when ``exc`` is ordinary teardown rather than a bug."""

    if isinstance(exc, _TRANSPORT_ERRORS):
        return True
    if isinstance(exc, RuntimeError):
        message = str(exc).strip().lower()
        return any(fragment in message for fragment in _CLOSED_SOCKET_MESSAGES)
    return False


__all__ = ["is_expected_disconnect"]
