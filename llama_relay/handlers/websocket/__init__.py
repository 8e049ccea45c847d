"""WebSocket handler exports."""

from .manager import handle_websocket_connection
from .lifecycle import WebSocketLifecycle

__all__ = [
    "handle_websocket_connection",
    "WebSocketLifecycle",
]
