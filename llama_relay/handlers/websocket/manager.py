"""Primary WebSocket connection handler.

Entry point for every ``/ws`` client. It:

1. Admits the connection through the registry (capacity check) and greets
   it with a ``connection`` frame.
2. Starts the idle watchdog.
3. Parses inbound frames and routes them:
   - ``auth``: tag the connection with ``payload.userId`` and confirm
   - ``stream``: forward verbatim to the other connections of
     ``payload.userId``
   - ``ping``: answer ``pong``
   - anything else: acknowledge to the sender and forward verbatim to the
     sender's other connections once authenticated
4. Unregisters the connection on disconnect.

Text and binary frames are both accepted; binary payloads must be UTF-8.
Malformed frames get an error frame and the connection stays open.
Generation output never flows through this handler; the relay publishes it
through the registry.
"""

from __future__ import annotations

import contextlib
import logging
import math
from typing import TYPE_CHECKING, Any
from collections.abc import Awaitable, Callable

from fastapi import WebSocket, WebSocketDisconnect

from ...config import WS_MAX_MESSAGES_PER_WINDOW, WS_MESSAGE_WINDOW_SECONDS
from ...config.websocket import (
    WS_MSG_ACKNOWLEDGE,
    WS_MSG_AUTH,
    WS_MSG_CONNECTION,
    WS_MSG_PING,
    WS_MSG_PONG,
    WS_MSG_STREAM,
    WS_CLOSE_BUSY_CODE,
    WS_CONNECTED_MESSAGE,
    WS_INVALID_FORMAT_MESSAGE,
    WS_INTERNAL_ERROR_MESSAGE,
)
from ...errors import RateLimitError
from ...logging import log_context, set_log_context
from ..limits import SlidingWindowRateLimiter
from .disconnects import is_expected_disconnect
from .errors import reject_connection, send_error
from .helpers import envelope, send_envelope
from .lifecycle import WebSocketLifecycle
from .parser import parse_client_message

if TYPE_CHECKING:
    from ..connections import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)

MessageHandlerFn = Callable[["ConnectionRegistry", "Connection", dict[str, Any]], Awaitable[None]]


async def _prepare_connection(ws: WebSocket, registry: ConnectionRegistry) -> Connection | None:
    """Admit the socket or reject it with a busy close code."""
    connection = await registry.register(ws)
    if connection is None:
        capacity_info = registry.get_capacity_info()
        await reject_connection(
            ws,
            error_code="server_at_capacity",
            message=(
                "Server is at capacity. "
                f"Active connections: {capacity_info['active']}/{capacity_info['max']}. "
                "Please try again later."
            ),
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return None

    try:
        await ws.accept()
    except Exception:
        await registry.unregister(connection)
        raise
    await send_envelope(ws, WS_MSG_CONNECTION, {"message": WS_CONNECTED_MESSAGE})
    return connection


async def _consume_limiter(ws: WebSocket, limiter: SlidingWindowRateLimiter) -> bool:
    """Consume a message slot, sending an error frame when the window is full."""
    try:
        limiter.consume()
    except RateLimitError as err:
        retry_in = int(max(1, math.ceil(err.retry_in)))
        await send_error(
            ws,
            error_code="message_rate_limited",
            message=(
                f"message rate limit: at most {err.limit} per "
                f"{int(err.window_seconds)} seconds; retry in {retry_in} seconds"
            ),
            extra={"retryIn": retry_in},
        )
        return False
    return True


async def _handle_auth(registry: ConnectionRegistry, connection: Connection, msg: dict[str, Any]) -> None:
    # The claimed userId is trusted as-is; HTTP routes are where sessions are checked
    user_id = msg["payload"].get("userId")
    if user_id is None or user_id == "":
        await send_error(
            connection.websocket,
            error_code="missing_user_id",
            message="auth message must include 'userId'.",
        )
        return
    await registry.authenticate(connection, user_id)
    set_log_context(user_id=str(user_id))
    await send_envelope(
        connection.websocket,
        WS_MSG_AUTH,
        {"authenticated": True, "userId": user_id},
    )


async def _handle_stream(registry: ConnectionRegistry, connection: Connection, msg: dict[str, Any]) -> None:
    user_id = msg["payload"].get("userId")
    if user_id is None or user_id == "":
        logger.debug("WS stream frame without userId dropped")
        return
    await registry.broadcast(user_id, envelope(msg["type"], msg["payload"]), exclude=connection)


async def _handle_ping(registry: ConnectionRegistry, connection: Connection, msg: dict[str, Any]) -> None:
    await send_envelope(connection.websocket, WS_MSG_PONG, {})


async def _handle_other(registry: ConnectionRegistry, connection: Connection, msg: dict[str, Any]) -> None:
    msg_type = msg["type"]
    await send_envelope(
        connection.websocket,
        WS_MSG_ACKNOWLEDGE,
        {"messageType": msg_type, "received": True},
    )
    if connection.user_id is not None:
        await registry.broadcast(
            connection.user_id,
            envelope(msg_type, msg["payload"]),
            exclude=connection,
        )


async def _receive_frame(ws: WebSocket) -> str | None:
    """Next inbound frame as text; None when a binary frame is not UTF-8."""
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    try:
        return (message.get("bytes") or b"").decode("utf-8")
    except UnicodeDecodeError:
        return None


_MESSAGE_HANDLERS: dict[str, MessageHandlerFn] = {
    WS_MSG_AUTH: _handle_auth,
    WS_MSG_STREAM: _handle_stream,
    WS_MSG_PING: _handle_ping,
}


async def _message_loop(
    ws: WebSocket,
    registry: ConnectionRegistry,
    connection: Connection,
    lifecycle: WebSocketLifecycle,
) -> None:
    limiter = SlidingWindowRateLimiter(
        limit=WS_MAX_MESSAGES_PER_WINDOW,
        window_seconds=WS_MESSAGE_WINDOW_SECONDS,
    )
    while not lifecycle.expired():
        raw_msg = await _receive_frame(ws)
        lifecycle.touch()
        try:
            if raw_msg is None:
                raise ValueError("binary frame is not valid UTF-8")
            msg = parse_client_message(raw_msg)
        except ValueError as exc:
            logger.info("WS invalid frame: %s", exc)
            await send_error(ws, error_code="invalid_message", message=WS_INVALID_FORMAT_MESSAGE)
            continue

        msg_type = msg["type"]
        if msg_type != WS_MSG_PING and not await _consume_limiter(ws, limiter):
            continue

        logger.debug("WS recv: %s", msg_type)
        handler = _MESSAGE_HANDLERS.get(msg_type, _handle_other)
        await handler(registry, connection, msg)


async def handle_websocket_connection(ws: WebSocket, registry: ConnectionRegistry) -> None:
    """Serve one WebSocket client until it disconnects or goes idle."""

    connection = await _prepare_connection(ws, registry)
    if connection is None:
        return

    lifecycle = WebSocketLifecycle(ws)
    connection.on_activity = lifecycle.touch
    lifecycle.start()

    with log_context(connection_id=connection.handle):
        logger.info("WebSocket connection accepted. Active: %s", registry.count())
        try:
            await _message_loop(ws, registry, connection, lifecycle)
        except WebSocketDisconnect:
            pass
        except Exception as exc:  # noqa: BLE001
            if not is_expected_disconnect(exc):
                logger.exception("WebSocket error")
                with contextlib.suppress(Exception):
                    await send_error(ws, error_code="internal_error", message=WS_INTERNAL_ERROR_MESSAGE)
        finally:
            with contextlib.suppress(Exception):
                await lifecycle.stop()
            await registry.unregister(connection)
            logger.info("WebSocket connection closed. Active: %s", registry.count())


__all__ = ["handle_websocket_connection"]
