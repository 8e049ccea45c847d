"""Registry of live WebSocket connections keyed by authenticated user.

The registry is the only place that knows which sockets belong to which
user. It combines two responsibilities:

- Admission control: a semaphore bounds concurrent connections to
  MAX_CONCURRENT_CONNECTIONS; a newcomer waits up to
  WS_HANDSHAKE_ACQUIRE_TIMEOUT_S for a slot before being turned away.
- Fan-out: ``broadcast`` delivers one payload to every open connection
  tagged with a user id.

The connection map is guarded by an ``asyncio.Lock``. Broadcasts snapshot
the matching connections under the lock and send outside it, so a slow
client never blocks registration or other broadcasts.

Example:
    registry = ConnectionRegistry(max_connections=100)

    connection = await registry.register(ws)
    if connection is None:
        ...  # reject with WS_CLOSE_BUSY_CODE
    try:
        await registry.authenticate(connection, "42")
        await registry.broadcast("42", {"type": "stream", "payload": {...}})
    finally:
        await registry.unregister(connection)
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from ..config import MAX_CONCURRENT_CONNECTIONS
from ..config.websocket import WS_HANDSHAKE_ACQUIRE_TIMEOUT_S
from .websocket.disconnects import is_expected_disconnect

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class Connection:
    """One admitted WebSocket connection.

    ``user_id`` is None until the client sends ``auth``; untagged
    connections never receive broadcasts. ``on_activity`` is called after
    every delivered broadcast so outbound traffic keeps the socket alive.
    """

    websocket: WebSocket
    handle: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    user_id: str | None = None
    connected_at: float = field(default_factory=time.time)
    authenticated_at: float | None = None
    on_activity: Callable[[], None] | None = None

    @property
    def is_open(self) -> bool:
        ws = self.websocket
        return (
            ws.client_state == WebSocketState.CONNECTED
            and ws.application_state == WebSocketState.CONNECTED
        )


class ConnectionRegistry:
    """Tracks admitted connections and routes payloads to them by user id.

    Attributes:
        max_connections: Maximum allowed concurrent connections.
        acquire_timeout: Max seconds to wait for a connection slot.
    """

    def __init__(
        self,
        max_connections: int | None = None,
        acquire_timeout: float = WS_HANDSHAKE_ACQUIRE_TIMEOUT_S,
    ):
        if max_connections is None:
            max_connections = MAX_CONCURRENT_CONNECTIONS
        self.max_connections = max_connections
        self.acquire_timeout = acquire_timeout
        self._connections: dict[str, Connection] = {}
        self._lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_connections)

    async def register(self, websocket: WebSocket) -> Connection | None:
        """Admit a new, unauthenticated connection.

        Returns:
            The registered connection, or None if the server is at capacity.
        """
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Connection rejected: at capacity (%s/%s)",
                len(self._connections),
                self.max_connections,
            )
            return None

        try:
            connection = Connection(websocket=websocket)
            async with self._lock:
                self._connections[connection.handle] = connection
                logger.info(
                    "Connection accepted handle=%s: %s/%s active",
                    connection.handle,
                    len(self._connections),
                    self.max_connections,
                )
            return connection
        except Exception:
            self._semaphore.release()
            raise

    async def authenticate(self, connection: Connection, user_id: str | int) -> None:
        """Tag a connection with a user id, replacing any previous tag."""
        user_key = str(user_id)
        async with self._lock:
            previous = connection.user_id
            connection.user_id = user_key
            connection.authenticated_at = time.time()
        if previous is not None and previous != user_key:
            logger.info(
                "Connection handle=%s re-authenticated user=%s (was %s)",
                connection.handle,
                user_key,
                previous,
            )
        else:
            logger.info("Connection handle=%s authenticated user=%s", connection.handle, user_key)

    async def unregister(self, connection: Connection) -> None:
        """Remove a connection. Safe to call more than once."""
        should_release = False
        async with self._lock:
            if self._connections.pop(connection.handle, None) is not None:
                should_release = True
                logger.info(
                    "Connection removed handle=%s: %s/%s active",
                    connection.handle,
                    len(self._connections),
                    self.max_connections,
                )
        if should_release:
            self._semaphore.release()

    async def broadcast(
        self,
        user_id: str | int,
        payload: dict[str, Any],
        *,
        exclude: Connection | None = None,
    ) -> int:
        """Send ``payload`` to every open connection of ``user_id``.

        A failed send is logged and skipped; the remaining connections still
        receive the payload.

        Returns:
            Number of connections the payload was delivered to.
        """
        user_key = str(user_id)
        async with self._lock:
            targets = [
                conn
                for conn in self._connections.values()
                if conn.user_id == user_key and conn is not exclude
            ]
        if not targets:
            return 0

        text = json.dumps(payload)
        delivered = 0
        for conn in targets:
            if not conn.is_open:
                continue
            try:
                await conn.websocket.send_text(text)
            except Exception as exc:  # noqa: BLE001
                if is_expected_disconnect(exc):
                    logger.info("broadcast skipped closed connection handle=%s", conn.handle)
                else:
                    logger.warning(
                        "broadcast to handle=%s failed: %s",
                        conn.handle,
                        exc,
                        exc_info=True,
                    )
                continue
            delivered += 1
            if conn.on_activity is not None:
                conn.on_activity()
        return delivered

    def get(self, handle: str) -> Connection | None:
        return self._connections.get(handle)

    def connections_for(self, user_id: str | int) -> list[Connection]:
        user_key = str(user_id)
        return [conn for conn in self._connections.values() if conn.user_id == user_key]

    def count(self) -> int:
        return len(self._connections)

    def get_capacity_info(self) -> dict:
        """Get capacity information for health checks."""
        active = len(self._connections)
        return {
            "active": active,
            "max": self.max_connections,
            "available": self.max_connections - active,
            "at_capacity": active >= self.max_connections,
        }


__all__ = ["Connection", "ConnectionRegistry"]
