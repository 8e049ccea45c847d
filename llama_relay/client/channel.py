"""Long-lived WebSocket side-channel for one user.

``DuplexChannel`` keeps a connection to the relay's ``/ws`` endpoint open for
as long as it is started. On every (re)connect it sends ``auth`` for its
user and only reports ``authenticated`` once the server confirms. Dropped
connections are retried with exponential backoff. The backoff only resets
once the server confirms ``auth``, so a server that accepts and immediately
closes is retried less and less often. Frames missed while disconnected are
not replayed.

Inbound frames are decoded once and handed to every subscriber in arrival
order. Subscribers are plain callables and must not block.

Example:
    channel = DuplexChannel("http://localhost:8000", user_id=42)
    unsubscribe = channel.subscribe(print)
    channel.start()
    await channel.wait_authenticated(timeout=5)
    ...
    await channel.stop()
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config.client import (
    CLIENT_RECONNECT_MAX_DELAY_S,
    CLIENT_RECONNECT_BASE_DELAY_S,
    CLIENT_RECONNECT_BACKOFF_FACTOR,
)
from ..config.websocket import WS_MSG_AUTH
from .urls import to_ws_url

logger = logging.getLogger(__name__)

Subscriber = Callable[[dict[str, Any]], None]
ConnectFactory = Callable[[str], contextlib.AbstractAsyncContextManager]


class DuplexChannel:
    def __init__(
        self,
        url: str,
        user_id: int | str,
        *,
        connect: ConnectFactory | None = None,
        base_delay_s: float = CLIENT_RECONNECT_BASE_DELAY_S,
        max_delay_s: float = CLIENT_RECONNECT_MAX_DELAY_S,
        backoff_factor: float = CLIENT_RECONNECT_BACKOFF_FACTOR,
    ) -> None:
        self.url = to_ws_url(url)
        self.user_id = user_id
        self._connect = connect or websockets.connect
        self._base_delay_s = base_delay_s
        self._max_delay_s = max_delay_s
        self._backoff_factor = backoff_factor
        self._subscribers: list[Subscriber] = []
        self._ws: Any = None
        self._task: asyncio.Task | None = None
        self._stopping = False
        self._authenticated = asyncio.Event()
        self.connections_opened = 0
        # Seconds the next reconnect attempt will wait
        self.reconnect_delay_s = base_delay_s

    @property
    def authenticated(self) -> bool:
        """True only after the server confirmed ``auth`` on the current connection."""
        return self._authenticated.is_set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a frame callback; returns a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._subscribers.remove(callback)

        return _unsubscribe

    def start(self) -> asyncio.Task:
        """Start the connect/reconnect loop (idempotent)."""
        if self._task is None or self._task.done():
            self._stopping = False
            self.reconnect_delay_s = self._base_delay_s
            self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        self._stopping = True
        ws, self._ws = self._ws, None
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._authenticated.clear()

    async def wait_authenticated(self, timeout: float | None = None) -> bool:
        try:
            await asyncio.wait_for(self._authenticated.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def send(self, msg_type: str, payload: dict[str, Any]) -> bool:
        """Send a frame on the current connection; False when disconnected."""
        ws = self._ws
        if ws is None:
            return False
        try:
            await ws.send(json.dumps({"type": msg_type, "payload": payload}))
        except ConnectionClosed:
            return False
        return True

    async def _run(self) -> None:
        while not self._stopping:
            try:
                async with self._connect(self.url) as ws:
                    self._ws = ws
                    self.connections_opened += 1
                    logger.info("channel connected url=%s attempt=%d", self.url, self.connections_opened)
                    await ws.send(json.dumps({"type": WS_MSG_AUTH, "payload": {"userId": self.user_id}}))
                    async for raw in ws:
                        self._dispatch(raw)
            except asyncio.CancelledError:
                raise
            except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
                logger.info("channel connection lost: %s", exc)
            finally:
                self._ws = None
                self._authenticated.clear()

            if self._stopping:
                break
            delay = self.reconnect_delay_s
            logger.info("channel reconnecting in %.2fs", delay)
            await asyncio.sleep(delay)
            self.reconnect_delay_s = min(delay * self._backoff_factor, self._max_delay_s)

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            msg = json.loads(raw)
        except ValueError:
            logger.warning("channel dropped non-JSON frame")
            return
        if not isinstance(msg, dict):
            return

        payload = msg.get("payload")
        if msg.get("type") == WS_MSG_AUTH and isinstance(payload, dict) and payload.get("authenticated"):
            self.reconnect_delay_s = self._base_delay_s
            self._authenticated.set()
            logger.info("channel authenticated user=%s", self.user_id)

        for callback in list(self._subscribers):
            try:
                callback(msg)
            except Exception:  # noqa: BLE001
                logger.exception("channel subscriber failed")


__all__ = ["DuplexChannel"]
