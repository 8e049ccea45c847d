"""Idle enforcement for a single WebSocket connection.

Browser tabs keep the side-channel open for as long as the chat page is
visible. When a tab is suspended or the network silently drops, the socket
can linger without ever delivering a close frame. ``WebSocketLifecycle``
runs a watchdog that closes the socket with WS_CLOSE_IDLE_CODE once no
frame has moved in either direction for WS_IDLE_TIMEOUT_S. A listener that
only receives relayed fragments stays open while the relay is streaming.

Usage:
    lifecycle = WebSocketLifecycle(websocket)
    lifecycle.start()
    ...
    lifecycle.touch()  # on every inbound frame and delivered broadcast
    ...
    await lifecycle.stop()
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable

from fastapi import WebSocket

from ...config.websocket import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
)

logger = logging.getLogger(__name__)


class WebSocketLifecycle:
    """Tracks socket activity and closes the socket when it goes quiet."""

    def __init__(
        self,
        websocket: WebSocket,
        idle_timeout_s: float | None = None,
        watchdog_tick_s: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ws = websocket
        self._idle_timeout_s = float(idle_timeout_s or WS_IDLE_TIMEOUT_S)
        self._watchdog_tick_s = float(watchdog_tick_s or WS_WATCHDOG_TICK_S)
        self._clock = clock
        self._last_activity = clock()
        self._expired = asyncio.Event()
        self._task: asyncio.Task | None = None

    def touch(self) -> None:
        self._last_activity = self._clock()

    def idle_for(self) -> float:
        return self._clock() - self._last_activity

    def expired(self) -> bool:
        """True once the watchdog has closed the socket for inactivity."""
        return self._expired.is_set()

    def start(self) -> asyncio.Task:
        """Start the watchdog task (idempotent)."""
        if self._task is None:
            self._task = asyncio.create_task(self._watch())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _watch(self) -> None:
        while True:
            await asyncio.sleep(self._watchdog_tick_s)
            if self.idle_for() < self._idle_timeout_s:
                continue
            logger.info("WebSocket idle for %.0fs; closing connection", self.idle_for())
            self._expired.set()
            try:
                await self._ws.close(code=WS_CLOSE_IDLE_CODE, reason=WS_CLOSE_IDLE_REASON)
            except Exception:  # noqa: BLE001
                logger.debug("idle close failed", exc_info=True)
            return


__all__ = ["WebSocketLifecycle"]
