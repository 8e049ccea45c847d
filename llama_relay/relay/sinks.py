"""Destinations for the verbatim upstream byte stream.

``QueueSink`` bridges the relay task and a FastAPI ``StreamingResponse``:
the relay awaits ``write`` while the response body iterator drains the
queue, so a slow HTTP reader applies backpressure instead of growing an
unbounded buffer. When the reader goes away the sink closes itself and
later writes are dropped.

A reader that never starts (the client disconnected before the response
began, or the route was cancelled) cannot close the sink from ``body()``.
Writes therefore wait at most ``stall_timeout_s`` for queue space; past
that the sink closes and the relay carries on with the WebSocket copy.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Protocol

from ..config import RELAY_SINK_QUEUE_SIZE, RELAY_SINK_STALL_TIMEOUT_S

logger = logging.getLogger(__name__)

_END = object()


class ResponseSink(Protocol):
    async def write(self, data: bytes) -> None: ...

    async def end(self) -> None: ...


class QueueSink:
    def __init__(
        self,
        maxsize: int = RELAY_SINK_QUEUE_SIZE,
        *,
        stall_timeout_s: float = RELAY_SINK_STALL_TIMEOUT_S,
    ) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=max(1, maxsize))
        self._stall_timeout_s = stall_timeout_s
        self._ended = False
        self._closed = False
        self.bytes_written = 0

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> None:
        if self._ended or self._closed or not data:
            return
        if await self._put(data):
            self.bytes_written += len(data)

    async def end(self) -> None:
        if self._ended:
            return
        self._ended = True
        if not self._closed:
            await self._put(_END)

    def close(self) -> None:
        """Drop buffered data and refuse further writes. Called once the reader is gone."""
        if self._closed:
            return
        self._closed = True
        self._ended = True
        self._drain()

    def abort(self) -> None:
        """Terminate the body early from the writer side."""
        if self._closed:
            return
        self._closed = True
        self._ended = True
        self._drain()
        self._queue.put_nowait(_END)

    async def _put(self, item: object) -> bool:
        try:
            await asyncio.wait_for(self._queue.put(item), timeout=self._stall_timeout_s)
        except asyncio.TimeoutError:
            logger.warning(
                "HTTP reader stalled for %.1fs; closing sink (%d bytes sent)",
                self._stall_timeout_s,
                self.bytes_written,
            )
            self.close()
            return False
        return not self._closed

    def _drain(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()

    async def body(self) -> AsyncIterator[bytes]:
        """Response body iterator; closes the sink when iteration stops."""
        try:
            while True:
                item = await self._queue.get()
                if item is _END:
                    return
                yield item
        finally:
            if not self._ended:
                logger.info("HTTP reader left before stream end (%d bytes sent)", self.bytes_written)
            self.close()


__all__ = ["ResponseSink", "QueueSink"]
