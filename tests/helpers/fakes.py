"""In-memory stand-ins for WebSockets and response sinks."""

from __future__ import annotations

import json
from collections.abc import Callable, Awaitable
from typing import Any

from starlette.websockets import WebSocketState


class FakeWebSocket:
    """Server-side WebSocket double recording every frame sent to it."""

    def __init__(self, *, fail_with: BaseException | None = None) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.sent: list[str] = []
        self.fail_with = fail_with
        self.accepted = False
        self.close_calls: list[tuple[int, str | None]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(text)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.close_calls.append((code, reason))
        self.application_state = WebSocketState.DISCONNECTED

    def drop(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED

    def frames(self) -> list[dict[str, Any]]:
        return [json.loads(text) for text in self.sent]

    def frames_of(self, msg_type: str) -> list[dict[str, Any]]:
        return [frame for frame in self.frames() if frame.get("type") == msg_type]


class RecordingSink:
    """Response sink keeping everything written, with an optional per-write hook."""

    def __init__(self, on_write: Callable[[int], Awaitable[None]] | None = None) -> None:
        self.chunks: list[bytes] = []
        self.ended = 0
        self._on_write = on_write

    async def write(self, data: bytes) -> None:
        if self._on_write is not None:
            await self._on_write(len(self.chunks))
        self.chunks.append(data)

    async def end(self) -> None:
        self.ended += 1

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)


class CountingGate:
    """Usage gate that counts charges and can be told to refuse."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.charges: list[str] = []
        self.error = error

    async def charge(self, user_id: int | str) -> int:
        if self.error is not None:
            raise self.error
        self.charges.append(str(user_id))
        return len(self.charges)


__all__ = ["FakeWebSocket", "RecordingSink", "CountingGate"]
