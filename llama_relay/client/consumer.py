"""Dual-channel stream consumer.

Each generation reaches the client twice: as NDJSON lines on the HTTP
response and as ``stream`` frames on the user's WebSocket. Both carry the
same fragments in the same order, so a fragment is identified by its
position: ``seq`` on the WebSocket, arrival index on HTTP. Whichever channel
delivers position *n* first applies it; the later copy is dropped.

WebSocket frames may run ahead of HTTP; a frame whose position is beyond the
next expected one is held until the gap is filled. HTTP positions are
always contiguous, so HTTP never waits. When the channel is not
authenticated, HTTP is the only source.

Completion happens on the HTTP ``done`` fragment followed by the end of the
body, or on ``streamEnd`` once every fragment it counts has been applied.
A ``streamError`` or an HTTP body that stops short keeps the partial text
and records the error.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any

from ..config.websocket import WS_MSG_STREAM, WS_MSG_STREAM_END, WS_MSG_STREAM_ERROR
from ..errors import GenerateError
from .channel import DuplexChannel
from .http import GenerateClient
from .message import AssistantMessage

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[AssistantMessage], None]

INCOMPLETE_STREAM_ERROR = "stream ended before completion"


class _MergeState:
    """Position bookkeeping for one in-flight message."""

    def __init__(self, message: AssistantMessage, on_update: UpdateCallback | None) -> None:
        self.message = message
        self.next_position = 0
        self.pending: dict[int, str] = {}
        self.expected_total: int | None = None
        self.duplicates = 0
        self._on_update = on_update

    def apply(self, position: int, text: str, *, wait_for_gap: bool) -> None:
        if self.message.frozen:
            return
        if position < self.next_position:
            self.duplicates += 1
            return
        if position > self.next_position:
            if wait_for_gap:
                self.pending.setdefault(position, text)
            return

        changed = self.message.append(text)
        self.next_position += 1
        while self.next_position in self.pending:
            changed = self.message.append(self.pending.pop(self.next_position)) or changed
            self.next_position += 1
        if changed:
            self.notify()
        self.maybe_finish()

    def maybe_finish(self) -> None:
        if self.expected_total is not None and self.next_position >= self.expected_total:
            self.finish()

    def finish(self) -> None:
        if self.message.finish():
            self.notify()

    def fail(self, error: str) -> None:
        if self.message.fail(error):
            logger.info("message request_id=%s failed: %s", self.message.request_id, error)
            self.notify()

    def notify(self) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(self.message)
        except Exception:  # noqa: BLE001
            logger.exception("on_update callback failed")


class StreamConsumer:
    """Sends prompts and assembles replies from both delivery channels.

    Attributes:
        http: HTTP client used for generate and cancel calls.
        channel: Optional WebSocket side-channel; HTTP alone is enough.
    """

    def __init__(
        self,
        http: GenerateClient,
        channel: DuplexChannel | None = None,
        *,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self.http = http
        self.channel = channel
        self._on_update = on_update
        self._active: _MergeState | None = None

    @property
    def active_message(self) -> AssistantMessage | None:
        return self._active.message if self._active else None

    async def send_message(self, prompt: str, model: str, **sampling: Any) -> AssistantMessage:
        """Stream one reply and return it once frozen."""
        message = AssistantMessage(request_id=uuid.uuid4().hex)
        state = _MergeState(message, self._on_update)
        self._active = state
        unsubscribe = None
        if self.channel is not None:
            unsubscribe = self.channel.subscribe(lambda msg: self._on_channel_message(state, msg))

        saw_done = False
        position = 0
        try:
            async for fragment in self.http.stream(
                prompt, model, request_id=message.request_id, **sampling
            ):
                if message.frozen:
                    break
                state.apply(position, fragment.text, wait_for_gap=False)
                position += 1
                saw_done = saw_done or fragment.done
        except GenerateError as exc:
            state.fail(str(exc))
        finally:
            if unsubscribe is not None:
                unsubscribe()
            if self._active is state:
                self._active = None

        if not message.frozen:
            if saw_done:
                state.finish()
            else:
                state.fail(INCOMPLETE_STREAM_ERROR)
        logger.info(
            "message request_id=%s done complete=%s chars=%d duplicates=%d",
            message.request_id,
            message.complete,
            len(message.content),
            state.duplicates,
        )
        return message

    async def cancel(self) -> None:
        """Freeze the in-flight message and tell the server. Never raises."""
        state = self._active
        if state is not None and state.message.cancel():
            state.notify()
        try:
            await self.http.cancel()
        except Exception as exc:  # noqa: BLE001
            logger.warning("server cancel failed: %s", exc)

    def _on_channel_message(self, state: _MergeState, msg: dict[str, Any]) -> None:
        if self.channel is None or not self.channel.authenticated:
            return
        if msg.get("requestId") != state.message.request_id:
            return

        msg_type = msg.get("type")
        payload = msg.get("payload")
        if not isinstance(payload, dict):
            return

        if msg_type == WS_MSG_STREAM:
            seq = msg.get("seq")
            if not isinstance(seq, int) or seq < 0:
                return
            text = payload.get("response")
            state.apply(seq, text if isinstance(text, str) else "", wait_for_gap=True)
        elif msg_type == WS_MSG_STREAM_END:
            total = payload.get("fragments")
            if isinstance(total, int):
                state.expected_total = total
                state.maybe_finish()
        elif msg_type == WS_MSG_STREAM_ERROR:
            state.fail(str(payload.get("error") or "stream error"))


__all__ = ["StreamConsumer", "INCOMPLETE_STREAM_ERROR"]
