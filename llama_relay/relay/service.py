"""Streaming relay: one upstream stream, two downstream channels.

For every accepted generation the relay reads the backend's NDJSON stream
line by line and, in upstream order:

1. writes the raw line (plus its newline) to the HTTP response sink;
2. if the line parsed, publishes ``{"type": "stream", "payload": <fragment>,
   "requestId", "seq"}`` to every WebSocket connection of the requesting
   user. ``seq`` counts parsed fragments from zero.

A normal end closes the sink and publishes ``streamEnd`` with the fragment
count. A mid-stream I/O failure publishes ``streamError`` and closes the
sink without writing anything further. Usage is charged once, when the
request is accepted, regardless of how the stream ends.

Each relay runs in its own task so the HTTP handler can return the
streaming response as soon as the upstream has answered. Tasks are tracked
until they finish and cancelled on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from ..errors import UpstreamError, UpstreamStreamError, ValidationError
from ..logging import log_context
from ..telemetry import capture_error
from ..upstream import GenerationRequest, InferenceClient, UpstreamStream
from ..users import UsageGate
from ..handlers.connections import ConnectionRegistry
from .messages import stream_end_message, stream_error_message, stream_message
from .sinks import QueueSink, ResponseSink

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RelayResult:
    request_id: str
    fragments: int
    text: str
    completed: bool
    error: str | None = None


class RelayService:
    """Forwards upstream generations to the HTTP caller and the user's sockets."""

    def __init__(
        self,
        client: InferenceClient,
        registry: ConnectionRegistry,
        usage_gate: UsageGate,
    ) -> None:
        self._client = client
        self._registry = registry
        self._usage_gate = usage_gate
        self._tasks: set[asyncio.Task] = set()

    @property
    def active_relays(self) -> int:
        return len(self._tasks)

    async def relay(
        self,
        request: GenerationRequest,
        user_id: int | str,
        sink: ResponseSink,
    ) -> RelayResult:
        """Relay one streaming generation to completion.

        Raises:
            ValidationError: Empty model or prompt; nothing is charged.
            QuotaExceededError: The user's quota is used up.
            UpstreamError: The backend could not be reached.
        """
        task = await self.start(request, user_id, sink)
        return await task

    async def start(
        self,
        request: GenerationRequest,
        user_id: int | str,
        sink: ResponseSink,
    ) -> asyncio.Task[RelayResult]:
        """Accept, charge and open the upstream, then relay in the background.

        Returns once the upstream stream is open, so every failure that can
        still become an HTTP error status is raised here.
        """
        self._validate(request)
        await self._usage_gate.charge(user_id)

        ready: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        task = asyncio.create_task(self._run(request, user_id, sink, ready))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        await asyncio.wait({ready, task}, return_when=asyncio.FIRST_COMPLETED)
        if not ready.done():
            # The task ended before the stream opened; surface its error
            task.result()
        return task

    async def generate(self, request: GenerationRequest, user_id: int | str) -> dict[str, Any]:
        """Non-streaming generation: charge, call the backend, return its object."""
        self._validate(request)
        await self._usage_gate.charge(user_id)
        with log_context(user_id=str(user_id), request_id=request.request_id):
            payload = await self._client.generate(request)
            logger.info("non-streaming generation complete model=%s", request.model)
            return payload

    async def cancel(self, user_id: int | str) -> None:
        """Forward an advisory cancel. Fragments in flight may still be relayed.

        Raises:
            UpstreamError: If the backend rejected or never received the cancel.
        """
        with log_context(user_id=str(user_id)):
            logger.info("forwarding cancel to upstream")
            await self._client.cancel()

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("cancelled %d in-flight relays", len(tasks))

    @staticmethod
    def _validate(request: GenerationRequest) -> None:
        if not request.model or not request.prompt:
            raise ValidationError("missing_model_or_prompt", "Model and prompt are required")

    async def _run(
        self,
        request: GenerationRequest,
        user_id: int | str,
        sink: ResponseSink,
        ready: asyncio.Future[None],
    ) -> RelayResult:
        with log_context(user_id=str(user_id), request_id=request.request_id):
            try:
                async with self._client.open_stream(request) as stream:
                    if not ready.done():
                        ready.set_result(None)
                    return await self._pump(stream, request, user_id, sink)
            except UpstreamError as exc:
                if ready.done():
                    raise
                logger.error("upstream open failed: %s", exc)
                capture_error(exc)
                await self._registry.broadcast(
                    user_id, stream_error_message(request.request_id, str(exc))
                )
                await sink.end()
                raise

    async def _pump(
        self,
        stream: UpstreamStream,
        request: GenerationRequest,
        user_id: int | str,
        sink: ResponseSink,
    ) -> RelayResult:
        request_id = request.request_id
        parts: list[str] = []
        seq = 0
        try:
            async for line in stream.lines():
                await sink.write(line.raw + b"\n")
                if line.fragment is None:
                    continue
                parts.append(line.fragment.text)
                await self._registry.broadcast(
                    user_id, stream_message(request_id, seq, line.fragment.raw)
                )
                seq += 1
        except UpstreamStreamError as exc:
            logger.warning("relay interrupted after %d fragments: %s", seq, exc)
            capture_error(exc)
            await self._registry.broadcast(user_id, stream_error_message(request_id, str(exc)))
            await sink.end()
            return RelayResult(request_id, seq, "".join(parts), completed=False, error=str(exc))
        except asyncio.CancelledError:
            if isinstance(sink, QueueSink):
                sink.abort()
            raise

        await sink.end()
        await self._registry.broadcast(user_id, stream_end_message(request_id, seq))
        logger.info("relay complete fragments=%d chars=%d", seq, sum(map(len, parts)))
        return RelayResult(request_id, seq, "".join(parts), completed=True)


__all__ = ["RelayResult", "RelayService"]
