"""Mock inference backend built on ``httpx.MockTransport``."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import httpx

from llama_relay.upstream import InferenceClient

UPSTREAM_URL = "http://upstream.test/api/generate"

HELLO_FRAGMENTS = (
    {"response": "He", "done": False},
    {"response": "llo", "done": False},
    {"response": "", "done": True},
)


def ndjson(*objects: dict[str, Any]) -> bytes:
    return b"".join(json.dumps(obj).encode() + b"\n" for obj in objects)


class ChunkStream(httpx.AsyncByteStream):
    """Async body yielding fixed chunks, optionally failing afterwards."""

    def __init__(self, chunks: Iterable[bytes], error: Exception | None = None) -> None:
        self._chunks = list(chunks)
        self._error = error

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error


class FakeUpstream:
    """Configurable backend; records every request it receives."""

    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        *,
        status_code: int = 200,
        stream_error: Exception | None = None,
        connect_error: Exception | None = None,
        cancel_status: int = 200,
        generate_body: dict[str, Any] | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.status_code = status_code
        self.stream_error = stream_error
        self.connect_error = connect_error
        self.cancel_status = cancel_status
        self.generate_body = generate_body or {"response": "Hello", "done": True}
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error is not None:
            raise self.connect_error
        if request.url.path.endswith("/cancel"):
            return httpx.Response(self.cancel_status, json={})
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "model not found"})
        if not json.loads(request.content).get("stream"):
            return httpx.Response(200, json=self.generate_body)
        return httpx.Response(
            200,
            headers={"content-type": "application/x-ndjson"},
            stream=ChunkStream(self.chunks, self.stream_error),
        )

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def inference_client(self) -> InferenceClient:
        return InferenceClient(UPSTREAM_URL, client=self.http_client())


__all__ = ["UPSTREAM_URL", "HELLO_FRAGMENTS", "ndjson", "ChunkStream", "FakeUpstream"]
