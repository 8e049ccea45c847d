"""Unit tests for the HTTP half of the Python client."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from llama_relay.client import GenerateClient
from llama_relay.errors import GenerateError, StreamInterruptedError
from tests.helpers.upstream import HELLO_FRAGMENTS, ChunkStream, ndjson

BASE_URL = "http://relay.test"


class FakeRelay:
    def __init__(self, chunks=(ndjson(*HELLO_FRAGMENTS),), *, status: int = 200, error: Exception | None = None) -> None:
        self.chunks = list(chunks)
        self.status = status
        self.error = error
        self.requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/login":
            body = json.loads(request.content)
            if body["password"] != "pw":
                return httpx.Response(401, json={"error": "Invalid username or password"})
            return httpx.Response(200, json={"id": 1, "username": body["username"]}, headers={"X-Session-Token": "tok"})
        if request.url.path == "/api/llama/cancel":
            if self.status != 200:
                return httpx.Response(500, json={"error": "Failed to cancel generation"})
            return httpx.Response(200, json={"success": True})
        if self.status != 200:
            return httpx.Response(self.status, json={"error": "Request quota exceeded", "quota": 1, "usageCount": 1})
        return httpx.Response(200, stream=ChunkStream(self.chunks, self.error))

    def client(self, token: str | None = "tok") -> GenerateClient:
        return GenerateClient(BASE_URL, token, client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)))


async def _collect(client: GenerateClient, **kwargs) -> list:
    return [fragment async for fragment in client.stream("Say hello", "llama3", request_id="req-9", **kwargs)]


def test_login_stores_session_token() -> None:
    relay = FakeRelay()
    client = relay.client(token=None)
    user = asyncio.run(client.login("alice", "pw"))
    assert user["username"] == "alice"
    assert client.session_token == "tok"


def test_login_failure_raises() -> None:
    client = FakeRelay().client(token=None)
    with pytest.raises(GenerateError) as exc_info:
        asyncio.run(client.login("alice", "bad"))
    assert exc_info.value.status_code == 401
    assert str(exc_info.value) == "Invalid username or password"


def test_stream_sends_request_id_and_sampling() -> None:
    relay = FakeRelay()
    fragments = asyncio.run(_collect(relay.client(), temperature=0.3, topK=None))
    assert "".join(fragment.text for fragment in fragments) == "Hello"
    assert fragments[-1].done
    request = relay.requests[0]
    assert request.headers["X-Request-Id"] == "req-9"
    assert request.headers["X-Session-Token"] == "tok"
    body = json.loads(request.content)
    assert body == {"model": "llama3", "prompt": "Say hello", "stream": True, "requestId": "req-9", "temperature": 0.3}


def test_stream_skips_malformed_lines_and_stops_at_done() -> None:
    relay = FakeRelay([ndjson({"response": "a"}) + b"{not json\n", ndjson({"response": "b", "done": True}), ndjson({"response": "c"})])
    fragments = asyncio.run(_collect(relay.client()))
    assert [fragment.text for fragment in fragments] == ["a", "b"]


def test_stream_rejection_raises_with_body() -> None:
    with pytest.raises(GenerateError) as exc_info:
        asyncio.run(_collect(FakeRelay(status=429).client()))
    assert exc_info.value.status_code == 429
    assert exc_info.value.body["quota"] == 1


def test_broken_body_raises_stream_interrupted() -> None:
    relay = FakeRelay([ndjson({"response": "He"})], error=httpx.ReadError("reset"))
    seen: list[str] = []

    async def _run():
        async for fragment in relay.client().stream("p", "m", request_id="r"):
            seen.append(fragment.text)

    with pytest.raises(StreamInterruptedError):
        asyncio.run(_run())
    assert seen == ["He"]


def test_cancel_failure_raises() -> None:
    asyncio.run(FakeRelay().client().cancel())
    with pytest.raises(GenerateError, match="Failed to cancel generation"):
        asyncio.run(FakeRelay(status=500).client().cancel())
