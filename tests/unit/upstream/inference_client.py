"""Unit tests for the upstream inference client."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from llama_relay.errors import UpstreamError, UpstreamStreamError
from llama_relay.upstream import GenerationRequest, SamplingParams
from tests.helpers.upstream import HELLO_FRAGMENTS, UPSTREAM_URL, FakeUpstream, ndjson


def _request(**kwargs) -> GenerationRequest:
    return GenerationRequest(model="llama3", prompt="Say hello", **kwargs)


def test_stream_yields_lines_in_order_and_stops_after_done() -> None:
    upstream = FakeUpstream([ndjson(*HELLO_FRAGMENTS), ndjson({"response": "ignored"})])

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()) as stream:
            return [line async for line in stream.lines()]

    lines = asyncio.run(_run())
    assert [line.fragment.text for line in lines] == ["He", "llo", ""]
    assert lines[-1].fragment.done is True


def test_stream_sends_upstream_body_with_sampling() -> None:
    upstream = FakeUpstream([ndjson(*HELLO_FRAGMENTS)])
    request = _request(sampling=SamplingParams(temperature=0.2, top_k=40))

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(request) as stream:
            async for _ in stream.fragments():
                pass

    asyncio.run(_run())
    (body,) = upstream.bodies
    assert body["model"] == "llama3"
    assert body["prompt"] == "Say hello"
    assert body["stream"] is True
    assert body["temperature"] == 0.2
    assert body["top_k"] == 40
    assert body["top_p"] is None
    assert str(upstream.requests[0].url) == UPSTREAM_URL


def test_fragments_skip_malformed_lines() -> None:
    chunks = [
        ndjson({"response": "a"}),
        b"{not json\n",
        ndjson({"response": "b", "done": True}),
    ]
    upstream = FakeUpstream(chunks)

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()) as stream:
            return [fragment.text async for fragment in stream.fragments()]

    assert asyncio.run(_run()) == ["a", "b"]


def test_trailing_line_without_newline_is_delivered() -> None:
    upstream = FakeUpstream([b'{"response": "tail", "done": true}'])

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()) as stream:
            return [line async for line in stream.lines()]

    (line,) = asyncio.run(_run())
    assert line.fragment.text == "tail"


def test_lines_can_only_be_consumed_once() -> None:
    upstream = FakeUpstream([ndjson(*HELLO_FRAGMENTS)])

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()) as stream:
            async for _ in stream.lines():
                pass
            with pytest.raises(RuntimeError):
                async for _ in stream.lines():
                    pass

    asyncio.run(_run())


def test_non_success_status_raises_before_streaming() -> None:
    upstream = FakeUpstream(status_code=404)

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()):
            pytest.fail("stream should not open")

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_run())
    assert exc_info.value.status_code == 404
    assert not isinstance(exc_info.value, UpstreamStreamError)


def test_unreachable_backend_raises_upstream_error() -> None:
    upstream = FakeUpstream(connect_error=httpx.ConnectError("connection refused"))

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()):
            pass

    with pytest.raises(UpstreamError, match="failed to reach"):
        asyncio.run(_run())


def test_mid_stream_failure_raises_stream_error_after_partial_output() -> None:
    upstream = FakeUpstream(
        [ndjson({"response": "He"})],
        stream_error=httpx.ReadError("connection reset"),
    )
    seen: list[str] = []

    async def _run():
        client = upstream.inference_client()
        async with client.open_stream(_request()) as stream:
            async for fragment in stream.fragments():
                seen.append(fragment.text)

    with pytest.raises(UpstreamStreamError):
        asyncio.run(_run())
    assert seen == ["He"]


def test_generate_returns_backend_object() -> None:
    upstream = FakeUpstream(generate_body={"response": "Hi there", "done": True})

    async def _run():
        return await upstream.inference_client().generate(_request(stream=False))

    assert asyncio.run(_run()) == {"response": "Hi there", "done": True}
    assert upstream.bodies[0]["stream"] is False


def test_cancel_posts_to_cancel_url() -> None:
    upstream = FakeUpstream()

    async def _run():
        client = upstream.inference_client()
        assert client.cancel_url == UPSTREAM_URL + "/cancel"
        await client.cancel()

    asyncio.run(_run())
    assert upstream.requests[0].url.path == "/api/generate/cancel"


def test_cancel_failure_raises() -> None:
    upstream = FakeUpstream(cancel_status=503)

    async def _run():
        await upstream.inference_client().cancel()

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_run())
    assert exc_info.value.status_code == 503
