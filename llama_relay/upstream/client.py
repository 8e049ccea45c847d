"""Async HTTP client for the Ollama-style inference backend.

The backend streams newline-delimited JSON, one object per generated
fragment, ending with an object whose ``done`` flag is true. The client
exposes that stream as an async iterator of ``UpstreamLine`` so the relay
can forward raw bytes and parsed fragments in the same order.

Example:
    client = InferenceClient()
    async with client.open_stream(request) as stream:
        async for line in stream.lines():
            ...
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from ..config.upstream import (
    LLAMA_API_URL,
    LLAMA_CANCEL_SUFFIX,
    UPSTREAM_READ_TIMEOUT_S,
    UPSTREAM_CONNECT_TIMEOUT_S,
)
from ..errors import UpstreamError, UpstreamStreamError
from .decoder import NdjsonLineDecoder, decode_line
from .types import GenerationRequest, StreamFragment, UpstreamLine

logger = logging.getLogger(__name__)


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(UPSTREAM_READ_TIMEOUT_S, connect=UPSTREAM_CONNECT_TIMEOUT_S)


class UpstreamStream:
    """One open streaming response from the backend.

    Iteration is lazy and can only happen once. The underlying response is
    closed by ``InferenceClient.open_stream`` when its block exits.
    """

    def __init__(self, response: httpx.Response, request_id: str) -> None:
        self._response = response
        self.request_id = request_id
        self._consumed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    async def lines(self) -> AsyncIterator[UpstreamLine]:
        """Yield complete lines in upstream order until ``done`` or EOF.

        Raises:
            UpstreamStreamError: If the transport fails mid-stream.
        """
        if self._consumed:
            raise RuntimeError("upstream stream already consumed")
        self._consumed = True

        decoder = NdjsonLineDecoder()
        try:
            async for chunk in self._response.aiter_bytes():
                for raw in decoder.feed(chunk):
                    line = decode_line(raw)
                    yield line
                    if line.fragment is not None and line.fragment.done:
                        return
            for raw in decoder.flush():
                yield decode_line(raw)
        except httpx.HTTPError as exc:
            logger.warning("upstream stream failed request_id=%s: %s", self.request_id, exc)
            raise UpstreamStreamError(f"upstream stream interrupted: {exc}") from exc

    async def fragments(self) -> AsyncIterator[StreamFragment]:
        """Same sequence as ``lines()`` with malformed lines dropped."""
        async for line in self.lines():
            if line.fragment is not None:
                yield line.fragment


class InferenceClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for one backend endpoint.

    Attributes:
        endpoint: Full URL of the generate endpoint.
        cancel_url: URL that receives advisory cancel requests.
    """

    def __init__(
        self,
        endpoint: str = LLAMA_API_URL,
        *,
        timeout: httpx.Timeout | float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.cancel_url = endpoint.rstrip("/") + LLAMA_CANCEL_SUFFIX
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else _default_timeout(),
        )

    def set_endpoint(self, endpoint: str) -> None:
        """Point later requests at a new generate URL."""
        if endpoint != self.endpoint:
            logger.info("upstream endpoint changed %s -> %s", self.endpoint, endpoint)
        self.endpoint = endpoint
        self.cancel_url = endpoint.rstrip("/") + LLAMA_CANCEL_SUFFIX

    @asynccontextmanager
    async def open_stream(self, request: GenerationRequest) -> AsyncIterator[UpstreamStream]:
        """Start a streaming generation.

        Raises:
            UpstreamError: If the backend is unreachable or answers non-2xx.
                Nothing has been produced at that point.
        """
        body = request.to_upstream()
        body["stream"] = True
        http_request = self._client.build_request("POST", self.endpoint, json=body)
        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.HTTPError as exc:
            logger.error("upstream unreachable endpoint=%s: %s", self.endpoint, exc)
            raise UpstreamError(f"failed to reach inference backend: {exc}") from exc

        try:
            if not response.is_success:
                detail = (await response.aread()).decode("utf-8", errors="replace")[:200]
                logger.error(
                    "upstream rejected generation status=%s body=%r",
                    response.status_code,
                    detail,
                )
                raise UpstreamError(
                    f"inference backend returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            logger.info("upstream stream opened status=%s", response.status_code)
            yield UpstreamStream(response, request.request_id)
        finally:
            await response.aclose()

    async def generate(self, request: GenerationRequest) -> dict[str, Any]:
        """Run a non-streaming generation and return the backend's JSON object."""
        body = request.to_upstream()
        body["stream"] = False
        try:
            response = await self._client.post(self.endpoint, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"failed to reach inference backend: {exc}") from exc
        if not response.is_success:
            raise UpstreamError(
                f"inference backend returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("inference backend returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("inference backend returned a non-object body")
        return payload

    async def cancel(self) -> None:
        """Send an advisory cancel. Fragments already in flight may still arrive."""
        try:
            response = await self._client.post(self.cancel_url, json={})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"cancel request failed: {exc}") from exc
        if not response.is_success:
            raise UpstreamError(
                f"cancel request returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["InferenceClient", "UpstreamStream"]
