"""HTTP half of the client: login and streaming generate calls."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..config import SESSION_HEADER_NAME
from ..config.client import CLIENT_HTTP_TIMEOUT_S
from ..errors import GenerateError, StreamInterruptedError
from ..upstream import NdjsonLineDecoder, StreamFragment, parse_line

logger = logging.getLogger(__name__)


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class GenerateClient:
    """Calls the relay's HTTP API on behalf of one logged-in user."""

    def __init__(
        self,
        base_url: str,
        session_token: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = CLIENT_HTTP_TIMEOUT_S,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session_token = session_token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = dict(extra)
        if self.session_token:
            headers[SESSION_HEADER_NAME] = self.session_token
        return headers

    async def login(self, username: str, password: str) -> dict[str, Any]:
        """Log in and keep the session token for later calls; returns the user."""
        response = await self._client.post(
            f"{self.base_url}/api/login",
            json={"username": username, "password": password},
        )
        body = _error_body(response)
        if response.status_code != 200:
            raise GenerateError(
                body.get("error") or f"login failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )
        self.session_token = response.headers.get(SESSION_HEADER_NAME)
        return body

    async def stream(
        self,
        prompt: str,
        model: str,
        *,
        request_id: str,
        **sampling: Any,
    ) -> AsyncIterator[StreamFragment]:
        """Yield parsed fragments from a streaming generate call.

        Iteration ends after the ``done`` fragment or when the body ends.

        Raises:
            GenerateError: The relay answered with an error status.
            StreamInterruptedError: The connection broke mid-body.
        """
        body: dict[str, Any] = {"model": model, "prompt": prompt, "stream": True, "requestId": request_id}
        body.update({key: value for key, value in sampling.items() if value is not None})
        decoder = NdjsonLineDecoder()
        try:
            async with self._client.stream(
                "POST",
                f"{self.base_url}/api/llama/generate",
                json=body,
                headers=self._headers(**{"X-Request-Id": request_id}),
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    error_body = _error_body(response)
                    raise GenerateError(
                        error_body.get("error") or f"generate failed with HTTP {response.status_code}",
                        status_code=response.status_code,
                        body=error_body,
                    )
                async for chunk in response.aiter_bytes():
                    for line in decoder.feed(chunk):
                        fragment = parse_line(line)
                        if fragment is None:
                            continue
                        yield fragment
                        if fragment.done:
                            return
                for line in decoder.flush():
                    fragment = parse_line(line)
                    if fragment is not None:
                        yield fragment
        except httpx.HTTPError as exc:
            logger.warning("generate stream interrupted request_id=%s: %s", request_id, exc)
            raise StreamInterruptedError(str(exc) or type(exc).__name__) from exc

    async def cancel(self) -> None:
        try:
            response = await self._client.post(
                f"{self.base_url}/api/llama/cancel",
                json={},
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise GenerateError(f"cancel failed: {exc}") from exc
        if response.status_code != 200:
            body = _error_body(response)
            raise GenerateError(
                body.get("error") or f"cancel failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["GenerateClient"]
