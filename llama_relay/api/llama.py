"""Generation routes backed by the streaming relay.

``POST /api/llama/generate`` answers in one of two modes:

- ``stream: true``: the upstream NDJSON lines are forwarded verbatim as a
  chunked ``application/json`` body while the same fragments are published
  to the user's WebSocket connections.
- ``stream: false``: the single upstream JSON object is returned.

The upstream stream is opened before the response starts, so an unreachable
backend is still reported as a 500 with an ``error`` body.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse, StreamingResponse

from ..auth import require_user
from ..errors import BlockedContentError, UpstreamError
from ..logging import log_context
from ..messages import parse_generate_body
from ..relay import QueueSink
from ..runtime import RuntimeDeps
from ..users import User
from .deps import get_deps, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/llama")

REQUEST_ID_HEADER = "X-Request-Id"


@router.post("/generate")
async def generate(
    request: Request,
    user: User = Depends(require_user),
    deps: RuntimeDeps = Depends(get_deps),
):
    body = await read_json_body(request)
    generation = parse_generate_body(body, header_request_id=request.headers.get(REQUEST_ID_HEADER))

    keyword = deps.keywords.matches(generation.prompt)
    if keyword is not None:
        raise BlockedContentError(keyword)

    headers = {REQUEST_ID_HEADER: generation.request_id}
    with log_context(request_id=generation.request_id):
        logger.info(
            "generate model=%s stream=%s prompt_chars=%d",
            generation.model,
            generation.stream,
            len(generation.prompt),
        )
        if not generation.stream:
            payload = await deps.relay.generate(generation, user.id)
            return ORJSONResponse(payload, headers=headers)

        sink = QueueSink()
        try:
            await deps.relay.start(generation, user.id, sink)
        except BaseException:
            # No response will ever read this body
            sink.close()
            raise

    headers["Cache-Control"] = "no-cache"
    headers["X-Accel-Buffering"] = "no"
    return StreamingResponse(sink.body(), media_type="application/json", headers=headers)


@router.post("/cancel")
async def cancel(
    user: User = Depends(require_user),
    deps: RuntimeDeps = Depends(get_deps),
):
    try:
        await deps.relay.cancel(user.id)
    except UpstreamError as exc:
        logger.error("cancel failed: %s", exc)
        return ORJSONResponse({"error": "Failed to cancel generation"}, status_code=500)
    return {"success": True}


__all__ = ["router"]
