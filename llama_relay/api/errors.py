"""Exception handlers mapping domain errors to JSON error responses.

Every error body has an ``error`` string; some carry extra fields
(``keyword`` for blocked content, ``code`` for validation failures).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from ..errors import (
    UpstreamError,
    ValidationError,
    QuotaExceededError,
    AuthenticationError,
    BlockedContentError,
    classify_error,
)
from ..telemetry import capture_error

logger = logging.getLogger(__name__)


async def _validation_handler(request: Request, exc: ValidationError) -> ORJSONResponse:
    return ORJSONResponse({"error": exc.message, "code": exc.error_code}, status_code=400)


async def _auth_handler(request: Request, exc: AuthenticationError) -> ORJSONResponse:
    return ORJSONResponse({"error": "Unauthorized"}, status_code=401)


async def _blocked_handler(request: Request, exc: BlockedContentError) -> ORJSONResponse:
    logger.info("prompt rejected: blocked keyword %r", exc.keyword)
    return ORJSONResponse({"error": str(exc), "keyword": exc.keyword}, status_code=403)


async def _quota_handler(request: Request, exc: QuotaExceededError) -> ORJSONResponse:
    logger.info("generation refused: %s", exc)
    return ORJSONResponse(
        {"error": "Request quota exceeded", "quota": exc.quota, "usageCount": exc.usage},
        status_code=429,
    )


async def _upstream_handler(request: Request, exc: UpstreamError) -> ORJSONResponse:
    logger.error("%s on %s: %s", classify_error(exc), request.url.path, exc)
    capture_error(exc, extra={"path": request.url.path, "status_code": exc.status_code})
    return ORJSONResponse({"error": str(exc)}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_handler)
    app.add_exception_handler(AuthenticationError, _auth_handler)
    app.add_exception_handler(BlockedContentError, _blocked_handler)
    app.add_exception_handler(QuotaExceededError, _quota_handler)
    app.add_exception_handler(UpstreamError, _upstream_handler)


__all__ = ["register_exception_handlers"]
