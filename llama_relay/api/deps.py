"""Request-scoped access to runtime services."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from ..errors import ValidationError
from ..runtime import RuntimeDeps


def get_deps(request: Request) -> RuntimeDeps:
    return request.app.state.deps


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON, mapping failures to ``ValidationError``."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError("invalid_json", "Request body must be valid JSON") from exc


__all__ = ["get_deps", "read_json_body"]
