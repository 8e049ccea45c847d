"""LLM settings routes. Any signed-in user may read or change them."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from ..auth import require_user
from ..runtime import RuntimeDeps
from ..upstream import LlmSettings
from ..users import User
from .deps import get_deps, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings")


@router.get("/llm")
async def get_llm_settings(
    user: User = Depends(require_user),
    deps: RuntimeDeps = Depends(get_deps),
):
    return deps.llm_settings.to_public()


@router.put("/llm")
async def update_llm_settings(
    request: Request,
    user: User = Depends(require_user),
    deps: RuntimeDeps = Depends(get_deps),
):
    settings = LlmSettings.from_body(await read_json_body(request))
    deps.update_llm_settings(settings)
    logger.info("user id=%s updated LLM settings model=%s", user.id, settings.model_name)
    return {"success": True, **settings.to_public()}


__all__ = ["router"]
