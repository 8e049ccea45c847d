"""Sign-up, login, logout and current-user routes.

A successful sign-up or login answers with the public user object, sets the
session cookie and repeats the token in the session header for non-browser
clients.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from ..auth import get_session_token, require_user
from ..config import (
    SESSION_COOKIE_NAME,
    SESSION_HEADER_NAME,
    SESSION_TTL_SECONDS,
    SESSION_COOKIE_SECURE,
)
from ..errors import ValidationError
from ..runtime import RuntimeDeps
from ..users import User
from .deps import get_deps, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _read_credentials(body: Any) -> tuple[str, str]:
    if not isinstance(body, dict):
        raise ValidationError("invalid_body", "Request body must be a JSON object")
    username = body.get("username")
    password = body.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ValidationError("missing_credentials", "Username and password are required")
    return username, password


def _session_response(deps: RuntimeDeps, user: User, status_code: int = 200) -> ORJSONResponse:
    token = deps.sessions.create(user.id)
    response = ORJSONResponse(
        user.to_public(),
        status_code=status_code,
        headers={SESSION_HEADER_NAME: token},
    )
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=int(SESSION_TTL_SECONDS),
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )
    return response


@router.post("/register", status_code=201)
async def register(request: Request, deps: RuntimeDeps = Depends(get_deps)):
    username, password = _read_credentials(await read_json_body(request))
    user = await deps.users.register(username, password)
    logger.info("user id=%s registered", user.id)
    return _session_response(deps, user, status_code=201)


@router.post("/login")
async def login(request: Request, deps: RuntimeDeps = Depends(get_deps)):
    username, password = _read_credentials(await read_json_body(request))

    user = await deps.users.verify_credentials(username, password)
    if user is None:
        return ORJSONResponse({"error": "Invalid username or password"}, status_code=401)
    if not user.is_active:
        return ORJSONResponse({"error": "Account is disabled"}, status_code=403)

    logger.info("user id=%s logged in", user.id)
    return _session_response(deps, user)


@router.post("/logout")
async def logout(
    token: str | None = Depends(get_session_token),
    deps: RuntimeDeps = Depends(get_deps),
):
    deps.sessions.revoke(token)
    response = ORJSONResponse({"message": "Logged out successfully"})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/user")
async def current_user(user: User = Depends(require_user)):
    return user.to_public()


@router.get("/user/profile")
async def current_profile(user: User = Depends(require_user)):
    return user.to_profile()


__all__ = ["router"]
