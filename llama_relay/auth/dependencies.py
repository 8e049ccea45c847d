"""FastAPI dependencies resolving the session token to a user."""

from __future__ import annotations

import logging

from fastapi import Depends, Request, Security
from fastapi.security.api_key import APIKeyCookie, APIKeyHeader

from ..config import SESSION_COOKIE_NAME, SESSION_HEADER_NAME
from ..errors import AuthenticationError
from ..logging import set_log_context
from ..users import User

logger = logging.getLogger(__name__)

# Browsers send the cookie; scripted clients may use the header instead
session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)
session_header = APIKeyHeader(name=SESSION_HEADER_NAME, auto_error=False)


async def get_session_token(
    cookie_token: str | None = Security(session_cookie),
    header_token: str | None = Security(session_header),
) -> str | None:
    """Return the first non-empty session token candidate."""
    return header_token or cookie_token or None


async def require_user(
    request: Request,
    token: str | None = Depends(get_session_token),
) -> User:
    """Resolve the current user or raise ``AuthenticationError`` (401)."""
    deps = request.app.state.deps
    user_id = deps.sessions.resolve(token)
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    user = deps.users.get_user(user_id)
    if user is None or not user.is_active:
        logger.info("session for user id=%s rejected: user missing or inactive", user_id)
        raise AuthenticationError("Unauthorized")
    set_log_context(user_id=str(user.id))
    return user


__all__ = ["session_cookie", "session_header", "get_session_token", "require_user"]
