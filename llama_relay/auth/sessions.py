"""Opaque session tokens mapped to user ids.

Tokens are random URL-safe strings handed out at login and carried back in
the ``sid`` cookie (browsers) or the ``X-Session-Token`` header (scripts).
Sessions expire SESSION_TTL_SECONDS after creation. Expired entries are
dropped when presented and swept whenever a new session is created.
"""

from __future__ import annotations

import time
import logging
import secrets
from collections.abc import Callable

from ..config import SESSION_TTL_SECONDS

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(
        self,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, tuple[int, float]] = {}

    def create(self, user_id: int) -> str:
        now = self._clock()
        self.purge_expired(now)
        token = secrets.token_urlsafe(32)
        self._sessions[token] = (user_id, now + self.ttl_seconds)
        logger.info("session created for user id=%s", user_id)
        return token

    def resolve(self, token: str | None) -> int | None:
        """Return the user id behind ``token``, or None if unknown or expired."""
        if not token:
            return None
        entry = self._sessions.get(token)
        if entry is None:
            return None
        user_id, expires_at = entry
        if self._clock() >= expires_at:
            self._sessions.pop(token, None)
            return None
        return user_id

    def revoke(self, token: str | None) -> bool:
        if not token:
            return False
        return self._sessions.pop(token, None) is not None

    def purge_expired(self, now: float | None = None) -> int:
        now = self._clock() if now is None else now
        expired = [token for token, (_, expires_at) in self._sessions.items() if now >= expires_at]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug("purged %d expired sessions", len(expired))
        return len(expired)

    def revoke_user(self, user_id: int) -> int:
        stale = [token for token, (owner, _) in self._sessions.items() if owner == user_id]
        for token in stale:
            del self._sessions[token]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["SessionStore"]
