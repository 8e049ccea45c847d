"""Session-based authentication for the HTTP API."""

from .sessions import SessionStore
from .dependencies import get_session_token, require_user

__all__ = ["SessionStore", "get_session_token", "require_user"]
