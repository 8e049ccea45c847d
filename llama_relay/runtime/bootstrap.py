"""Runtime dependency bootstrap.

Builds every service the HTTP and WebSocket handlers need. Tests call
``build_runtime_deps`` with a mock-transport ``httpx.AsyncClient`` to keep
the upstream in-process.
"""

from __future__ import annotations

import logging

import httpx

from llama_relay.auth import SessionStore
from llama_relay.users import UserStore
from llama_relay.relay import RelayService
from llama_relay.filters import KeywordMatcher
from llama_relay.upstream import InferenceClient, LlmSettings
from llama_relay.handlers.connections import ConnectionRegistry
from llama_relay.config import (
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    BLOCKED_KEYWORDS,
    LLAMA_API_URL,
)

from .dependencies import RuntimeDeps

logger = logging.getLogger(__name__)


def _seed_admin(users: UserStore) -> None:
    if not ADMIN_USERNAME or not ADMIN_PASSWORD:
        logger.info("no admin account configured (ADMIN_USERNAME/ADMIN_PASSWORD unset)")
        return
    if users.get_user_by_username(ADMIN_USERNAME) is None:
        users.create_user(ADMIN_USERNAME, ADMIN_PASSWORD, is_admin=True, quota=0)


def build_runtime_deps(
    *,
    endpoint: str = LLAMA_API_URL,
    http_client: httpx.AsyncClient | None = None,
    max_connections: int | None = None,
) -> RuntimeDeps:
    """Build runtime dependencies for one server process."""
    registry = ConnectionRegistry(max_connections=max_connections)
    client = InferenceClient(endpoint, client=http_client)
    users = UserStore()
    _seed_admin(users)
    relay = RelayService(client, registry, users)
    logger.info(
        "runtime ready: upstream=%s blocked_keywords=%d max_connections=%s",
        endpoint,
        len(BLOCKED_KEYWORDS),
        registry.max_connections,
    )
    return RuntimeDeps(
        registry=registry,
        client=client,
        relay=relay,
        users=users,
        sessions=SessionStore(),
        keywords=KeywordMatcher(BLOCKED_KEYWORDS),
        llm_settings=LlmSettings(ollama_url=endpoint),
    )


__all__ = ["build_runtime_deps"]
