"""Runtime dependency container.

All long-lived services are assembled once at startup and reached by
request handlers through ``app.state.deps``. Nothing is built lazily while a
request is in flight.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from llama_relay.upstream.settings import LlmSettings

if TYPE_CHECKING:
    from llama_relay.auth import SessionStore
    from llama_relay.users import UserStore
    from llama_relay.relay import RelayService
    from llama_relay.filters import KeywordMatcher
    from llama_relay.upstream import InferenceClient
    from llama_relay.handlers.connections import ConnectionRegistry


@dataclass(slots=True)
class RuntimeDeps:
    """Process-wide services initialized during startup."""

    registry: ConnectionRegistry
    client: InferenceClient
    relay: RelayService
    users: UserStore
    sessions: SessionStore
    keywords: KeywordMatcher
    llm_settings: LlmSettings = field(default_factory=LlmSettings)

    def update_llm_settings(self, settings: LlmSettings) -> None:
        """Replace the LLM settings and route new generations to their URL."""
        self.llm_settings = settings
        self.client.set_endpoint(settings.ollama_url)

    async def shutdown(self) -> None:
        await self.relay.shutdown()
        await self.client.aclose()
