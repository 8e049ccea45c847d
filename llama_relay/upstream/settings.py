"""Runtime-editable LLM settings.

Operators can change the backend URL, the default model and the name
clients display for it through ``/api/settings/llm``. A new URL applies to
generations started after the update; relays already streaming keep their
open upstream response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from ..config.upstream import LLAMA_API_URL, LLAMA_DEFAULT_MODEL, LLAMA_MODEL_DISPLAY_NAME
from ..errors import ValidationError


@dataclass(slots=True, frozen=True)
class LlmSettings:
    model_name: str = LLAMA_DEFAULT_MODEL
    ollama_url: str = LLAMA_API_URL
    model_display_name: str = LLAMA_MODEL_DISPLAY_NAME

    def to_public(self) -> dict[str, str]:
        return {
            "modelName": self.model_name,
            "ollamaUrl": self.ollama_url,
            "modelDisplayName": self.model_display_name,
        }

    @classmethod
    def from_body(cls, body: Any) -> LlmSettings:
        """Build settings from a camelCase request body.

        Raises:
            ValidationError: A field is missing or blank, or ``ollamaUrl`` is
                not an absolute http(s) URL.
        """
        if not isinstance(body, dict):
            raise ValidationError("invalid_body", "Request body must be a JSON object")
        values = [body.get(key) for key in ("modelName", "ollamaUrl", "modelDisplayName")]
        if not all(isinstance(value, str) and value.strip() for value in values):
            raise ValidationError("missing_settings", "All fields are required")
        model_name, ollama_url, display_name = (value.strip() for value in values)

        parsed = urlparse(ollama_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError("invalid_ollama_url", "ollamaUrl must be an http(s) URL")
        return cls(model_name=model_name, ollama_url=ollama_url, model_display_name=display_name)


__all__ = ["LlmSettings"]
