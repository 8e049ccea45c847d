"""Value types shared by the upstream client, the relay and the Python client."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class SamplingParams:
    """Optional sampling overrides forwarded to the backend."""

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_tokens: int | None = None

    def to_upstream(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "max_tokens": self.max_tokens,
        }


@dataclass(slots=True)
class GenerationRequest:
    """One user submission. Transient; only the generated text outlives it."""

    model: str
    prompt: str
    stream: bool = True
    sampling: SamplingParams = field(default_factory=SamplingParams)
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_upstream(self) -> dict[str, Any]:
        """Build the backend request body.

        Unset sampling values are sent as ``null``, which Ollama-style backends
        treat as "use the model default".
        """
        body: dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "stream": self.stream,
        }
        body.update(self.sampling.to_upstream())
        return body


@dataclass(slots=True, frozen=True)
class StreamFragment:
    """One incremental unit of generated text plus the completion flag."""

    text: str
    done: bool
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StreamFragment:
        text = payload.get("response")
        return cls(
            text=text if isinstance(text, str) else "",
            done=bool(payload.get("done")),
            raw=payload,
        )


@dataclass(slots=True, frozen=True)
class UpstreamLine:
    """A complete newline-delimited unit read from the backend.

    ``fragment`` is None when ``raw`` is not a JSON object.
    """

    raw: bytes
    fragment: StreamFragment | None


__all__ = ["SamplingParams", "GenerationRequest", "StreamFragment", "UpstreamLine"]
