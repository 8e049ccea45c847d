"""Client-side representation of one assistant reply."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from ..config.client import CLIENT_ERROR_ANNOTATION


@dataclass(slots=True)
class AssistantMessage:
    """Reply being assembled from streamed fragments.

    Content only grows while streaming. Once the message completes, is
    cancelled or fails, it is frozen and ``append`` becomes a no-op.
    """

    request_id: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    role: str = "assistant"
    content: str = ""
    complete: bool = False
    cancelled: bool = False
    error: str | None = None

    @property
    def frozen(self) -> bool:
        return self.complete or self.cancelled or self.error is not None

    @property
    def display_content(self) -> str:
        if self.error is None:
            return self.content
        annotation = CLIENT_ERROR_ANNOTATION.format(error=self.error)
        return f"{self.content}\n\n{annotation}" if self.content else annotation

    def append(self, text: str) -> bool:
        if self.frozen or not text:
            return False
        self.content += text
        return True

    def finish(self) -> bool:
        if self.frozen:
            return False
        self.complete = True
        return True

    def cancel(self) -> bool:
        if self.frozen:
            return False
        self.cancelled = True
        return True

    def fail(self, error: str) -> bool:
        if self.frozen:
            return False
        self.error = error or "unknown error"
        return True


__all__ = ["AssistantMessage"]
