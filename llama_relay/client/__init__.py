"""Python stream consumer for the relay.

Mirrors what the browser does: a long-lived WebSocket side-channel
(``DuplexChannel``), an HTTP client for generate and cancel calls
(``GenerateClient``) and ``StreamConsumer``, which merges both deliveries of
a generation into one ``AssistantMessage``.
"""

from .channel import DuplexChannel
from .consumer import StreamConsumer
from .http import GenerateClient
from .message import AssistantMessage
from .urls import to_ws_url

__all__ = [
    "AssistantMessage",
    "DuplexChannel",
    "GenerateClient",
    "StreamConsumer",
    "to_ws_url",
]
