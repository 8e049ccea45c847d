"""Sampling, prompt, quota and concurrency limits configuration."""

import os


# Sampling override limits (optional client-provided values)
CHAT_TEMPERATURE_MIN = float(os.getenv("CHAT_TEMPERATURE_MIN", "0"))
CHAT_TEMPERATURE_MAX = float(os.getenv("CHAT_TEMPERATURE_MAX", "2.0"))
CHAT_TOP_P_MIN = float(os.getenv("CHAT_TOP_P_MIN", "0.0"))
CHAT_TOP_P_MAX = float(os.getenv("CHAT_TOP_P_MAX", "1.0"))
CHAT_TOP_K_MIN = int(os.getenv("CHAT_TOP_K_MIN", "0"))
CHAT_TOP_K_MAX = int(os.getenv("CHAT_TOP_K_MAX", "200"))
CHAT_MAX_TOKENS_MIN = int(os.getenv("CHAT_MAX_TOKENS_MIN", "1"))
CHAT_MAX_TOKENS_MAX = int(os.getenv("CHAT_MAX_TOKENS_MAX", "8192"))

# Prompts are concatenated conversation transcripts; keep a generous ceiling
PROMPT_MAX_CHARS = int(os.getenv("PROMPT_MAX_CHARS", "200000"))

# Requests per user before generation is refused (0 = unlimited)
DEFAULT_USER_QUOTA = int(os.getenv("DEFAULT_USER_QUOTA", "100"))

# WebSocket message rate limits (rolling window)
WS_MESSAGE_WINDOW_SECONDS = float(os.getenv("WS_MESSAGE_WINDOW_SECONDS", "60"))
WS_MAX_MESSAGES_PER_WINDOW = int(os.getenv("WS_MAX_MESSAGES_PER_WINDOW", "120"))

# Maximum concurrent WebSocket connections across all users
MAX_CONCURRENT_CONNECTIONS = int(os.getenv("MAX_CONCURRENT_CONNECTIONS", "512"))

# Frames buffered between the relay task and the HTTP response body
RELAY_SINK_QUEUE_SIZE = int(os.getenv("RELAY_SINK_QUEUE_SIZE", "64"))

# Seconds a full sink may wait for the HTTP reader before it is closed
RELAY_SINK_STALL_TIMEOUT_S = float(os.getenv("RELAY_SINK_STALL_TIMEOUT_S", "15"))


__all__ = [
    "CHAT_TEMPERATURE_MIN",
    "CHAT_TEMPERATURE_MAX",
    "CHAT_TOP_P_MIN",
    "CHAT_TOP_P_MAX",
    "CHAT_TOP_K_MIN",
    "CHAT_TOP_K_MAX",
    "CHAT_MAX_TOKENS_MIN",
    "CHAT_MAX_TOKENS_MAX",
    "PROMPT_MAX_CHARS",
    "DEFAULT_USER_QUOTA",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "MAX_CONCURRENT_CONNECTIONS",
    "RELAY_SINK_QUEUE_SIZE",
    "RELAY_SINK_STALL_TIMEOUT_S",
]
