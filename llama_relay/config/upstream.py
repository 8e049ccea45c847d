"""Upstream inference backend configuration values.

The backend is an Ollama-style ``/api/generate`` endpoint that accepts a
prompt and streams newline-delimited JSON fragments. Advisory cancellation is
sent to ``<LLAMA_API_URL>/cancel``.
"""

import os


LLAMA_API_URL = os.getenv("LLAMA_API_URL", "http://127.0.0.1:11434/api/generate")
LLAMA_DEFAULT_MODEL = os.getenv("LLAMA_DEFAULT_MODEL", "deepseek-coder-v2")
LLAMA_CANCEL_SUFFIX = os.getenv("LLAMA_CANCEL_SUFFIX", "/cancel")
LLAMA_MODEL_DISPLAY_NAME = os.getenv("LLAMA_MODEL_DISPLAY_NAME", "DeepSeek Coder")

# Connect is short; reads can stall for a long time while the model thinks
UPSTREAM_CONNECT_TIMEOUT_S = float(os.getenv("UPSTREAM_CONNECT_TIMEOUT_S", "10"))
UPSTREAM_READ_TIMEOUT_S = float(os.getenv("UPSTREAM_READ_TIMEOUT_S", "300"))


__all__ = [
    "LLAMA_API_URL",
    "LLAMA_DEFAULT_MODEL",
    "LLAMA_CANCEL_SUFFIX",
    "LLAMA_MODEL_DISPLAY_NAME",
    "UPSTREAM_CONNECT_TIMEOUT_S",
    "UPSTREAM_READ_TIMEOUT_S",
]
