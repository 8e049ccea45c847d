"""Llama Relay Server Package.

This package provides a chat backend in front of a locally hosted
Ollama-style inference endpoint. The server handles:

- Sign-up, session-based login and per-user request quotas
- Runtime-editable LLM settings (model, backend URL, display name)
- Keyword filtering of prompts
- Streaming generation over chunked HTTP, mirrored to the user's
  WebSocket connections
- Advisory cancellation forwarded to the backend

Architecture Overview:
    - server.py: FastAPI application entry point
    - config/: Configuration modules (environment-based)
    - upstream/: Inference backend client and NDJSON decoding
    - relay/: Streaming relay and response sinks
    - handlers/: Connection registry and WebSocket handling
    - api/: HTTP routes and error mapping
    - users/, auth/, filters/: Accounts, sessions and content filtering
    - client/: Python stream consumer (dual-channel merge)

Example:
    Start the server with uvicorn:

    $ uvicorn llama_relay.server:app --host 0.0.0.0 --port 8000

Environment Variables:
    - LLAMA_API_URL: Backend generate endpoint
      (default http://127.0.0.1:11434/api/generate)
    - ADMIN_USERNAME / ADMIN_PASSWORD: Seed admin account
    - BLOCKED_KEYWORDS: Comma-separated prompt blocklist
    - MAX_CONCURRENT_CONNECTIONS: Maximum WebSocket connections
    - SENTRY_DSN: Enables error reporting
"""
