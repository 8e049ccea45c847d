"""WebSocket connection management.

connections.py:
    Registry of admitted sockets, tagged by user id. Semaphore-based
    admission plus per-user broadcast used by the relay.

limits.py:
    Sliding window rate limiter for per-connection message throttling.

websocket/:
    Frame parsing, routing, error frames and the idle watchdog for ``/ws``.
"""
