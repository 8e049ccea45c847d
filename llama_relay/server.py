"""Main FastAPI server for the llama relay.

This module wires the HTTP API and the WebSocket side-channel around a
shared set of runtime services:

- REST endpoints for sign-up, login, the current user, LLM settings and
  generation (/api/...)
- WebSocket endpoint for per-user stream fan-out (/ws)
- Health checks (/healthz, /)

Server Lifecycle:
    1. On startup: configure telemetry and build runtime dependencies
       (unless a test already installed them on ``app.state.deps``)
    2. Serve HTTP generations; each streaming request spawns one relay task
    3. On shutdown: cancel in-flight relays, close the upstream client and
       flush telemetry

Example:
    Run directly with uvicorn:
        $ uvicorn llama_relay.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from .api import llama_router, register_exception_handlers, settings_router, users_router
from .handlers.websocket import handle_websocket_connection
from .logging import configure_logging
from .runtime import RuntimeDeps, build_runtime_deps
from .telemetry import init_telemetry, shutdown_telemetry

logger = logging.getLogger(__name__)


def create_app(deps: RuntimeDeps | None = None) -> FastAPI:
    """Build the application; ``deps`` overrides the startup-built services."""
    app = FastAPI(default_response_class=ORJSONResponse)
    if deps is not None:
        app.state.deps = deps

    register_exception_handlers(app)
    app.include_router(users_router)
    app.include_router(llama_router)
    app.include_router(settings_router)

    @app.on_event("startup")
    async def build_services() -> None:
        init_telemetry()
        if getattr(app.state, "deps", None) is None:
            app.state.deps = build_runtime_deps()
        logger.info("llama relay ready")

    @app.on_event("shutdown")
    async def stop_services() -> None:
        runtime: RuntimeDeps | None = getattr(app.state, "deps", None)
        if runtime is not None:
            await runtime.shutdown()
        shutdown_telemetry()

    @app.get("/")
    async def root():
        """Root endpoint for load balancer health checks."""
        return {"status": "ok", "connections": app.state.deps.registry.count()}

    @app.get("/healthz")
    async def healthz():
        """Health check endpoint (no authentication required)."""
        runtime: RuntimeDeps = app.state.deps
        return {
            "status": "ok",
            "connections": runtime.registry.count(),
            "capacity": runtime.registry.get_capacity_info(),
            "activeRelays": runtime.relay.active_relays,
        }

    @app.get("/favicon.ico", status_code=204)
    async def favicon():
        """Suppress favicon requests from browsers/probes."""
        return None

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Per-user stream fan-out channel."""
        await handle_websocket_connection(websocket, app.state.deps.registry)

    return app


configure_logging()
app = create_app()
