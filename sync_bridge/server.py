"""HTTP surface: MCP over SSE plus health routes.

Serve with `sync-bridge --sse` (or `uvicorn sync_bridge.server:app --port 9528`).
Agent clients connect to `/sse`; the browser extension connects to the
separate WebSocket port (SYNC_WS_PORT).
"""

from __future__ import annotations

import logging
from typing import Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import Response
from fastapi.responses import ORJSONResponse
from mcp.server.sse import SseServerTransport

from sync_bridge.state import RuntimeDeps
from sync_bridge.tools import build_mcp_server
from sync_bridge.runtime.logging import configure_logging
from sync_bridge.runtime.dependencies import build_runtime_deps
from sync_bridge.config.http import MCP_SSE_PATH, MCP_MESSAGES_PATH

logger = logging.getLogger(__name__)

configure_logging()

SERVICE_NAME = "Sync Assistant MCP Server"
SERVICE_VERSION = "1.0.0"

sse_transport = SseServerTransport(MCP_MESSAGES_PATH)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = await build_runtime_deps()
    app.state.runtime_deps = runtime_deps
    app.state.mcp_server = build_mcp_server(runtime_deps.dispatcher)
    logger.info("runtime: ready (MCP over SSE at %s)", MCP_SSE_PATH)
    try:
        yield
    finally:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is not None:
            await deps.shutdown()


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)


def _runtime_deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


@app.get("/")
async def root(request: Request) -> dict[str, Any]:
    deps = _runtime_deps(request)
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "extensionConnected": deps.bridge.is_connected(),
    }


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    deps = _runtime_deps(request)
    return {"status": "ok", "extensionConnected": deps.bridge.is_connected()}


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


async def handle_sse(request: Request) -> Response:
    server = request.app.state.mcp_server
    logger.info("mcp: SSE session opened from %s", request.client.host if request.client else "unknown")
    async with sse_transport.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("mcp: SSE session closed")
    return Response()


app.add_route(MCP_SSE_PATH, handle_sse, methods=["GET"])
app.mount(MCP_MESSAGES_PATH, app=sse_transport.handle_post_message)
