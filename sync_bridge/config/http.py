"""HTTP port for the MCP SSE transport and health routes."""

from __future__ import annotations

ENV_SYNC_HTTP_HOST = "SYNC_HTTP_HOST"
ENV_SYNC_HTTP_PORT = "SYNC_HTTP_PORT"

DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 9528

# MCP server identity and SSE routes
MCP_SERVER_NAME = "sync-assistant"
MCP_SERVER_VERSION = "1.0.0"
MCP_SSE_PATH = "/sse"
MCP_MESSAGES_PATH = "/messages/"

__all__ = [
    "DEFAULT_HTTP_HOST",
    "DEFAULT_HTTP_PORT",
    "ENV_SYNC_HTTP_HOST",
    "ENV_SYNC_HTTP_PORT",
    "MCP_MESSAGES_PATH",
    "MCP_SERVER_NAME",
    "MCP_SERVER_VERSION",
    "MCP_SSE_PATH",
]
