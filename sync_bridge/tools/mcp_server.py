"""MCP server exposing the tool catalog to agent clients.

Tool results come back as indented JSON text. Failures become error results
(`isError`) whose text is `{"error": message}`; unknown tools report
`Unknown tool: <name>`.
"""

from __future__ import annotations

import logging
from typing import Any

import orjson
from mcp.server import Server
from mcp.types import Tool, TextContent

from sync_bridge.errors import BridgeError, UnknownTool, ToolCallFailed
from sync_bridge.config.http import MCP_SERVER_NAME, MCP_SERVER_VERSION

from .catalog import TOOL_DEFINITIONS
from .dispatch import ToolDispatcher

logger = logging.getLogger(__name__)


def tool_definitions() -> list[Tool]:
    return [
        Tool(name=tool["name"], description=tool["description"], inputSchema=tool["inputSchema"])
        for tool in TOOL_DEFINITIONS
    ]


def format_result(result: Any) -> str:
    return orjson.dumps(result, option=orjson.OPT_INDENT_2).decode("utf-8")


def format_error(message: str) -> str:
    return orjson.dumps({"error": message}).decode("utf-8")


def build_mcp_server(dispatcher: ToolDispatcher) -> Server:
    """Bind list_tools/call_tool handlers to `dispatcher`; the caller picks the transport."""
    server: Server = Server(MCP_SERVER_NAME, version=MCP_SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        try:
            result = await dispatcher.call(name, arguments or {})
        except UnknownTool:
            logger.info("mcp: unknown tool %s", name)
            raise
        except (BridgeError, ValueError, OSError) as exc:
            logger.info("mcp: tool %s failed with %s: %s", name, exc.__class__.__name__, exc)
            # The SDK turns a raised exception into an isError result carrying str(exc).
            raise ToolCallFailed(name, format_error(str(exc))) from exc
        return [TextContent(type="text", text=format_result(result))]

    return server


__all__ = ["build_mcp_server", "format_error", "format_result", "tool_definitions"]
