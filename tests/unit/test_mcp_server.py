from __future__ import annotations

import json

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from sync_bridge.errors import RemoteError
from sync_bridge.tools import ToolDispatcher, build_mcp_server
from tests.utils import StubBridge


@pytest.mark.asyncio
async def test_list_tools_serves_catalog() -> None:
    server = build_mcp_server(ToolDispatcher(StubBridge()))
    async with create_connected_server_and_client_session(server) as client:
        listed = await client.list_tools()

    assert [tool.name for tool in listed.tools] == [
        "list_platforms",
        "check_auth",
        "sync_article",
        "extract_article",
        "upload_image_file",
    ]
    check_auth = next(tool for tool in listed.tools if tool.name == "check_auth")
    assert check_auth.inputSchema["required"] == ["platform"]


@pytest.mark.asyncio
async def test_call_tool_returns_json_text() -> None:
    bridge = StubBridge(result={"platform": "zhihu", "isAuthenticated": True})
    server = build_mcp_server(ToolDispatcher(bridge))
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("check_auth", {"platform": "zhihu"})

    assert result.isError is False
    assert json.loads(result.content[0].text) == {"platform": "zhihu", "isAuthenticated": True}
    assert bridge.requests == [("checkAuth", {"platform": "zhihu"})]


@pytest.mark.asyncio
async def test_call_tool_without_extension_is_error_result() -> None:
    server = build_mcp_server(ToolDispatcher(StubBridge(connected=False)))
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("list_platforms", {})

    assert result.isError is True
    assert "not connected" in json.loads(result.content[0].text)["error"]


@pytest.mark.asyncio
async def test_remote_error_is_passed_to_agent() -> None:
    bridge = StubBridge(error=RemoteError("Platform juejin: not logged in"))
    server = build_mcp_server(ToolDispatcher(bridge))
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("sync_article", {"platforms": ["juejin"], "title": "t", "markdown": "m"})

    assert result.isError is True
    assert json.loads(result.content[0].text) == {"error": "Platform juejin: not logged in"}


@pytest.mark.asyncio
async def test_unknown_tool_is_error_result() -> None:
    server = build_mcp_server(ToolDispatcher(StubBridge()))
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("delete_everything", {})

    assert result.isError is True
    assert "Unknown tool: delete_everything" in result.content[0].text
