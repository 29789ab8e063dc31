from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from sync_bridge.server import app


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    monkeypatch.setenv("SYNC_BRIDGE_TOKEN", "abc123")
    monkeypatch.setenv("SYNC_WS_HOST", "127.0.0.1")
    monkeypatch.setenv("SYNC_WS_PORT", "0")
    with TestClient(app) as test_client:
        yield test_client


def test_root_and_health_report_no_extension(client: TestClient) -> None:
    root = client.get("/")
    assert root.status_code == 200
    assert root.json() == {"name": "Sync Assistant MCP Server", "version": "1.0.0", "extensionConnected": False}

    health = client.get("/health")
    assert health.json() == {"status": "ok", "extensionConnected": False}
    assert client.get("/healthz").json() == {"status": "ok"}


def test_lifespan_builds_mcp_server(client: TestClient) -> None:
    assert client.app.state.mcp_server.name == "sync-assistant"
    assert client.app.state.runtime_deps.bridge.endpoint.is_listening is True


def test_messages_require_an_sse_session(client: TestClient) -> None:
    response = client.post("/messages/", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    assert response.status_code == 400
