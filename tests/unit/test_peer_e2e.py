from __future__ import annotations

import os
import asyncio
import contextlib
from typing import Any

import pytest

from sync_bridge.errors import AuthFailed, RemoteError, ConnectionLost
from sync_bridge.peer import PeerClient
from sync_bridge.rpc import ExtensionBridge
from sync_bridge.state import CompletedUpload
from tests.utils import make_settings


async def _wait_connected(bridge: ExtensionBridge, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not bridge.is_connected():
        if loop.time() > deadline:
            raise AssertionError("peer never connected")
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_round_trip_over_real_socket() -> None:
    bridge = ExtensionBridge(make_settings(chunk_size_bytes=16 * 1024))
    port = await bridge.start(0)
    uploads: list[CompletedUpload] = []

    async def check_auth(params: dict[str, Any]) -> Any:
        # Finish after the faster call so results come back out of order.
        await asyncio.sleep(0.05)
        return {"platform": params["platform"], "isAuthenticated": True}

    async def list_platforms(_params: dict[str, Any]) -> Any:
        return [{"id": "zhihu"}]

    async def fail(_params: dict[str, Any]) -> Any:
        raise ValueError("Platform toutiao: not logged in")

    async def on_upload(upload: CompletedUpload) -> Any:
        uploads.append(upload)
        return {"url": f"https://img.example/{upload.tag}.png"}

    peer = PeerClient(
        f"ws://127.0.0.1:{port}",
        "abc123",
        handlers={"checkAuth": check_auth, "listPlatforms": list_platforms, "syncArticle": fail},
        on_upload=on_upload,
    )
    runner = asyncio.create_task(peer.run())
    try:
        await asyncio.wait_for(peer.authenticated.wait(), timeout=2.0)
        await _wait_connected(bridge)

        slow = asyncio.create_task(bridge.request("checkAuth", {"platform": "zhihu"}))
        fast = asyncio.create_task(bridge.request("listPlatforms"))
        assert await fast == [{"id": "zhihu"}]
        assert await slow == {"platform": "zhihu", "isAuthenticated": True}

        with pytest.raises(RemoteError, match="Platform toutiao: not logged in"):
            await bridge.request("syncArticle", {"platforms": ["toutiao"]})

        payload = os.urandom(50 * 1024)
        result = await bridge.upload_chunked(payload, "image/png", "weibo")
        assert result == {"url": "https://img.example/weibo.png"}
        assert len(uploads) == 1
        assert uploads[0].payload == payload
        assert [c.method for c in peer.calls if c.method.startswith("upload")] == ["uploadChunk"] * 4 + [
            "uploadComplete"
        ]
    finally:
        await bridge.stop()
        with contextlib.suppress(Exception):
            await asyncio.wait_for(runner, timeout=2.0)

    assert bridge.is_connected() is False


@pytest.mark.asyncio
async def test_peer_with_wrong_token_is_refused() -> None:
    bridge = ExtensionBridge(make_settings())
    port = await bridge.start(0)
    try:
        peer = PeerClient(f"ws://127.0.0.1:{port}", "wrong")
        with pytest.raises(AuthFailed):
            await asyncio.wait_for(peer.run(), timeout=2.0)
        assert bridge.is_connected() is False
    finally:
        await bridge.stop()


@pytest.mark.asyncio
async def test_peer_cancels_and_awaits_calls_in_flight() -> None:
    bridge = ExtensionBridge(make_settings(request_timeout_s=30.0))
    port = await bridge.start(0)
    started = asyncio.Event()
    cancelled: list[bool] = []

    async def hang(_params: dict[str, Any]) -> Any:
        started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    peer = PeerClient(f"ws://127.0.0.1:{port}", "abc123", handlers={"extractArticle": hang})
    runner = asyncio.create_task(peer.run())
    try:
        await asyncio.wait_for(peer.authenticated.wait(), timeout=2.0)
        await _wait_connected(bridge)
        call = asyncio.create_task(bridge.request("extractArticle"))
        await asyncio.wait_for(started.wait(), timeout=2.0)
    finally:
        await bridge.stop()

    with contextlib.suppress(Exception):
        await asyncio.wait_for(runner, timeout=2.0)
    assert cancelled == [True]
    with pytest.raises(ConnectionLost):
        await call
