from __future__ import annotations

import os
import asyncio
from typing import Any

import pytest

from sync_bridge.rpc import ExtensionBridge
from sync_bridge.rpc.chunking import decode_chunk
from tests.utils import FakePeerSocket, connect_peer, make_settings
from sync_bridge.errors import Timeout, RemoteError, NotConnected, ConnectionLost


async def _serve_upload(ws: FakePeerSocket, url: str, *, fail_at: int | None = None) -> list[dict[str, Any]]:
    """Play the extension side of an upload, checking each chunk is acknowledged before the next."""
    seen: list[dict[str, Any]] = []
    while True:
        frame = await ws.next_sent()
        seen.append(frame)
        await asyncio.sleep(0.02)
        assert ws.pending_sent() == 0
        if frame["method"] == "uploadComplete":
            ws.reply(frame["id"], url)
            return seen
        if frame["params"]["index"] == fail_at:
            ws.reply_error(frame["id"], f"chunk {fail_at} lost")
            return seen
        ws.reply(frame["id"], {"received": frame["params"]["index"]})


@pytest.mark.asyncio
async def test_wrong_token_then_right_token() -> None:
    bridge = ExtensionBridge(make_settings())

    _, rejected_task, reply = await connect_peer(bridge.endpoint, token="wrong")
    await asyncio.wait_for(rejected_task, timeout=1.0)
    assert reply["authenticated"] is False
    assert bridge.is_connected() is False

    ws, task, ack = await connect_peer(bridge.endpoint)
    assert ack["authenticated"] is True
    assert bridge.is_connected() is True

    await bridge.stop()
    await asyncio.wait_for(task, timeout=1.0)
    assert bridge.is_connected() is False


@pytest.mark.asyncio
async def test_request_round_trip() -> None:
    bridge = ExtensionBridge(make_settings())
    ws, task, _ = await connect_peer(bridge.endpoint)

    call = asyncio.create_task(bridge.request("listPlatforms", {"forceRefresh": True}))
    frame = await ws.next_sent()
    assert frame["method"] == "listPlatforms"
    assert frame["params"] == {"forceRefresh": True}
    ws.reply(frame["id"], [{"id": "zhihu", "isAuthenticated": True}])

    assert await call == [{"id": "zhihu", "isAuthenticated": True}]
    assert bridge.correlator.pending_count == 0

    await bridge.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_remote_error_reaches_caller() -> None:
    bridge = ExtensionBridge(make_settings())
    ws, task, _ = await connect_peer(bridge.endpoint)

    call = asyncio.create_task(bridge.request("checkAuth", {"platform": "juejin"}))
    frame = await ws.next_sent()
    ws.reply_error(frame["id"], "Unknown platform: juejin")

    with pytest.raises(RemoteError, match="Unknown platform: juejin"):
        await call

    await bridge.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_silent_peer_times_out() -> None:
    bridge = ExtensionBridge(make_settings())
    ws, task, _ = await connect_peer(bridge.endpoint)

    with pytest.raises(Timeout):
        await bridge.request("checkAuth", {"platform": "zhihu"}, timeout_s=0.05)
    assert bridge.correlator.pending_count == 0

    # A result arriving after the deadline changes nothing.
    frame = await ws.next_sent()
    ws.reply(frame["id"], {"isAuthenticated": True})
    await asyncio.sleep(0.02)
    assert bridge.correlator.pending_count == 0

    await bridge.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_request_without_peer_is_not_connected() -> None:
    bridge = ExtensionBridge(make_settings())
    with pytest.raises(NotConnected, match="not connected"):
        await bridge.request("listPlatforms")
    with pytest.raises(NotConnected):
        await bridge.upload_chunked(b"\x89PNG", "image/png", "weibo")
    assert bridge.correlator.pending_count == 0


@pytest.mark.asyncio
async def test_disconnect_fails_pending_calls_promptly() -> None:
    bridge = ExtensionBridge(make_settings(request_timeout_s=30.0))
    ws, task, _ = await connect_peer(bridge.endpoint)

    calls = [asyncio.create_task(bridge.request("syncArticle", {"n": n})) for n in range(3)]
    for _ in calls:
        await ws.next_sent()
    ws.disconnect()

    for call in calls:
        with pytest.raises(ConnectionLost):
            await asyncio.wait_for(call, timeout=1.0)
    assert bridge.correlator.pending_count == 0
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_replacement_fails_calls_on_old_connection() -> None:
    bridge = ExtensionBridge(make_settings(request_timeout_s=30.0))
    old, old_task, _ = await connect_peer(bridge.endpoint)

    call = asyncio.create_task(bridge.request("listPlatforms"))
    frame = await old.next_sent()

    new, new_task, _ = await connect_peer(bridge.endpoint)
    with pytest.raises(ConnectionLost):
        await asyncio.wait_for(call, timeout=1.0)

    # The old socket is gone; its late result must not settle anything.
    assert bridge.correlator.is_pending(frame["id"]) is False
    assert bridge.is_connected() is True

    await bridge.stop()
    await asyncio.wait_for(asyncio.gather(old_task, new_task), timeout=1.0)


@pytest.mark.asyncio
async def test_upload_chunked_sends_acknowledged_chunks_then_completes() -> None:
    bridge = ExtensionBridge(make_settings(chunk_size_bytes=64 * 1024))
    ws, task, _ = await connect_peer(bridge.endpoint)
    payload = os.urandom(300 * 1024)

    peer = asyncio.create_task(_serve_upload(ws, "https://img.example/p/1.png"))
    url = await bridge.upload_chunked(payload, "image/png", "weibo")
    frames = await peer

    assert url == "https://img.example/p/1.png"
    assert [f["method"] for f in frames] == ["uploadChunk"] * 5 + ["uploadComplete"]
    assert [f["params"]["index"] for f in frames[:5]] == [0, 1, 2, 3, 4]
    assert b"".join(decode_chunk(f["params"]["data"]) for f in frames[:5]) == payload
    assert frames[-1]["params"]["tag"] == "weibo"

    await bridge.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_upload_stops_at_failed_chunk() -> None:
    bridge = ExtensionBridge(make_settings(chunk_size_bytes=1024))
    ws, task, _ = await connect_peer(bridge.endpoint)

    peer = asyncio.create_task(_serve_upload(ws, "unused", fail_at=1))
    with pytest.raises(RemoteError, match="chunk 1 lost"):
        await bridge.upload_chunked(os.urandom(4000), "image/jpeg", "zhihu")
    frames = await peer

    assert [f["params"]["index"] for f in frames] == [0, 1]
    await asyncio.sleep(0.02)
    assert ws.pending_sent() == 0

    await bridge.stop()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_stop_settles_everything_outstanding() -> None:
    bridge = ExtensionBridge(make_settings(request_timeout_s=30.0))
    ws, task, _ = await connect_peer(bridge.endpoint)

    call = asyncio.create_task(bridge.request("listPlatforms"))
    await ws.next_sent()
    await bridge.stop()

    with pytest.raises(ConnectionLost):
        await asyncio.wait_for(call, timeout=1.0)
    await asyncio.wait_for(task, timeout=1.0)
