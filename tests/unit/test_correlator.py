from __future__ import annotations

import asyncio
from typing import Any

import pytest

from sync_bridge.rpc.correlator import Correlator
from sync_bridge.errors import Timeout, Overloaded, RemoteError, NotConnected, ConnectionLost


class _RecordingSender:
    def __init__(self) -> None:
        self.frames: list[dict[str, Any]] = []

    async def __call__(self, frame: dict[str, Any]) -> None:
        self.frames.append(frame)


async def _settle_loop() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_results_route_by_id_under_reordering() -> None:
    sender = _RecordingSender()
    correlator = Correlator(sender, max_pending=16)

    tasks = [asyncio.create_task(correlator.issue("echo", {"n": n}, 5.0)) for n in range(6)]
    await _settle_loop()
    assert len(sender.frames) == 6
    assert len({frame["id"] for frame in sender.frames}) == 6

    for frame in reversed(sender.frames):
        assert correlator.settle(frame["id"], ok=True, result=frame["params"]["n"] * 10)

    results = await asyncio.gather(*tasks)
    assert results == [0, 10, 20, 30, 40, 50]
    assert correlator.pending_count == 0


@pytest.mark.asyncio
async def test_call_frame_shape() -> None:
    sender = _RecordingSender()
    correlator = Correlator(sender, max_pending=4, id_prefix="proc")

    task = asyncio.create_task(correlator.issue("checkAuth", {"platform": "zhihu"}, 5.0))
    await _settle_loop()
    assert sender.frames == [{"id": "proc-1", "method": "checkAuth", "params": {"platform": "zhihu"}}]

    correlator.settle("proc-1", ok=True, result={"isAuthenticated": True})
    assert await task == {"isAuthenticated": True}


@pytest.mark.asyncio
async def test_remote_error_passes_message_verbatim() -> None:
    sender = _RecordingSender()
    correlator = Correlator(sender, max_pending=4)

    task = asyncio.create_task(correlator.issue("syncArticle", {}, 5.0))
    await _settle_loop()
    correlator.settle(sender.frames[0]["id"], ok=False, error="Platform zhihu: not logged in")

    with pytest.raises(RemoteError) as exc:
        await task
    assert str(exc.value) == "Platform zhihu: not logged in"
    assert exc.value.method == "syncArticle"


@pytest.mark.asyncio
async def test_timeout_settles_once_and_late_result_is_noop() -> None:
    sender = _RecordingSender()
    correlator = Correlator(sender, max_pending=4)

    with pytest.raises(Timeout):
        await correlator.issue("ping", {}, 0.05)

    call_id = sender.frames[0]["id"]
    assert correlator.pending_count == 0
    assert correlator.settle(call_id, ok=True, result="pong") is False


@pytest.mark.asyncio
async def test_fail_all_rejects_every_pending_call() -> None:
    sender = _RecordingSender()
    correlator = Correlator(sender, max_pending=16)

    tasks = [asyncio.create_task(correlator.issue("slow", {}, 30.0)) for _ in range(3)]
    await _settle_loop()

    assert correlator.fail_all("peer disconnected") == 3
    assert correlator.pending_count == 0
    for task in tasks:
        with pytest.raises(ConnectionLost):
            await task


@pytest.mark.asyncio
async def test_settle_unknown_id_is_noop() -> None:
    correlator = Correlator(_RecordingSender(), max_pending=4)
    assert correlator.settle("nope-1", ok=True, result=None) is False


@pytest.mark.asyncio
async def test_pending_bound_rejects_new_calls() -> None:
    sender = _RecordingSender()
    correlator = Correlator(sender, max_pending=2)

    tasks = [asyncio.create_task(correlator.issue("slow", {}, 30.0)) for _ in range(2)]
    await _settle_loop()

    with pytest.raises(Overloaded):
        await correlator.issue("slow", {}, 30.0)
    assert len(sender.frames) == 2

    correlator.fail_all("test over")
    await asyncio.gather(*tasks, return_exceptions=True)


@pytest.mark.asyncio
async def test_send_failure_releases_slot() -> None:
    async def send(_frame: dict[str, Any]) -> None:
        raise NotConnected("browser extension is not connected")

    correlator = Correlator(send, max_pending=4)
    with pytest.raises(NotConnected):
        await correlator.issue("ping", {}, 5.0)
    assert correlator.pending_count == 0


@pytest.mark.asyncio
async def test_ids_are_unique_across_correlators() -> None:
    first = _RecordingSender()
    second = _RecordingSender()
    a = Correlator(first, max_pending=4)
    b = Correlator(second, max_pending=4)

    tasks = [asyncio.create_task(a.issue("x", {}, 5.0)), asyncio.create_task(b.issue("x", {}, 5.0))]
    await _settle_loop()
    assert first.frames[0]["id"] != second.frames[0]["id"]

    a.fail_all("done")
    b.fail_all("done")
    await asyncio.gather(*tasks, return_exceptions=True)
