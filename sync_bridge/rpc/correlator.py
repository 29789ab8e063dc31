"""Call/response correlation over a fire-and-forget frame channel."""

from __future__ import annotations

import uuid
import asyncio
import logging
import itertools
from typing import Any
from collections.abc import Callable, Awaitable

from sync_bridge.state import PendingCall
from sync_bridge.protocol import CallFrame
from sync_bridge.errors import Timeout, Overloaded, RemoteError, NotConnected, ConnectionLost

logger = logging.getLogger(__name__)

SendFn = Callable[[dict[str, Any]], Awaitable[None]]


class Correlator:
    """Turn a framed channel into awaitable calls.

    Every issued call is settled exactly once: by its result frame, by its
    deadline timer, or by `fail_all` when the peer goes away. The pending table
    is only touched from the event loop thread.
    """

    def __init__(self, send: SendFn, *, max_pending: int, id_prefix: str | None = None) -> None:
        self._send = send
        self._max_pending = max(1, int(max_pending))
        # Per-process prefix: results addressed to a previous process never match.
        self._prefix = id_prefix or uuid.uuid4().hex[:8]
        self._counter = itertools.count(1)
        self._pending: dict[str, PendingCall] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, call_id: str) -> bool:
        return call_id in self._pending

    def _next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"

    async def issue(self, method: str, params: dict[str, Any] | None, timeout_s: float) -> Any:
        if len(self._pending) >= self._max_pending:
            raise Overloaded(self._max_pending)

        loop = asyncio.get_running_loop()
        now = loop.time()
        call = PendingCall(
            call_id=self._next_id(),
            method=method,
            params=dict(params or {}),
            created_at=now,
            deadline=now + timeout_s,
            future=loop.create_future(),
        )
        call.timer = loop.call_at(call.deadline, self._expire, call.call_id, timeout_s)
        self._pending[call.call_id] = call

        try:
            await self._send(CallFrame(call_id=call.call_id, method=method, params=call.params).to_wire())
        except NotConnected:
            self._discard(call.call_id)
            raise
        except Exception:
            logger.exception("failed to send call %s (%s)", call.call_id, method)
            self._discard(call.call_id)
            raise

        return await call.future

    def _discard(self, call_id: str) -> PendingCall | None:
        call = self._pending.pop(call_id, None)
        if call is not None and call.timer is not None:
            call.timer.cancel()
        return call

    def _expire(self, call_id: str, timeout_s: float) -> None:
        call = self._discard(call_id)
        if call is None:
            return
        logger.warning("call %s (%s) timed out after %.1fs", call_id, call.method, timeout_s)
        if not call.future.done():
            call.future.set_exception(Timeout(call_id, call.method, timeout_s))

    def settle(self, call_id: str, *, ok: bool, result: Any = None, error: str | None = None) -> bool:
        call = self._discard(call_id)
        if call is None:
            logger.info("dropping result for unknown or already settled call %s", call_id)
            return False
        if call.future.done():
            # The caller stopped waiting; the slot is released all the same.
            return True
        if ok:
            call.future.set_result(result)
        else:
            call.future.set_exception(RemoteError(error or "", call_id=call_id, method=call.method))
        return True

    def fail_all(self, reason: str) -> int:
        calls = list(self._pending.values())
        self._pending.clear()
        for call in calls:
            if call.timer is not None:
                call.timer.cancel()
            if not call.future.done():
                call.future.set_exception(ConnectionLost(f"{reason} while waiting for {call.method}"))
        if calls:
            logger.warning("failed %s pending call(s): %s", len(calls), reason)
        return len(calls)


__all__ = ["Correlator"]
