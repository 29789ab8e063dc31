"""Public entry point for callers: the extension bridge."""

from __future__ import annotations

import logging
from typing import Any

from sync_bridge.errors import NotConnected
from sync_bridge.state import Connection
from sync_bridge.protocol import ResultFrame
from sync_bridge.state.settings import AppSettings
from sync_bridge.handlers.websocket import ChannelEndpoint

from .chunking import ChunkAssembler
from .correlator import Correlator

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = (
    "Browser extension is not connected. Make sure the extension is installed, running, and has its "
    "bridge connection enabled with the matching token."
)


class ExtensionBridge:
    """Compose the channel endpoint, the correlator and the chunk assembler.

    Callers use `is_connected`, `request` and `upload_chunked`; the bridge
    carries method names and params without knowing what they mean.
    """

    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings
        self._endpoint = ChannelEndpoint(settings)
        self._correlator = Correlator(self._endpoint.send, max_pending=settings.limits.max_pending_calls)
        self._assembler = ChunkAssembler(
            chunk_size=settings.limits.chunk_size_bytes,
            max_upload_bytes=settings.limits.max_upload_bytes,
            chunk_timeout_s=settings.timeouts.chunk_timeout_s,
            complete_timeout_s=settings.timeouts.complete_timeout_s,
        )
        self._endpoint.set_result_handler(self._on_result)
        self._endpoint.add_listener(on_disconnect=self._on_disconnect)

    @property
    def endpoint(self) -> ChannelEndpoint:
        return self._endpoint

    @property
    def correlator(self) -> Correlator:
        return self._correlator

    @property
    def assembler(self) -> ChunkAssembler:
        return self._assembler

    async def start(self, port: int | None = None) -> int:
        return await self._endpoint.start(port)

    async def stop(self) -> None:
        await self._endpoint.stop()
        # Anything issued after the last disconnect event still gets exactly one settlement.
        self._correlator.fail_all("bridge stopped")

    def is_connected(self) -> bool:
        return self._endpoint.is_connected()

    async def request(self, method: str, params: dict[str, Any] | None = None, *, timeout_s: float | None = None) -> Any:
        if not self.is_connected():
            raise NotConnected(NOT_CONNECTED_MESSAGE)
        timeout = self.settings.timeouts.request_timeout_s if timeout_s is None else float(timeout_s)
        return await self._correlator.issue(method, params, timeout)

    async def upload_chunked(self, payload: bytes, mime_type: str, tag: str) -> Any:
        if not self.is_connected():
            raise NotConnected(NOT_CONNECTED_MESSAGE)
        return await self._assembler.transfer(payload, mime_type, tag, self._correlator.issue)

    def _on_result(self, frame: ResultFrame) -> None:
        self._correlator.settle(frame.call_id, ok=frame.ok, result=frame.result, error=frame.error)

    def _on_disconnect(self, conn: Connection, reason: str) -> None:
        self._correlator.fail_all(f"connection {conn.connection_id} lost ({reason})")


__all__ = ["NOT_CONNECTED_MESSAGE", "ExtensionBridge"]
