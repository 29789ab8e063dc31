"""Reference peer: the extension side of the bridge protocol, in Python."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

from websockets.exceptions import ConnectionClosed
from websockets.asyncio.client import ClientConnection, connect

from sync_bridge.errors import AuthFailed
from sync_bridge.rpc.receiver import ChunkReceiver
from sync_bridge.state import CompletedUpload
from sync_bridge.config.rpc import CHUNK_METHOD, COMPLETE_METHOD
from sync_bridge.protocol import CallFrame, ResultFrame, HandshakeFrame, load_frame, encode_frame, parse_call_frame
from sync_bridge.config.websocket import (
    FRAME_KEY_TYPE,
    FRAME_KEY_ERROR,
    FRAME_KEY_CONNECTION_ID,
    FRAME_KEY_AUTHENTICATED,
    DEFAULT_WS_MAX_MESSAGE_BYTES,
)
from sync_bridge.config.limits import (
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_MAX_CHUNK_SESSIONS,
    DEFAULT_CHUNK_SESSION_TTL_S,
)

logger = logging.getLogger(__name__)

CallHandler = Callable[[dict[str, Any]], Awaitable[Any]]
UploadHandler = Callable[[CompletedUpload], Awaitable[Any]]


class PeerClient:
    """Connect to the bridge, authenticate, and serve its calls.

    Calls are served concurrently, so results may go back in a different order
    than the calls arrived. Chunk and complete calls go through a ChunkReceiver;
    the reassembled upload is handed to `on_upload`, whose return value becomes
    the complete call's result.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        handlers: dict[str, CallHandler] | None = None,
        receiver: ChunkReceiver | None = None,
        on_upload: UploadHandler | None = None,
        client_name: str = "sync-bridge-peer",
        max_message_bytes: int = DEFAULT_WS_MAX_MESSAGE_BYTES,
    ) -> None:
        self.url = url
        self.token = token
        self.client_name = client_name
        self.max_message_bytes = max_message_bytes
        self.connection_id: str | None = None
        self.calls: list[CallFrame] = []
        self.authenticated = asyncio.Event()
        self._handlers: dict[str, CallHandler] = dict(handlers or {})
        self._receiver = receiver or ChunkReceiver(
            max_sessions=DEFAULT_MAX_CHUNK_SESSIONS,
            session_ttl_s=DEFAULT_CHUNK_SESSION_TTL_S,
            max_session_bytes=DEFAULT_MAX_UPLOAD_BYTES,
        )
        self._on_upload = on_upload
        self._ws: ClientConnection | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def receiver(self) -> ChunkReceiver:
        return self._receiver

    def register(self, method: str, handler: CallHandler) -> None:
        self._handlers[method] = handler

    async def run(self) -> None:
        """Connect and serve until the bridge closes the socket."""
        async with connect(self.url, max_size=self.max_message_bytes) as ws:
            self._ws = ws
            try:
                await self._handshake(ws)
                async for raw in ws:
                    self._on_message(ws, raw)
            except ConnectionClosed:
                logger.info("peer: bridge closed the connection")
            finally:
                self.authenticated.clear()
                tasks = list(self._tasks)
                for task in tasks:
                    task.cancel()
                if tasks:
                    await asyncio.gather(*tasks, return_exceptions=True)
                self._ws = None

    async def close(self) -> None:
        ws = self._ws
        if ws is not None:
            await ws.close()

    async def _handshake(self, ws: ClientConnection) -> None:
        await ws.send(encode_frame(HandshakeFrame(token=self.token, client=self.client_name).to_wire()))
        reply = load_frame(await ws.recv())
        if reply.get(FRAME_KEY_AUTHENTICATED) is not True:
            raise AuthFailed(str(reply.get("message") or reply.get(FRAME_KEY_ERROR) or "handshake rejected"))
        self.connection_id = reply.get(FRAME_KEY_CONNECTION_ID)
        self.authenticated.set()
        logger.info("peer: authenticated as connection %s", self.connection_id)

    def _on_message(self, ws: ClientConnection, raw: str | bytes) -> None:
        try:
            msg = load_frame(raw)
            if FRAME_KEY_TYPE in msg:
                return
            frame = parse_call_frame(raw)
        except ValueError as exc:
            logger.warning("peer: dropping malformed frame: %s", exc)
            return
        self.calls.append(frame)
        task = asyncio.create_task(self._serve_call(ws, frame))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _serve_call(self, ws: ClientConnection, frame: CallFrame) -> None:
        try:
            result = await self._dispatch(frame)
            reply = ResultFrame(call_id=frame.call_id, ok=True, result=result)
        except Exception as exc:
            logger.warning("peer: call %s (%s) failed: %s", frame.call_id, frame.method, exc)
            reply = ResultFrame(call_id=frame.call_id, ok=False, error=str(exc) or exc.__class__.__name__)
        with contextlib.suppress(ConnectionClosed):
            await ws.send(encode_frame(reply.to_wire()))

    async def _dispatch(self, frame: CallFrame) -> Any:
        if frame.method == CHUNK_METHOD:
            self._receiver.accept(frame.params)
            return None
        if frame.method == COMPLETE_METHOD:
            upload = self._receiver.complete(frame.params)
            if self._on_upload is None:
                raise RuntimeError("this peer does not accept uploads")
            return await self._on_upload(upload)

        handler = self._handlers.get(frame.method)
        if handler is None:
            raise LookupError(f"unknown method: {frame.method}")
        return await handler(frame.params)


__all__ = ["PeerClient"]
