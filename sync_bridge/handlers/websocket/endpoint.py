"""The extension-facing WebSocket endpoint: one authenticated peer at a time."""

from __future__ import annotations

import time
import uuid
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Coroutine

from websockets.exceptions import ConnectionClosed
from websockets.asyncio.server import Server, serve

from sync_bridge.state import Connection
from sync_bridge.protocol import ResultFrame, encode_frame
from sync_bridge.state.settings import AppSettings
from sync_bridge.errors import BindError, AuthFailed, NotConnected
from sync_bridge.config.websocket import (
    FRAME_KEY_AUTHENTICATED,
    FRAME_KEY_CONNECTION_ID,
    WS_CLOSE_REPLACED_CODE,
    WS_CLOSE_GOING_AWAY_CODE,
    WS_CLOSE_REPLACED_REASON,
    WS_CLOSE_SHUTDOWN_REASON,
    WS_CLOSE_UNAUTHORIZED_CODE,
)

from .auth import authenticate_peer
from .message_loop import run_message_loop
from .errors import close_quietly, safe_send_frame, reject_connection

logger = logging.getLogger(__name__)

ConnectFn = Callable[[Connection], None]
DisconnectFn = Callable[[Connection, str], None]
ResultFn = Callable[[ResultFrame], None]


def _format_remote(remote_address: Any) -> str:
    if isinstance(remote_address, tuple) and len(remote_address) >= 2:
        return f"{remote_address[0]}:{remote_address[1]}"
    return str(remote_address) if remote_address else "unknown"


def _bound_port(server: Server, requested: int) -> int:
    for sock in server.sockets:
        return int(sock.getsockname()[1])
    return requested


class ChannelEndpoint:
    """Own the listening socket and the single current peer Connection.

    A connection only becomes current after its handshake succeeds. A newer
    authenticated connection replaces the current one; listeners see the
    disconnect of the old one before the connect of the new one.
    """

    def __init__(self, settings: AppSettings, *, on_result: ResultFn | None = None) -> None:
        self._token = settings.auth.token
        self._ws_settings = settings.websocket
        self._on_result = on_result
        self._on_connect: list[ConnectFn] = []
        self._on_disconnect: list[DisconnectFn] = []
        self._server: Server | None = None
        self._port: int | None = None
        self._current: Connection | None = None
        self._start_lock = asyncio.Lock()
        self._background: set[asyncio.Task] = set()

    @property
    def connection(self) -> Connection | None:
        return self._current

    @property
    def port(self) -> int | None:
        return self._port

    @property
    def is_listening(self) -> bool:
        return self._server is not None

    def is_connected(self) -> bool:
        conn = self._current
        return conn is not None and conn.authenticated and not conn.dropped

    def set_result_handler(self, handler: ResultFn) -> None:
        self._on_result = handler

    def add_listener(self, *, on_connect: ConnectFn | None = None, on_disconnect: DisconnectFn | None = None) -> None:
        if on_connect is not None:
            self._on_connect.append(on_connect)
        if on_disconnect is not None:
            self._on_disconnect.append(on_disconnect)

    async def start(self, port: int | None = None) -> int:
        async with self._start_lock:
            if self._server is not None and self._port is not None:
                return self._port

            host = self._ws_settings.host
            requested = self._ws_settings.port if port is None else int(port)
            try:
                self._server = await serve(
                    self.handle_connection,
                    host,
                    requested,
                    ping_interval=self._ws_settings.ping_interval_s or None,
                    ping_timeout=self._ws_settings.ping_timeout_s or None,
                    max_size=self._ws_settings.max_message_bytes,
                )
            except OSError as exc:
                raise BindError(host, requested, exc.strerror or str(exc)) from exc

            self._port = _bound_port(self._server, requested)
            logger.info("channel endpoint listening on %s:%s", host, self._port)
            return self._port

    async def stop(self) -> None:
        conn = self._current
        if conn is not None:
            self._drop(conn, WS_CLOSE_SHUTDOWN_REASON)
            await close_quietly(conn.socket, code=WS_CLOSE_GOING_AWAY_CODE, reason=WS_CLOSE_SHUTDOWN_REASON)

        server = self._server
        self._server = None
        self._port = None
        if server is not None:
            server.close()
            with contextlib.suppress(Exception):
                await server.wait_closed()

        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

    async def send(self, frame: dict[str, Any]) -> None:
        conn = self._current
        if conn is None or conn.dropped:
            raise NotConnected("browser extension is not connected")

        text = encode_frame(frame)
        try:
            await conn.socket.send(text)
        except Exception as exc:
            # Write failures are a disconnect, not a per-call error: pending calls
            # are failed through the disconnect listeners.
            kind = "closed" if isinstance(exc, ConnectionClosed) else "failed"
            logger.warning("write to connection %s %s; dropping it", conn.connection_id, kind)
            self._drop(conn, "write failed")
            self._spawn(close_quietly(conn.socket, code=WS_CLOSE_GOING_AWAY_CODE, reason="write failed"))

    async def handle_connection(self, ws: Any) -> None:
        """Serve one inbound socket from handshake until it closes."""
        conn = Connection(
            socket=ws,
            connection_id=uuid.uuid4().hex,
            remote_address=_format_remote(getattr(ws, "remote_address", None)),
            connected_at=time.time(),
        )
        logger.info("peer connecting from %s", conn.remote_address)

        try:
            handshake = await authenticate_peer(
                ws,
                expected_token=self._token,
                timeout_s=self._ws_settings.handshake_timeout_s,
            )
        except AuthFailed as exc:
            logger.warning("rejected peer %s: %s", conn.remote_address, exc)
            await reject_connection(
                ws,
                error_code=exc.code,
                message=str(exc),
                close_code=WS_CLOSE_UNAUTHORIZED_CODE,
            )
            return
        except ConnectionClosed:
            logger.info("peer %s went away during handshake", conn.remote_address)
            return

        conn.authenticated = True
        conn.client = handshake.client
        ack = {FRAME_KEY_AUTHENTICATED: True, FRAME_KEY_CONNECTION_ID: conn.connection_id}
        if not await safe_send_frame(ws, ack):
            logger.info("peer %s went away before the handshake ack", conn.remote_address)
            return

        self._install(conn)
        try:
            await run_message_loop(ws, conn, self._dispatch_result)
        finally:
            self._drop(conn, "peer disconnected")

    def _install(self, conn: Connection) -> None:
        old = self._current
        if old is not None:
            logger.info("connection %s replaced by %s", old.connection_id, conn.connection_id)
            self._drop(old, WS_CLOSE_REPLACED_REASON)
            self._spawn(close_quietly(old.socket, code=WS_CLOSE_REPLACED_CODE, reason=WS_CLOSE_REPLACED_REASON))

        self._current = conn
        logger.info(
            "peer authenticated connection=%s remote=%s client=%s",
            conn.connection_id,
            conn.remote_address,
            conn.client,
        )
        for callback in list(self._on_connect):
            try:
                callback(conn)
            except Exception:
                logger.exception("connect listener failed")

    def _drop(self, conn: Connection, reason: str) -> None:
        if conn.dropped:
            return
        conn.dropped = True
        if self._current is conn:
            self._current = None
        logger.info("connection %s closed: %s", conn.connection_id, reason)
        for callback in list(self._on_disconnect):
            try:
                callback(conn, reason)
            except Exception:
                logger.exception("disconnect listener failed")

    def _dispatch_result(self, conn: Connection, frame: ResultFrame) -> None:
        if conn.dropped:
            logger.info("dropping result %s from closed connection %s", frame.call_id, conn.connection_id)
            return
        if self._on_result is None:
            logger.warning("no result handler registered; dropping result %s", frame.call_id)
            return
        self._on_result(frame)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)


__all__ = ["ChannelEndpoint"]
