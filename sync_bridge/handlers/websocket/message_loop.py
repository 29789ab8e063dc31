"""Receive loop for an authenticated peer connection."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable

from websockets.exceptions import ConnectionClosed

from sync_bridge.state import Connection
from sync_bridge.protocol import ResultFrame, ControlFrame, HandshakeFrame, parse_peer_frame
from sync_bridge.config.websocket import FRAME_TYPE_PING, FRAME_TYPE_PONG

from .errors import safe_send_frame

logger = logging.getLogger(__name__)

ResultHandler = Callable[[Connection, ResultFrame], None]


async def _handle_control(ws: Any, conn: Connection, frame: ControlFrame) -> None:
    if frame.type == FRAME_TYPE_PING:
        await safe_send_frame(ws, ControlFrame(type=FRAME_TYPE_PONG).to_wire())
        return
    if frame.type == FRAME_TYPE_PONG:
        return
    logger.debug("connection %s: ignoring control frame type=%s", conn.connection_id, frame.type)


async def run_message_loop(ws: Any, conn: Connection, on_result: ResultHandler) -> None:
    """Route inbound frames until the socket closes."""
    try:
        while True:
            raw = await ws.recv()
            try:
                frame = parse_peer_frame(raw)
            except ValueError as exc:
                logger.warning("connection %s: dropping malformed frame: %s", conn.connection_id, exc)
                continue

            if isinstance(frame, ResultFrame):
                on_result(conn, frame)
            elif isinstance(frame, ControlFrame):
                await _handle_control(ws, conn, frame)
            elif isinstance(frame, HandshakeFrame):
                logger.info("connection %s: ignoring repeated handshake", conn.connection_id)
    except ConnectionClosed:
        return


__all__ = ["ResultHandler", "run_message_loop"]
