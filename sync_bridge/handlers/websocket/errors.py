"""Best-effort send/close helpers for the peer socket."""

from __future__ import annotations

import logging
import contextlib
from typing import Any

from websockets.exceptions import ConnectionClosed

from sync_bridge.protocol import encode_frame
from sync_bridge.config.websocket import FRAME_KEY_ERROR, FRAME_KEY_AUTHENTICATED

logger = logging.getLogger(__name__)


def build_rejection(error_code: str, message: str) -> dict[str, Any]:
    return {FRAME_KEY_AUTHENTICATED: False, FRAME_KEY_ERROR: error_code, "message": message}


async def safe_send_text(ws: Any, text: str) -> bool:
    try:
        await ws.send(text)
    except ConnectionClosed:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_frame(ws: Any, frame: dict[str, Any]) -> bool:
    return await safe_send_text(ws, encode_frame(frame))


async def close_quietly(ws: Any, *, code: int, reason: str) -> None:
    with contextlib.suppress(Exception):
        await ws.close(code=code, reason=reason)


async def reject_connection(
    ws: Any,
    *,
    error_code: str,
    message: str,
    close_code: int,
) -> None:
    # Tell the peer why before closing, so the extension can surface it.
    await safe_send_frame(ws, build_rejection(error_code, message))
    await close_quietly(ws, code=close_code, reason=message[:120])


__all__ = [
    "build_rejection",
    "close_quietly",
    "reject_connection",
    "safe_send_frame",
    "safe_send_text",
]
