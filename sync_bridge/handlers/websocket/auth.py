"""Peer handshake authentication."""

from __future__ import annotations

import hmac
import asyncio
from typing import Any

from sync_bridge.errors import AuthFailed
from sync_bridge.protocol import HandshakeFrame, parse_handshake
from sync_bridge.config.websocket import WS_ERROR_AUTH_FAILED, WS_ERROR_HANDSHAKE_TIMEOUT, WS_ERROR_INVALID_HANDSHAKE


def validate_token(token: str, expected: str) -> bool:
    if not expected:
        # Misconfiguration: bridge has no secret set. Treat as locked down.
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


async def read_handshake(ws: Any, *, timeout_s: float) -> HandshakeFrame:
    try:
        raw = await asyncio.wait_for(ws.recv(), timeout=timeout_s)
    except TimeoutError as exc:
        raise AuthFailed(f"no handshake within {timeout_s:g}s", code=WS_ERROR_HANDSHAKE_TIMEOUT) from exc
    try:
        return parse_handshake(raw)
    except ValueError as exc:
        raise AuthFailed(f"invalid handshake: {exc}", code=WS_ERROR_INVALID_HANDSHAKE) from exc


async def authenticate_peer(ws: Any, *, expected_token: str, timeout_s: float) -> HandshakeFrame:
    """Read the first frame and check its secret; raises AuthFailed otherwise."""
    handshake = await read_handshake(ws, timeout_s=timeout_s)
    if not validate_token(handshake.token, expected_token):
        raise AuthFailed("handshake token mismatch", code=WS_ERROR_AUTH_FAILED)
    return handshake


__all__ = ["authenticate_peer", "read_handshake", "validate_token"]
