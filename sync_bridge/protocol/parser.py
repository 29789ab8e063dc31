"""Peer frame parsing/validation."""

from __future__ import annotations

from typing import Any

import orjson

from sync_bridge.config.websocket import (
    FRAME_KEY_ID,
    FRAME_KEY_OK,
    FRAME_KEY_TYPE,
    FRAME_KEY_ERROR,
    FRAME_KEY_TOKEN,
    FRAME_KEY_CLIENT,
    FRAME_KEY_METHOD,
    FRAME_KEY_PARAMS,
    FRAME_KEY_RESULT,
)

from .frames import CallFrame, ResultFrame, ControlFrame, HandshakeFrame

PeerFrame = ResultFrame | HandshakeFrame | ControlFrame


def load_frame(raw: str | bytes) -> dict[str, Any]:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("frame must be a JSON object")
    return msg


def _frame_id(msg: dict[str, Any]) -> str:
    frame_id = msg.get(FRAME_KEY_ID)
    # Booleans are ints in Python; they are never valid ids.
    if isinstance(frame_id, bool) or not isinstance(frame_id, (str, int)):
        raise ValueError("frame missing string 'id'")
    frame_id = str(frame_id).strip()
    if not frame_id:
        raise ValueError("frame missing non-empty 'id'")
    return frame_id


def _handshake_from(msg: dict[str, Any]) -> HandshakeFrame:
    token = msg.get(FRAME_KEY_TOKEN)
    if not isinstance(token, str):
        raise ValueError("handshake missing string 'token'")
    client = msg.get(FRAME_KEY_CLIENT)
    return HandshakeFrame(token=token, client=client.strip() if isinstance(client, str) and client.strip() else None)


def _result_from(msg: dict[str, Any]) -> ResultFrame:
    call_id = _frame_id(msg)
    ok = msg.get(FRAME_KEY_OK)
    if not isinstance(ok, bool):
        raise ValueError("result frame missing boolean 'ok'")
    if ok:
        return ResultFrame(call_id=call_id, ok=True, result=msg.get(FRAME_KEY_RESULT))
    error = msg.get(FRAME_KEY_ERROR)
    if not isinstance(error, str) or not error:
        error = "peer reported an unspecified error"
    return ResultFrame(call_id=call_id, ok=False, error=error)


def parse_handshake(raw: str | bytes) -> HandshakeFrame:
    return _handshake_from(load_frame(raw))


def parse_peer_frame(raw: str | bytes) -> PeerFrame:
    msg = load_frame(raw)

    msg_type = msg.get(FRAME_KEY_TYPE)
    if isinstance(msg_type, str) and msg_type.strip():
        return ControlFrame(type=msg_type.strip())
    if FRAME_KEY_TOKEN in msg:
        return _handshake_from(msg)
    if FRAME_KEY_OK in msg:
        return _result_from(msg)
    raise ValueError("frame is neither a result, a handshake nor a control frame")


def parse_call_frame(raw: str | bytes) -> CallFrame:
    msg = load_frame(raw)
    call_id = _frame_id(msg)

    method = msg.get(FRAME_KEY_METHOD)
    if not isinstance(method, str) or not method.strip():
        raise ValueError("call frame missing non-empty 'method'")

    params = msg.get(FRAME_KEY_PARAMS, {})
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise ValueError("call frame 'params' must be an object")
    return CallFrame(call_id=call_id, method=method.strip(), params=params)


__all__ = ["PeerFrame", "load_frame", "parse_call_frame", "parse_handshake", "parse_peer_frame"]
