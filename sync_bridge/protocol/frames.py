"""Typed wire frames and their JSON encoding."""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass

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


@dataclass(frozen=True, slots=True)
class CallFrame:
    call_id: str
    method: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {FRAME_KEY_ID: self.call_id, FRAME_KEY_METHOD: self.method, FRAME_KEY_PARAMS: self.params}


@dataclass(frozen=True, slots=True)
class ResultFrame:
    call_id: str
    ok: bool
    result: Any = None
    error: str | None = None

    def to_wire(self) -> dict[str, Any]:
        if self.ok:
            return {FRAME_KEY_ID: self.call_id, FRAME_KEY_OK: True, FRAME_KEY_RESULT: self.result}
        return {FRAME_KEY_ID: self.call_id, FRAME_KEY_OK: False, FRAME_KEY_ERROR: self.error or ""}


@dataclass(frozen=True, slots=True)
class HandshakeFrame:
    token: str
    client: str | None = None

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {FRAME_KEY_TOKEN: self.token}
        if self.client:
            data[FRAME_KEY_CLIENT] = self.client
        return data


@dataclass(frozen=True, slots=True)
class ControlFrame:
    type: str

    def to_wire(self) -> dict[str, Any]:
        return {FRAME_KEY_TYPE: self.type}


def encode_frame(frame: dict[str, Any]) -> str:
    return orjson.dumps(frame).decode("utf-8")


__all__ = ["CallFrame", "ControlFrame", "HandshakeFrame", "ResultFrame", "encode_frame"]
