"""Receiver side of the chunked binary transfer."""

from __future__ import annotations

import time
import logging
from typing import Any
from collections.abc import Callable

from sync_bridge.errors import ChunkSequenceError
from sync_bridge.state import ChunkSession, CompletedUpload
from sync_bridge.config.rpc import (
    CHUNK_KEY_TAG,
    CHUNK_KEY_DATA,
    CHUNK_KEY_INDEX,
    CHUNK_KEY_TOTAL,
    CHUNK_KEY_MIME_TYPE,
    CHUNK_KEY_SESSION_ID,
)

from .chunking import decode_chunk

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


def _require_str(params: dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ChunkSequenceError(f"chunk params missing non-empty '{key}'")
    return value.strip()


def _require_int(params: dict[str, Any], key: str) -> int:
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ChunkSequenceError(f"chunk params missing integer '{key}'")
    return value


class ChunkReceiver:
    """Accumulate chunk sessions and reassemble them on completion.

    Chunks must arrive in index order, each exactly once. Any violation discards
    the session. Sessions that never complete are dropped after `session_ttl_s`;
    expiry is checked lazily on every call.
    """

    def __init__(
        self,
        *,
        max_sessions: int,
        session_ttl_s: float,
        max_session_bytes: int,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.max_sessions = max(1, int(max_sessions))
        self.session_ttl_s = max(0.0, float(session_ttl_s))
        self.max_session_bytes = max(0, int(max_session_bytes))
        self._now = now_fn or time.monotonic
        self._sessions: dict[str, ChunkSession] = {}

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> ChunkSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def prune(self) -> int:
        if self.session_ttl_s <= 0:
            return 0
        cutoff = self._now() - self.session_ttl_s
        expired = [sid for sid, session in self._sessions.items() if session.created_at <= cutoff]
        for sid in expired:
            del self._sessions[sid]
            logger.info("discarded stale chunk session %s", sid)
        return len(expired)

    def _reject(self, message: str, session_id: str, index: int | None = None) -> ChunkSequenceError:
        self.discard(session_id)
        logger.warning("chunk session %s rejected: %s", session_id, message)
        return ChunkSequenceError(message, session_id=session_id, index=index)

    def _open(self, session_id: str, total: int, mime_type: str, tag: str) -> ChunkSession:
        if len(self._sessions) >= self.max_sessions:
            raise ChunkSequenceError(
                f"too many chunk sessions in progress (limit {self.max_sessions})", session_id=session_id, index=0
            )
        session = ChunkSession(
            session_id=session_id,
            total_chunks=total,
            mime_type=mime_type,
            tag=tag,
            created_at=self._now(),
        )
        self._sessions[session_id] = session
        return session

    def accept(self, params: dict[str, Any]) -> ChunkSession:
        self.prune()

        session_id = _require_str(params, CHUNK_KEY_SESSION_ID)
        try:
            index = _require_int(params, CHUNK_KEY_INDEX)
            total = _require_int(params, CHUNK_KEY_TOTAL)
            mime_type = _require_str(params, CHUNK_KEY_MIME_TYPE)
            tag = _require_str(params, CHUNK_KEY_TAG)
        except ChunkSequenceError as exc:
            raise self._reject(str(exc), session_id) from exc
        data = params.get(CHUNK_KEY_DATA)
        if not isinstance(data, str):
            raise self._reject("chunk params missing string 'data'", session_id, index)
        if total <= 0 or index < 0 or index >= total:
            raise self._reject(f"chunk index {index} outside [0, {total})", session_id, index)

        session = self._sessions.get(session_id)
        if session is None:
            if index != 0:
                raise self._reject(f"chunk {index} for unknown session", session_id, index)
            session = self._open(session_id, total, mime_type, tag)
        elif total != session.total_chunks:
            raise self._reject(f"chunk total changed from {session.total_chunks} to {total}", session_id, index)
        elif mime_type != session.mime_type or tag != session.tag:
            raise self._reject(
                f"chunk {index} targets {mime_type}/{tag}, session is {session.mime_type}/{session.tag}",
                session_id,
                index,
            )
        elif index != session.next_index:
            kind = "duplicate" if index < session.next_index else "out-of-order"
            raise self._reject(f"{kind} chunk {index}, expected {session.next_index}", session_id, index)

        try:
            chunk = decode_chunk(data)
        except ValueError as exc:
            raise self._reject(str(exc), session_id, index) from exc

        if self.max_session_bytes and session.byte_length + len(chunk) > self.max_session_bytes:
            raise self._reject(f"upload exceeds {self.max_session_bytes} bytes", session_id, index)

        session.parts.append(chunk)
        session.byte_length += len(chunk)
        return session

    def complete(self, params: dict[str, Any]) -> CompletedUpload:
        self.prune()

        session_id = _require_str(params, CHUNK_KEY_SESSION_ID)
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise ChunkSequenceError("complete for unknown or expired session", session_id=session_id)
        if not session.is_complete():
            logger.warning(
                "chunk session %s completed early: %s/%s chunks", session_id, session.received, session.total_chunks
            )
            raise ChunkSequenceError(
                f"received {session.received} of {session.total_chunks} chunks",
                session_id=session_id,
                index=session.next_index,
            )

        return CompletedUpload(
            session_id=session_id,
            payload=b"".join(session.parts),
            mime_type=session.mime_type,
            tag=session.tag,
        )


__all__ = ["ChunkReceiver"]
