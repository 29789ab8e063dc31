"""Sender side of the chunked binary transfer."""

from __future__ import annotations

import uuid
import base64
import logging
import binascii
from typing import Any
from collections.abc import Callable, Awaitable

from sync_bridge.config.rpc import (
    CHUNK_METHOD,
    CHUNK_KEY_TAG,
    CHUNK_KEY_DATA,
    CHUNK_KEY_INDEX,
    CHUNK_KEY_TOTAL,
    COMPLETE_METHOD,
    CHUNK_KEY_MIME_TYPE,
    CHUNK_KEY_SESSION_ID,
)

logger = logging.getLogger(__name__)

# (method, params, timeout_s) -> result
IssueFn = Callable[[str, dict[str, Any], float], Awaitable[Any]]


def encode_chunk(chunk: bytes) -> str:
    return base64.b64encode(chunk).decode("ascii")


def decode_chunk(data: str) -> bytes:
    try:
        return base64.b64decode(data.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"chunk data is not valid base64: {exc}") from exc


class ChunkAssembler:
    """Split payloads into bounded chunks and push them one acknowledged call at a time."""

    def __init__(
        self,
        *,
        chunk_size: int,
        max_upload_bytes: int,
        chunk_timeout_s: float,
        complete_timeout_s: float,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = int(chunk_size)
        self.max_upload_bytes = int(max_upload_bytes)
        self.chunk_timeout_s = float(chunk_timeout_s)
        self.complete_timeout_s = float(complete_timeout_s)

    def split(self, payload: bytes) -> list[bytes]:
        if not payload:
            raise ValueError("payload is empty")
        if self.max_upload_bytes > 0 and len(payload) > self.max_upload_bytes:
            raise ValueError(f"payload is {len(payload)} bytes, above the {self.max_upload_bytes} byte upload limit")
        view = memoryview(payload)
        return [bytes(view[i : i + self.chunk_size]) for i in range(0, len(payload), self.chunk_size)]

    @staticmethod
    def chunk_params(
        session_id: str,
        index: int,
        total: int,
        chunk: bytes,
        *,
        mime_type: str,
        tag: str,
    ) -> dict[str, Any]:
        return {
            CHUNK_KEY_SESSION_ID: session_id,
            CHUNK_KEY_INDEX: index,
            CHUNK_KEY_TOTAL: total,
            CHUNK_KEY_MIME_TYPE: mime_type,
            CHUNK_KEY_TAG: tag,
            CHUNK_KEY_DATA: encode_chunk(chunk),
        }

    @staticmethod
    def complete_params(session_id: str, *, mime_type: str, tag: str) -> dict[str, Any]:
        return {CHUNK_KEY_SESSION_ID: session_id, CHUNK_KEY_MIME_TYPE: mime_type, CHUNK_KEY_TAG: tag}

    async def transfer(self, payload: bytes, mime_type: str, tag: str, issue: IssueFn) -> Any:
        """Send every chunk, each acknowledged before the next, then ask the peer to complete.

        The first failing call aborts the transfer and its error propagates as-is;
        nothing after it is sent.
        """
        chunks = self.split(payload)
        total = len(chunks)
        session_id = uuid.uuid4().hex
        logger.info(
            "upload %s: %s bytes in %s chunk(s) mime=%s tag=%s", session_id, len(payload), total, mime_type, tag
        )

        for index, chunk in enumerate(chunks):
            params = self.chunk_params(session_id, index, total, chunk, mime_type=mime_type, tag=tag)
            try:
                await issue(CHUNK_METHOD, params, self.chunk_timeout_s)
            except Exception as exc:
                logger.warning("upload %s aborted at chunk %s/%s: %s", session_id, index + 1, total, exc)
                raise

        result = await issue(
            COMPLETE_METHOD,
            self.complete_params(session_id, mime_type=mime_type, tag=tag),
            self.complete_timeout_s,
        )
        logger.info("upload %s complete", session_id)
        return result


__all__ = ["ChunkAssembler", "decode_chunk", "encode_chunk"]
