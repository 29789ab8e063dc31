"""Receiver-side state for one in-progress chunked upload."""

from __future__ import annotations

from dataclasses import field, dataclass


@dataclass(slots=True)
class ChunkSession:
    session_id: str
    total_chunks: int
    mime_type: str
    tag: str
    created_at: float
    parts: list[bytes] = field(default_factory=list)
    byte_length: int = 0

    @property
    def received(self) -> int:
        return len(self.parts)

    @property
    def next_index(self) -> int:
        return len(self.parts)

    def is_complete(self) -> bool:
        return len(self.parts) == self.total_chunks


@dataclass(frozen=True, slots=True)
class CompletedUpload:
    session_id: str
    payload: bytes
    mime_type: str
    tag: str


__all__ = ["ChunkSession", "CompletedUpload"]
