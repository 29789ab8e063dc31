"""Bounds on outstanding calls, chunk sizes and chunk sessions."""

from __future__ import annotations

ENV_BRIDGE_MAX_PENDING_CALLS = "BRIDGE_MAX_PENDING_CALLS"
ENV_UPLOAD_CHUNK_SIZE_BYTES = "UPLOAD_CHUNK_SIZE_BYTES"
ENV_MAX_UPLOAD_BYTES = "MAX_UPLOAD_BYTES"
ENV_MAX_CHUNK_SESSIONS = "MAX_CHUNK_SESSIONS"
ENV_CHUNK_SESSION_TTL_S = "CHUNK_SESSION_TTL_S"

# A stalled peer must not grow the pending table without bound.
DEFAULT_BRIDGE_MAX_PENDING_CALLS = 256

# Raw bytes per chunk. Base64 expands this by 4/3 before it lands in a frame.
DEFAULT_UPLOAD_CHUNK_SIZE_BYTES = 64 * 1024
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024

DEFAULT_MAX_CHUNK_SESSIONS = 8
DEFAULT_CHUNK_SESSION_TTL_S = 300.0

# Room reserved for the JSON envelope around a chunk's base64 data.
CHUNK_FRAME_OVERHEAD_BYTES = 4096

__all__ = [
    "CHUNK_FRAME_OVERHEAD_BYTES",
    "DEFAULT_BRIDGE_MAX_PENDING_CALLS",
    "DEFAULT_CHUNK_SESSION_TTL_S",
    "DEFAULT_MAX_CHUNK_SESSIONS",
    "DEFAULT_MAX_UPLOAD_BYTES",
    "DEFAULT_UPLOAD_CHUNK_SIZE_BYTES",
    "ENV_BRIDGE_MAX_PENDING_CALLS",
    "ENV_CHUNK_SESSION_TTL_S",
    "ENV_MAX_CHUNK_SESSIONS",
    "ENV_MAX_UPLOAD_BYTES",
    "ENV_UPLOAD_CHUNK_SIZE_BYTES",
]
