"""Call timeouts and chunk-transfer method names."""

from __future__ import annotations

# Reserved method names for the chunked upload sub-protocol.
CHUNK_METHOD = "uploadChunk"
COMPLETE_METHOD = "uploadComplete"

# Chunk call param keys
CHUNK_KEY_SESSION_ID = "sessionId"
CHUNK_KEY_INDEX = "index"
CHUNK_KEY_TOTAL = "total"
CHUNK_KEY_MIME_TYPE = "mimeType"
CHUNK_KEY_TAG = "tag"
CHUNK_KEY_DATA = "data"

ENV_BRIDGE_REQUEST_TIMEOUT_S = "BRIDGE_REQUEST_TIMEOUT_S"
ENV_BRIDGE_CHUNK_TIMEOUT_S = "BRIDGE_CHUNK_TIMEOUT_S"
ENV_BRIDGE_COMPLETE_TIMEOUT_S = "BRIDGE_COMPLETE_TIMEOUT_S"

DEFAULT_BRIDGE_REQUEST_TIMEOUT_S = 30.0
DEFAULT_BRIDGE_CHUNK_TIMEOUT_S = 60.0
# Completion runs the platform upload on the peer side.
DEFAULT_BRIDGE_COMPLETE_TIMEOUT_S = 120.0

__all__ = [
    "CHUNK_KEY_DATA",
    "CHUNK_KEY_INDEX",
    "CHUNK_KEY_MIME_TYPE",
    "CHUNK_KEY_SESSION_ID",
    "CHUNK_KEY_TAG",
    "CHUNK_KEY_TOTAL",
    "CHUNK_METHOD",
    "COMPLETE_METHOD",
    "DEFAULT_BRIDGE_CHUNK_TIMEOUT_S",
    "DEFAULT_BRIDGE_COMPLETE_TIMEOUT_S",
    "DEFAULT_BRIDGE_REQUEST_TIMEOUT_S",
    "ENV_BRIDGE_CHUNK_TIMEOUT_S",
    "ENV_BRIDGE_COMPLETE_TIMEOUT_S",
    "ENV_BRIDGE_REQUEST_TIMEOUT_S",
]
