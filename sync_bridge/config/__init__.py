"""Configuration module exports (env names, defaults and protocol constants only)."""

from .websocket import DEFAULT_WS_PORT
from .rpc import CHUNK_METHOD, COMPLETE_METHOD

__all__ = [
    "CHUNK_METHOD",
    "COMPLETE_METHOD",
    "DEFAULT_WS_PORT",
]
