"""Bridge between an automation client and a browser extension holding live sessions."""

from .errors import (
    BindError,
    Timeout,
    AuthFailed,
    Overloaded,
    BridgeError,
    RemoteError,
    UnknownTool,
    NotConnected,
    ConnectionLost,
    ChunkSequenceError,
)
from .rpc.facade import ExtensionBridge

__all__ = [
    "AuthFailed",
    "BindError",
    "BridgeError",
    "ChunkSequenceError",
    "ConnectionLost",
    "ExtensionBridge",
    "NotConnected",
    "Overloaded",
    "RemoteError",
    "Timeout",
    "UnknownTool",
]
