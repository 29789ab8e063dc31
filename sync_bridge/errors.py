"""Shared error types for the extension bridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for every error raised by the bridge."""


class BindError(BridgeError):
    """Raised when the listening socket cannot be bound."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(f"cannot listen on {host}:{port}: {reason}")
        self.host = host
        self.port = port


class AuthFailed(BridgeError):
    """Raised internally when a peer handshake is rejected."""

    def __init__(self, message: str, *, code: str = "authentication_failed") -> None:
        super().__init__(message)
        self.code = code


class NotConnected(BridgeError, ConnectionError):
    """Raised when a call is attempted without an authenticated peer."""


class Timeout(BridgeError, TimeoutError):
    """Raised when a call gets no result before its deadline."""

    def __init__(self, call_id: str, method: str, timeout_s: float) -> None:
        super().__init__(f"call {call_id} ({method}) timed out after {timeout_s:g}s")
        self.call_id = call_id
        self.method = method
        self.timeout_s = timeout_s


class ConnectionLost(BridgeError, ConnectionError):
    """Raised for every call still outstanding when the peer goes away."""


class RemoteError(BridgeError):
    """The peer reported a failure; the message is passed through verbatim."""

    def __init__(self, message: str, *, call_id: str | None = None, method: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.call_id = call_id
        self.method = method


class ChunkSequenceError(BridgeError):
    """Raised for out-of-order, duplicate, unknown or aborted chunks."""

    def __init__(self, message: str, *, session_id: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.session_id = session_id
        self.index = index


class Overloaded(BridgeError):
    """Raised when the pending call table is full."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"too many outstanding calls (limit {limit})")
        self.limit = limit


class UnknownTool(BridgeError):
    """Raised by the tool dispatcher for names outside the tool catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolCallFailed(BridgeError):
    """A tool call failed; the message is the error payload returned to the agent."""

    def __init__(self, tool: str, payload: str) -> None:
        super().__init__(payload)
        self.tool = tool


__all__ = [
    "AuthFailed",
    "BindError",
    "BridgeError",
    "ChunkSequenceError",
    "ConnectionLost",
    "NotConnected",
    "Overloaded",
    "RemoteError",
    "Timeout",
    "ToolCallFailed",
    "UnknownTool",
]
