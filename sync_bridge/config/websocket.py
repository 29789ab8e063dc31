"""WebSocket channel configuration and protocol constants."""

from __future__ import annotations

# Frame keys
FRAME_KEY_ID = "id"
FRAME_KEY_METHOD = "method"
FRAME_KEY_PARAMS = "params"
FRAME_KEY_OK = "ok"
FRAME_KEY_RESULT = "result"
FRAME_KEY_ERROR = "error"
FRAME_KEY_TOKEN = "token"
FRAME_KEY_CLIENT = "client"
FRAME_KEY_TYPE = "type"
FRAME_KEY_AUTHENTICATED = "authenticated"
FRAME_KEY_CONNECTION_ID = "connectionId"

# Control frame types
FRAME_TYPE_PING = "ping"
FRAME_TYPE_PONG = "pong"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_GOING_AWAY_CODE = 1001
WS_CLOSE_UNAUTHORIZED_CODE = 4001
WS_CLOSE_REPLACED_CODE = 4003

WS_CLOSE_UNAUTHORIZED_REASON = "authentication failed"
WS_CLOSE_REPLACED_REASON = "replaced by a newer connection"
WS_CLOSE_SHUTDOWN_REASON = "bridge shutting down"

# Errors (rejection frame values)
WS_ERROR_AUTH_FAILED = "authentication_failed"
WS_ERROR_HANDSHAKE_TIMEOUT = "handshake_timeout"
WS_ERROR_INVALID_HANDSHAKE = "invalid_handshake"

# Env names
ENV_SYNC_WS_HOST = "SYNC_WS_HOST"
ENV_SYNC_WS_PORT = "SYNC_WS_PORT"
ENV_WS_HANDSHAKE_TIMEOUT_S = "WS_HANDSHAKE_TIMEOUT_S"
ENV_WS_PING_INTERVAL_S = "WS_PING_INTERVAL_S"
ENV_WS_PING_TIMEOUT_S = "WS_PING_TIMEOUT_S"
ENV_WS_MAX_MESSAGE_BYTES = "WS_MAX_MESSAGE_BYTES"

# Defaults. The extension socket has its own port, apart from SYNC_HTTP_PORT.
DEFAULT_WS_HOST = "127.0.0.1"
DEFAULT_WS_PORT = 9527
DEFAULT_WS_HANDSHAKE_TIMEOUT_S = 5.0
DEFAULT_WS_PING_INTERVAL_S = 20.0
DEFAULT_WS_PING_TIMEOUT_S = 20.0
DEFAULT_WS_MAX_MESSAGE_BYTES = 1024 * 1024

__all__ = [
    "DEFAULT_WS_HANDSHAKE_TIMEOUT_S",
    "DEFAULT_WS_HOST",
    "DEFAULT_WS_MAX_MESSAGE_BYTES",
    "DEFAULT_WS_PING_INTERVAL_S",
    "DEFAULT_WS_PING_TIMEOUT_S",
    "DEFAULT_WS_PORT",
    "ENV_SYNC_WS_HOST",
    "ENV_SYNC_WS_PORT",
    "ENV_WS_HANDSHAKE_TIMEOUT_S",
    "ENV_WS_MAX_MESSAGE_BYTES",
    "ENV_WS_PING_INTERVAL_S",
    "ENV_WS_PING_TIMEOUT_S",
    "FRAME_KEY_AUTHENTICATED",
    "FRAME_KEY_CLIENT",
    "FRAME_KEY_CONNECTION_ID",
    "FRAME_KEY_ERROR",
    "FRAME_KEY_ID",
    "FRAME_KEY_METHOD",
    "FRAME_KEY_OK",
    "FRAME_KEY_PARAMS",
    "FRAME_KEY_RESULT",
    "FRAME_KEY_TOKEN",
    "FRAME_KEY_TYPE",
    "FRAME_TYPE_PING",
    "FRAME_TYPE_PONG",
    "WS_CLOSE_GOING_AWAY_CODE",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_REPLACED_CODE",
    "WS_CLOSE_REPLACED_REASON",
    "WS_CLOSE_SHUTDOWN_REASON",
    "WS_CLOSE_UNAUTHORIZED_CODE",
    "WS_CLOSE_UNAUTHORIZED_REASON",
    "WS_ERROR_AUTH_FAILED",
    "WS_ERROR_HANDSHAKE_TIMEOUT",
    "WS_ERROR_INVALID_HANDSHAKE",
]
