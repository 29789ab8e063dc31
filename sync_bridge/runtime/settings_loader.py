"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from sync_bridge.config.secrets import get_bridge_token
from sync_bridge.state.settings import (
    AppSettings,
    AuthSettings,
    HttpSettings,
    LimitsSettings,
    TimeoutSettings,
    WebSocketSettings,
)
from sync_bridge.config.rpc import (
    ENV_BRIDGE_CHUNK_TIMEOUT_S,
    ENV_BRIDGE_REQUEST_TIMEOUT_S,
    DEFAULT_BRIDGE_CHUNK_TIMEOUT_S,
    ENV_BRIDGE_COMPLETE_TIMEOUT_S,
    DEFAULT_BRIDGE_REQUEST_TIMEOUT_S,
    DEFAULT_BRIDGE_COMPLETE_TIMEOUT_S,
)
from sync_bridge.config.websocket import (
    DEFAULT_WS_HOST,
    DEFAULT_WS_PORT,
    ENV_SYNC_WS_HOST,
    ENV_SYNC_WS_PORT,
    ENV_WS_PING_TIMEOUT_S,
    ENV_WS_PING_INTERVAL_S,
    ENV_WS_MAX_MESSAGE_BYTES,
    DEFAULT_WS_PING_TIMEOUT_S,
    ENV_WS_HANDSHAKE_TIMEOUT_S,
    DEFAULT_WS_PING_INTERVAL_S,
    DEFAULT_WS_MAX_MESSAGE_BYTES,
    DEFAULT_WS_HANDSHAKE_TIMEOUT_S,
)
from sync_bridge.config.http import (
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    ENV_SYNC_HTTP_HOST,
    ENV_SYNC_HTTP_PORT,
)
from sync_bridge.config.limits import (
    ENV_MAX_UPLOAD_BYTES,
    ENV_MAX_CHUNK_SESSIONS,
    ENV_CHUNK_SESSION_TTL_S,
    DEFAULT_MAX_UPLOAD_BYTES,
    CHUNK_FRAME_OVERHEAD_BYTES,
    DEFAULT_MAX_CHUNK_SESSIONS,
    ENV_UPLOAD_CHUNK_SIZE_BYTES,
    DEFAULT_CHUNK_SESSION_TTL_S,
    ENV_BRIDGE_MAX_PENDING_CALLS,
    DEFAULT_UPLOAD_CHUNK_SIZE_BYTES,
    DEFAULT_BRIDGE_MAX_PENDING_CALLS,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


def encoded_chunk_bytes(chunk_size: int) -> int:
    """Length of the base64 text for `chunk_size` raw bytes."""
    return 4 * ((chunk_size + 2) // 3)


def validate_chunk_size(chunk_size: int, max_message_bytes: int) -> int:
    if chunk_size <= 0:
        raise ValueError(f"{ENV_UPLOAD_CHUNK_SIZE_BYTES} must be positive")
    framed = encoded_chunk_bytes(chunk_size) + CHUNK_FRAME_OVERHEAD_BYTES
    if framed > max_message_bytes:
        raise ValueError(
            f"{ENV_UPLOAD_CHUNK_SIZE_BYTES}={chunk_size} encodes to {framed} bytes per frame, above"
            f" {ENV_WS_MAX_MESSAGE_BYTES}={max_message_bytes}"
        )
    return chunk_size


def _load_auth_settings() -> AuthSettings:
    token = get_bridge_token()
    return AuthSettings(token=token)


def _load_websocket_settings() -> WebSocketSettings:
    port = _int_env(ENV_SYNC_WS_PORT, DEFAULT_WS_PORT)
    if port < 0 or port > 65535:
        port = DEFAULT_WS_PORT
    return WebSocketSettings(
        host=_str_env(ENV_SYNC_WS_HOST, DEFAULT_WS_HOST),
        port=port,
        handshake_timeout_s=_positive(
            _float_env(ENV_WS_HANDSHAKE_TIMEOUT_S, DEFAULT_WS_HANDSHAKE_TIMEOUT_S),
            DEFAULT_WS_HANDSHAKE_TIMEOUT_S,
        ),
        ping_interval_s=_float_env(ENV_WS_PING_INTERVAL_S, DEFAULT_WS_PING_INTERVAL_S),
        ping_timeout_s=_float_env(ENV_WS_PING_TIMEOUT_S, DEFAULT_WS_PING_TIMEOUT_S),
        max_message_bytes=max(1, _int_env(ENV_WS_MAX_MESSAGE_BYTES, DEFAULT_WS_MAX_MESSAGE_BYTES)),
    )


def _load_http_settings() -> HttpSettings:
    port = _int_env(ENV_SYNC_HTTP_PORT, DEFAULT_HTTP_PORT)
    if port < 0 or port > 65535:
        port = DEFAULT_HTTP_PORT
    return HttpSettings(host=_str_env(ENV_SYNC_HTTP_HOST, DEFAULT_HTTP_HOST), port=port)


def _load_timeout_settings() -> TimeoutSettings:
    return TimeoutSettings(
        request_timeout_s=_positive(
            _float_env(ENV_BRIDGE_REQUEST_TIMEOUT_S, DEFAULT_BRIDGE_REQUEST_TIMEOUT_S),
            DEFAULT_BRIDGE_REQUEST_TIMEOUT_S,
        ),
        chunk_timeout_s=_positive(
            _float_env(ENV_BRIDGE_CHUNK_TIMEOUT_S, DEFAULT_BRIDGE_CHUNK_TIMEOUT_S),
            DEFAULT_BRIDGE_CHUNK_TIMEOUT_S,
        ),
        complete_timeout_s=_positive(
            _float_env(ENV_BRIDGE_COMPLETE_TIMEOUT_S, DEFAULT_BRIDGE_COMPLETE_TIMEOUT_S),
            DEFAULT_BRIDGE_COMPLETE_TIMEOUT_S,
        ),
    )


def _load_limits_settings(max_message_bytes: int) -> LimitsSettings:
    chunk_size = _int_env(ENV_UPLOAD_CHUNK_SIZE_BYTES, DEFAULT_UPLOAD_CHUNK_SIZE_BYTES)
    return LimitsSettings(
        max_pending_calls=max(1, _int_env(ENV_BRIDGE_MAX_PENDING_CALLS, DEFAULT_BRIDGE_MAX_PENDING_CALLS)),
        chunk_size_bytes=validate_chunk_size(chunk_size, max_message_bytes),
        max_upload_bytes=max(1, _int_env(ENV_MAX_UPLOAD_BYTES, DEFAULT_MAX_UPLOAD_BYTES)),
        max_chunk_sessions=max(1, _int_env(ENV_MAX_CHUNK_SESSIONS, DEFAULT_MAX_CHUNK_SESSIONS)),
        chunk_session_ttl_s=_positive(
            _float_env(ENV_CHUNK_SESSION_TTL_S, DEFAULT_CHUNK_SESSION_TTL_S),
            DEFAULT_CHUNK_SESSION_TTL_S,
        ),
    )


def load_settings() -> AppSettings:
    websocket = _load_websocket_settings()
    return AppSettings(
        auth=_load_auth_settings(),
        websocket=websocket,
        timeouts=_load_timeout_settings(),
        limits=_load_limits_settings(websocket.max_message_bytes),
        http=_load_http_settings(),
    )


__all__ = ["encoded_chunk_bytes", "load_settings", "validate_chunk_size"]
