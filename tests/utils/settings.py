from __future__ import annotations

from sync_bridge.state.settings import (
    AppSettings,
    AuthSettings,
    HttpSettings,
    LimitsSettings,
    TimeoutSettings,
    WebSocketSettings,
)

TEST_TOKEN = "abc123"


def make_settings(
    *,
    token: str = TEST_TOKEN,
    port: int = 0,
    handshake_timeout_s: float = 1.0,
    request_timeout_s: float = 5.0,
    chunk_timeout_s: float = 5.0,
    complete_timeout_s: float = 5.0,
    chunk_size_bytes: int = 64 * 1024,
    max_pending_calls: int = 256,
    max_upload_bytes: int = 20 * 1024 * 1024,
) -> AppSettings:
    return AppSettings(
        auth=AuthSettings(token=token),
        websocket=WebSocketSettings(
            host="127.0.0.1",
            port=port,
            handshake_timeout_s=handshake_timeout_s,
            ping_interval_s=20.0,
            ping_timeout_s=20.0,
            max_message_bytes=1024 * 1024,
        ),
        timeouts=TimeoutSettings(
            request_timeout_s=request_timeout_s,
            chunk_timeout_s=chunk_timeout_s,
            complete_timeout_s=complete_timeout_s,
        ),
        limits=LimitsSettings(
            max_pending_calls=max_pending_calls,
            chunk_size_bytes=chunk_size_bytes,
            max_upload_bytes=max_upload_bytes,
            max_chunk_sessions=8,
            chunk_session_ttl_s=300.0,
        ),
        http=HttpSettings(host="127.0.0.1", port=0),
    )


__all__ = ["TEST_TOKEN", "make_settings"]
