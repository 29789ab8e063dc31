"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    token: str


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    host: str
    port: int
    handshake_timeout_s: float
    ping_interval_s: float
    ping_timeout_s: float
    max_message_bytes: int


@dataclass(frozen=True, slots=True)
class HttpSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class TimeoutSettings:
    request_timeout_s: float
    chunk_timeout_s: float
    complete_timeout_s: float


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_pending_calls: int
    chunk_size_bytes: int
    max_upload_bytes: int
    max_chunk_sessions: int
    chunk_session_ttl_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    websocket: WebSocketSettings
    timeouts: TimeoutSettings
    limits: LimitsSettings
    http: HttpSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "HttpSettings",
    "LimitsSettings",
    "TimeoutSettings",
    "WebSocketSettings",
]
