"""The single peer connection owned by the channel endpoint."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass


@dataclass(slots=True)
class Connection:
    socket: Any
    connection_id: str
    remote_address: str
    connected_at: float
    authenticated: bool = False
    client: str | None = None
    # Set once the disconnect event has fired; later drops are no-ops.
    dropped: bool = False


__all__ = ["Connection"]
