"""In-flight call bookkeeping (dataclasses only)."""

from __future__ import annotations

import asyncio
from typing import Any
from dataclasses import dataclass


@dataclass(slots=True)
class PendingCall:
    call_id: str
    method: str
    params: dict[str, Any]
    created_at: float
    deadline: float
    future: asyncio.Future
    timer: asyncio.TimerHandle | None = None


__all__ = ["PendingCall"]
