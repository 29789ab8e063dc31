"""Secrets and authentication configuration."""

from __future__ import annotations

import os

ENV_SYNC_BRIDGE_TOKEN = "SYNC_BRIDGE_TOKEN"


def get_bridge_token() -> str:
    return (os.getenv(ENV_SYNC_BRIDGE_TOKEN) or "").strip()


__all__ = ["ENV_SYNC_BRIDGE_TOKEN", "get_bridge_token"]
