"""Shared test helpers.

- fake_socket.py: in-memory stand-in for a peer WebSocket connection
- settings.py: AppSettings builders with test-friendly timeouts
- stub_bridge.py: recording bridge for the tool layer
"""

from __future__ import annotations

from .settings import make_settings
from .stub_bridge import StubBridge
from .fake_socket import FakePeerSocket, connect_peer

__all__ = ["FakePeerSocket", "StubBridge", "connect_peer", "make_settings"]
