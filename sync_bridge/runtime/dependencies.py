"""Runtime dependency construction (extension bridge + tool dispatch)."""

from __future__ import annotations

import logging

from sync_bridge.state import RuntimeDeps
from sync_bridge.state.settings import AppSettings
from sync_bridge.rpc.facade import ExtensionBridge
from sync_bridge.tools.dispatch import ToolDispatcher

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    if not settings.auth.token:
        logger.warning("no bridge token configured; every extension handshake will be rejected")

    bridge = ExtensionBridge(settings)
    port = await bridge.start(settings.websocket.port)
    logger.info("extension bridge listening on ws://%s:%s", settings.websocket.host, port)

    return RuntimeDeps(
        bridge=bridge,
        dispatcher=ToolDispatcher(bridge),
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
