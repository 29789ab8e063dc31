"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from sync_bridge.state.settings import AppSettings
    from sync_bridge.rpc.facade import ExtensionBridge
    from sync_bridge.tools.dispatch import ToolDispatcher


@dataclass(slots=True)
class RuntimeDeps:
    bridge: ExtensionBridge
    dispatcher: ToolDispatcher
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.bridge.stop()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
