"""Map tool calls onto typed extension methods."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections.abc import Callable, Awaitable

from sync_bridge.errors import UnknownTool, NotConnected
from sync_bridge.rpc.facade import NOT_CONNECTED_MESSAGE, ExtensionBridge

from .methods import (
    BridgeMethod,
    CheckAuthParams,
    SyncArticleParams,
    ListPlatformsParams,
    UploadImageFileParams,
)
from .catalog import (
    TOOL_CHECK_AUTH,
    TOOL_SYNC_ARTICLE,
    TOOL_LIST_PLATFORMS,
    TOOL_EXTRACT_ARTICLE,
    TOOL_UPLOAD_IMAGE_FILE,
)

logger = logging.getLogger(__name__)

ToolFn = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolDispatcher:
    def __init__(self, bridge: ExtensionBridge) -> None:
        self._bridge = bridge
        self._tools: dict[str, ToolFn] = {
            TOOL_LIST_PLATFORMS: self._list_platforms,
            TOOL_CHECK_AUTH: self._check_auth,
            TOOL_SYNC_ARTICLE: self._sync_article,
            TOOL_EXTRACT_ARTICLE: self._extract_article,
            TOOL_UPLOAD_IMAGE_FILE: self._upload_image_file,
        }

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownTool(name)
        if not self._bridge.is_connected():
            raise NotConnected(NOT_CONNECTED_MESSAGE)
        logger.info("tool call: %s", name)
        return await tool(arguments or {})

    async def _list_platforms(self, arguments: dict[str, Any]) -> Any:
        params = ListPlatformsParams.from_arguments(arguments)
        return await self._bridge.request(BridgeMethod.LIST_PLATFORMS.value, params.to_params())

    async def _check_auth(self, arguments: dict[str, Any]) -> Any:
        params = CheckAuthParams.from_arguments(arguments)
        return await self._bridge.request(BridgeMethod.CHECK_AUTH.value, params.to_params())

    async def _sync_article(self, arguments: dict[str, Any]) -> Any:
        params = SyncArticleParams.from_arguments(arguments)
        return await self._bridge.request(BridgeMethod.SYNC_ARTICLE.value, params.to_params())

    async def _extract_article(self, _arguments: dict[str, Any]) -> Any:
        return await self._bridge.request(BridgeMethod.EXTRACT_ARTICLE.value, {})

    async def _upload_image_file(self, arguments: dict[str, Any]) -> Any:
        params = UploadImageFileParams.from_arguments(arguments)
        if not params.file_path.is_file():
            raise FileNotFoundError(f"File not found: {params.file_path}")
        payload = await asyncio.to_thread(params.file_path.read_bytes)
        return await self._bridge.upload_chunked(payload, params.mime_type, params.platform)


__all__ = ["ToolDispatcher"]
