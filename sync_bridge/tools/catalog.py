"""Tool names, descriptions and input schemas exposed to the automation client."""

from __future__ import annotations

from typing import Any

TOOL_LIST_PLATFORMS = "list_platforms"
TOOL_CHECK_AUTH = "check_auth"
TOOL_SYNC_ARTICLE = "sync_article"
TOOL_EXTRACT_ARTICLE = "extract_article"
TOOL_UPLOAD_IMAGE_FILE = "upload_image_file"

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": TOOL_LIST_PLATFORMS,
        "description": "List every supported platform and its login state.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "forceRefresh": {
                    "type": "boolean",
                    "description": "Re-check login state instead of using the cached value.",
                },
            },
        },
    },
    {
        "name": TOOL_CHECK_AUTH,
        "description": "Check the login state of one platform.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "platform": {"type": "string", "description": "Platform id, e.g. zhihu, juejin, toutiao."},
            },
            "required": ["platform"],
        },
    },
    {
        "name": TOOL_SYNC_ARTICLE,
        "description": (
            "Sync an article to the given platforms as a draft. Markdown is preferred; local images must be "
            "inlined as base64 data URIs or uploaded first with upload_image_file."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "platforms": {"type": "array", "items": {"type": "string"}, "description": "Target platform ids."},
                "title": {"type": "string", "description": "Plain-text title, without a leading '#'."},
                "markdown": {"type": "string", "description": "Article body in Markdown, without the title line."},
                "content": {"type": "string", "description": "Optional HTML body; ignored when markdown is set."},
                "cover": {"type": "string", "description": "Optional cover image URL or data URI."},
            },
            "required": ["platforms", "title", "markdown"],
        },
    },
    {
        "name": TOOL_EXTRACT_ARTICLE,
        "description": "Extract the article on the browser's current page.",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": TOOL_UPLOAD_IMAGE_FILE,
        "description": "Upload a local image file to a platform used as an image host and return its public URL.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "filePath": {"type": "string", "description": "Absolute path of the local image file."},
                "platform": {
                    "type": "string",
                    "description": "Platform used as image host (default weibo): weibo, zhihu, juejin, jianshu, woshipm.",
                },
            },
            "required": ["filePath"],
        },
    },
]

TOOL_NAMES: frozenset[str] = frozenset(tool["name"] for tool in TOOL_DEFINITIONS)

__all__ = [
    "TOOL_CHECK_AUTH",
    "TOOL_DEFINITIONS",
    "TOOL_EXTRACT_ARTICLE",
    "TOOL_LIST_PLATFORMS",
    "TOOL_NAMES",
    "TOOL_SYNC_ARTICLE",
    "TOOL_UPLOAD_IMAGE_FILE",
]
