"""Extension methods the tool layer may call, with typed params."""

from __future__ import annotations

from enum import Enum
from typing import Any
from pathlib import Path
from dataclasses import dataclass

DEFAULT_IMAGE_PLATFORM = "weibo"
DEFAULT_IMAGE_MIME_TYPE = "image/png"

IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}


class BridgeMethod(str, Enum):
    LIST_PLATFORMS = "listPlatforms"
    CHECK_AUTH = "checkAuth"
    SYNC_ARTICLE = "syncArticle"
    EXTRACT_ARTICLE = "extractArticle"


def _optional_bool(arguments: dict[str, Any], key: str) -> bool | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


def _required_str(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{key}' is required and must be a non-empty string")
    return value.strip()


def _optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def mime_type_for(path: Path) -> str:
    return IMAGE_MIME_TYPES.get(path.suffix.lower(), DEFAULT_IMAGE_MIME_TYPE)


@dataclass(frozen=True, slots=True)
class ListPlatformsParams:
    force_refresh: bool | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> ListPlatformsParams:
        return cls(force_refresh=_optional_bool(arguments, "forceRefresh"))

    def to_params(self) -> dict[str, Any]:
        if self.force_refresh is None:
            return {}
        return {"forceRefresh": self.force_refresh}


@dataclass(frozen=True, slots=True)
class CheckAuthParams:
    platform: str

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> CheckAuthParams:
        return cls(platform=_required_str(arguments, "platform"))

    def to_params(self) -> dict[str, Any]:
        return {"platform": self.platform}


@dataclass(frozen=True, slots=True)
class Article:
    title: str
    markdown: str
    content: str | None = None
    cover: str | None = None

    def to_params(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "markdown": self.markdown}
        if self.content is not None:
            data["content"] = self.content
        if self.cover is not None:
            data["cover"] = self.cover
        return data


@dataclass(frozen=True, slots=True)
class SyncArticleParams:
    platforms: tuple[str, ...]
    article: Article

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> SyncArticleParams:
        platforms = arguments.get("platforms")
        if not isinstance(platforms, list) or not platforms:
            raise ValueError("'platforms' is required and must be a non-empty list of platform ids")
        if not all(isinstance(p, str) and p.strip() for p in platforms):
            raise ValueError("'platforms' must only contain non-empty strings")
        article = Article(
            title=_required_str(arguments, "title"),
            markdown=_required_str(arguments, "markdown"),
            content=_optional_str(arguments, "content"),
            cover=_optional_str(arguments, "cover"),
        )
        return cls(platforms=tuple(p.strip() for p in platforms), article=article)

    def to_params(self) -> dict[str, Any]:
        return {"platforms": list(self.platforms), "article": self.article.to_params()}


@dataclass(frozen=True, slots=True)
class UploadImageFileParams:
    file_path: Path
    platform: str = DEFAULT_IMAGE_PLATFORM

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> UploadImageFileParams:
        platform = _optional_str(arguments, "platform")
        return cls(
            file_path=Path(_required_str(arguments, "filePath")).expanduser(),
            platform=(platform or "").strip() or DEFAULT_IMAGE_PLATFORM,
        )

    @property
    def mime_type(self) -> str:
        return mime_type_for(self.file_path)


__all__ = [
    "Article",
    "BridgeMethod",
    "CheckAuthParams",
    "DEFAULT_IMAGE_MIME_TYPE",
    "DEFAULT_IMAGE_PLATFORM",
    "IMAGE_MIME_TYPES",
    "ListPlatformsParams",
    "SyncArticleParams",
    "UploadImageFileParams",
    "mime_type_for",
]
