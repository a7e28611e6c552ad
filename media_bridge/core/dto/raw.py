"""
Tolerant schema for media records returned by the WordPress REST API.

Historical response shapes differ (embedded vs. linked author, presence of
the ``_embedded`` block, free-form ``meta`` sent as ``[]`` when empty), so
every field except ``id`` and ``mime_type`` defaults instead of failing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from media_bridge.core.errors import DecodeError

EMBED_AUTHOR = "author"
EMBED_FEATURED_MEDIA = "wp:featuredmedia"


def _as_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return str(value) if math.isfinite(value) else ""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        # NaN, Infinity and overflowing strings like "1e400" (parsed as inf)
        return int(value) if math.isfinite(value) else 0
    return 0


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _rendered(value: Any) -> str:
    """Unwrap a ``{"rendered": ...}`` text wrapper; bare strings pass through."""
    if isinstance(value, Mapping):
        return _as_str(value.get("rendered"))
    return _as_str(value)


def _first_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, Mapping):
                return item
    return None


@dataclass(frozen=True)
class RawSize:
    width: int
    height: int
    source_url: str

    @classmethod
    def from_json(cls, raw: Any) -> Optional["RawSize"]:
        if not isinstance(raw, Mapping):
            return None
        return cls(
            width=_as_int(raw.get("width")),
            height=_as_int(raw.get("height")),
            source_url=_as_str(raw.get("source_url") or raw.get("url")),
        )


@dataclass(frozen=True)
class RawMediaDetails:
    width: int = 0
    height: int = 0
    sizes: Dict[str, RawSize] = field(default_factory=dict)
    length_formatted: str = ""
    album: str = ""
    artist: str = ""
    # The block exactly as received.
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Any) -> "RawMediaDetails":
        block = _as_dict(raw)
        sizes: Dict[str, RawSize] = {}
        for name, size_raw in _as_dict(block.get("sizes")).items():
            size = RawSize.from_json(size_raw)
            if size is not None:
                sizes[str(name)] = size
        return cls(
            width=_as_int(block.get("width")),
            height=_as_int(block.get("height")),
            sizes=sizes,
            length_formatted=_as_str(block.get("length_formatted")),
            album=_as_str(block.get("album")),
            artist=_as_str(block.get("artist")),
            raw=block,
        )


@dataclass(frozen=True)
class RawAuthor:
    name: str
    link: str


@dataclass(frozen=True)
class RawFeaturedMedia:
    source_url: str


@dataclass(frozen=True)
class RawMediaRecord:
    id: str
    mime_type: str
    source_url: str = ""
    link: str = ""
    title: str = ""
    caption: str = ""
    alt_text: str = ""
    date: str = ""
    modified: str = ""
    author_id: str = ""
    embedded_author: Optional[RawAuthor] = None
    featured_media: Optional[Tuple[RawFeaturedMedia, ...]] = None
    media_details: RawMediaDetails = field(default_factory=RawMediaDetails)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def primary_type(self) -> str:
        return self.mime_type.split("/", 1)[0].strip().lower()

    @classmethod
    def from_json(cls, payload: Any) -> "RawMediaRecord":
        if not isinstance(payload, Mapping):
            raise DecodeError(f"media record must be an object, got {type(payload).__name__}")

        raw_id = payload.get("id")
        media_id = _as_str(raw_id).strip()
        if not media_id:
            raise DecodeError(f"media record has no usable id: {raw_id!r}")

        mime_type = _as_str(payload.get("mime_type")).strip()
        primary, sep, _ = mime_type.partition("/")
        if not sep or not primary.strip():
            raise DecodeError(f"media record {media_id} has no usable MIME type: {mime_type!r}")

        embedded = _as_dict(payload.get("_embedded"))

        return cls(
            id=media_id,
            mime_type=mime_type,
            source_url=_as_str(payload.get("source_url")),
            link=_as_str(payload.get("link")),
            title=_rendered(payload.get("title")),
            caption=_rendered(payload.get("caption")),
            alt_text=_as_str(payload.get("alt_text")),
            date=_as_str(payload.get("date")),
            modified=_as_str(payload.get("modified")),
            author_id=_as_str(payload.get("author")),
            embedded_author=cls._author_from(payload, embedded),
            featured_media=cls._featured_media_from(embedded),
            media_details=RawMediaDetails.from_json(payload.get("media_details")),
            meta=_as_dict(payload.get("meta")),
        )

    @staticmethod
    def _author_from(payload: Mapping[str, Any], embedded: Mapping[str, Any]) -> Optional[RawAuthor]:
        # Newer responses embed the author under _embedded; older ones inline it.
        author = _first_mapping(embedded.get(EMBED_AUTHOR))
        if author is None:
            author = _first_mapping(payload.get("author"))
        if author is None:
            return None
        return RawAuthor(
            name=_as_str(author.get("name")),
            link=_as_str(author.get("link") or author.get("url")),
        )

    @staticmethod
    def _featured_media_from(embedded: Mapping[str, Any]) -> Optional[Tuple[RawFeaturedMedia, ...]]:
        items = embedded.get(EMBED_FEATURED_MEDIA)
        if not isinstance(items, (list, tuple)):
            return None
        return tuple(
            RawFeaturedMedia(source_url=_as_str(item.get("source_url")))
            for item in items
            if isinstance(item, Mapping)
        )
