"""
Raw REST API media records -> typed media items.

The variant is chosen from the MIME primary type only. The API's own
``media_type`` field reports every non-image as ``file`` and would lose the
video / audio / document distinction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence
from urllib.parse import urlparse

from media_bridge.core.attribution import resolve_author, resolve_featured_media_url
from media_bridge.core.dto.media import ITEM_CLASSES, MediaItem, MediaKind
from media_bridge.core.dto.raw import RawMediaRecord
from media_bridge.core.dto.size import DEFAULT_SIZE_NAMES, DEFAULT_SIZE_PRESETS, SizePreset
from media_bridge.core.errors import DecodeError
from media_bridge.core.file_size_probe import FileSizeProbe
from media_bridge.core.sizes import resolve_sizes

logger = logging.getLogger(__name__)

KIND_BY_PRIMARY_TYPE: Dict[str, MediaKind] = {
    "image": "image",
    "icon": "image",
    "video": "video",
    "audio": "audio",
    "application": "document",
}

MEDIA_DETAILS_META_KEY = "media_details"
# Already represented by typed fields (sizes, width, height, filename).
STRIPPED_DETAIL_KEYS = frozenset({"file", "width", "height", "sizes"})


def classify_mime(mime_type: str) -> MediaKind:
    primary = mime_type.split("/", 1)[0].strip().lower()
    return KIND_BY_PRIMARY_TYPE.get(primary, "generic")


def parse_timestamp(value: str) -> Optional[int]:
    """ISO-8601 timestamp -> epoch seconds; naive values are UTC. None if unparsable."""
    text = (value or "").strip()
    if not text:
        return None
    if text[-1] in "Zz":
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def filename_from_url(url: str) -> str:
    if not url:
        return ""
    return urlparse(url).path.rsplit("/", 1)[-1]


class MediaItemFactory:
    """
    Builds one immutable media item per raw record.

    Mapping is pure apart from the file-size probe; no state is shared
    between records.
    """

    def __init__(
        self,
        *,
        probe: Optional[FileSizeProbe] = None,
        size_presets: Mapping[str, SizePreset] = DEFAULT_SIZE_PRESETS,
        size_names: Sequence[str] = DEFAULT_SIZE_NAMES,
    ):
        self._probe = probe or FileSizeProbe()
        self._size_presets = size_presets
        self._size_names = tuple(size_names)
        self._variant_builders: Dict[MediaKind, Callable[[RawMediaRecord], Dict[str, Any]]] = {
            "image": self._image_fields,
            "video": self._video_fields,
            "audio": self._audio_fields,
            "document": self._no_fields,
            "generic": self._no_fields,
        }

    # ---------------------------------------------------------
    # Public
    # ---------------------------------------------------------

    @staticmethod
    def decode(data: Any) -> RawMediaRecord:
        if isinstance(data, RawMediaRecord):
            return data
        return RawMediaRecord.from_json(data)

    def create(self, data: Any, *, file_size: Optional[int] = None) -> MediaItem:
        """
        Build a media item from a raw record.

        Raises DecodeError when the record has no id or MIME type. When
        ``file_size`` is not given the asset URL is probed (blocking).
        """
        record = self.decode(data)
        if file_size is None:
            file_size = self._probe.probe(record.source_url)
        return self._build(record, file_size)

    async def create_many(self, items: Iterable[Any]) -> List[MediaItem]:
        """
        Build items for a page of records, probing file sizes concurrently.

        Records without id or MIME type are skipped. Output keeps input order.
        """
        records: List[RawMediaRecord] = []
        for raw in items:
            try:
                records.append(self.decode(raw))
            except DecodeError as e:
                logger.warning(f"Skipping media record: {e}")

        sizes = await self._probe.probe_many([r.source_url for r in records])
        return [self._build(record, size) for record, size in zip(records, sizes)]

    # ---------------------------------------------------------
    # Assembly
    # ---------------------------------------------------------

    def _build(self, record: RawMediaRecord, file_size: int) -> MediaItem:
        kind = classify_mime(record.mime_type)
        variant = self._variant_builders[kind](record)
        variant_meta = variant.pop("meta")

        fields = self._common_fields(record, max(0, int(file_size or 0)))
        fields.update(variant)
        fields["meta"] = self._merge_meta(record, variant_meta)

        return ITEM_CLASSES[kind](**fields)

    @staticmethod
    def _common_fields(record: RawMediaRecord, file_size: int) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "id": record.id,
            "mime_type": record.mime_type,
        }
        fields["url"] = record.source_url
        fields["filename"] = filename_from_url(record.source_url)
        fields["link"] = record.link
        fields["title"] = record.title or record.caption
        if record.alt_text:
            fields["alt"] = record.alt_text
        if record.caption:
            fields["caption"] = record.caption
        fields["name"] = record.id
        fields["date"] = parse_timestamp(record.date)
        fields["modified"] = parse_timestamp(record.modified)
        fields["file_size"] = file_size

        author = resolve_author(record)
        if author.name:
            fields["author"] = author
        return fields

    @staticmethod
    def _merge_meta(record: RawMediaRecord, variant_meta: Dict[str, Any]) -> Dict[str, Any]:
        # Upstream meta fills gaps only; computed keys win.
        meta = {k: v for k, v in record.meta.items() if k not in variant_meta}
        meta.update(variant_meta)

        details = {
            k: v for k, v in record.media_details.raw.items()
            if k not in STRIPPED_DETAIL_KEYS
        }
        if details:
            meta[MEDIA_DETAILS_META_KEY] = details
        return meta

    # ---------------------------------------------------------
    # Variants
    # ---------------------------------------------------------

    def _image_fields(self, record: RawMediaRecord) -> Dict[str, Any]:
        details = record.media_details
        return {
            "width": details.width,
            "height": details.height,
            "sizes": resolve_sizes(record, self._size_presets, self._size_names),
            "meta": {"media_id": record.id},
        }

    def _video_fields(self, record: RawMediaRecord) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"meta": {"media_id": record.id}}
        length = record.media_details.length_formatted
        if length:
            fields["duration"] = length
            fields["meta"]["length_formatted"] = length

        featured_url = resolve_featured_media_url(record)
        if featured_url:
            fields["image"] = featured_url
            fields["thumb"] = featured_url
        return fields

    def _audio_fields(self, record: RawMediaRecord) -> Dict[str, Any]:
        fields = self._video_fields(record)
        details = record.media_details
        if details.album:
            fields["album"] = details.album
            fields["meta"]["album"] = details.album
        if details.artist:
            fields["artist"] = details.artist
            fields["meta"]["artist"] = details.artist
        return fields

    @staticmethod
    def _no_fields(record: RawMediaRecord) -> Dict[str, Any]:
        return {"meta": {"media_id": record.id}}
