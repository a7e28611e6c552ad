from __future__ import annotations

from media_bridge.core.dto.author import AuthorDTO
from media_bridge.core.dto.raw import RawMediaRecord


def resolve_author(record: RawMediaRecord) -> AuthorDTO:
    """Author from the embedded sub-resource; empty fields when not embedded."""
    author = record.embedded_author
    if author is None:
        return AuthorDTO()
    return AuthorDTO(name=author.name, url=author.link)


def resolve_featured_media_url(record: RawMediaRecord) -> str:
    """Source URL of the first embedded featured media, or an empty string."""
    if not record.featured_media:
        return ""
    return record.featured_media[0].source_url
