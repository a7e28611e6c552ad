"""
Host query args -> remote media query.

The host speaks WP_Query vocabulary (``paged``, ``posts_per_page``, ``s``,
``orderby``, ``order``, ``post_mime_type``); the remote REST API speaks its
own (``page``, ``per_page``, ``search``, ``orderby``, ``order``,
``media_type``, ``mime_type``).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from media_bridge.core.dto.query import QuerySpec
from media_bridge.core.errors import UnsupportedFilterError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 40
RELEVANCE_ORDER_BY = "relevance"
ORDER_DIRECTIONS = ("asc", "desc")
MEDIA_TYPES = ("image", "video", "audio", "application")

# WP_Query orderby -> REST orderby
ORDER_BY_MAP = {
    "date": "date",
    "modified": "modified",
    "title": "title",
    "id": "id",
    "author": "author",
    "name": "slug",
    "slug": "slug",
    "parent": "parent",
    "post__in": "include",
    "include": "include",
    "relevance": "relevance",
}


def translate_query(
    host_args: Optional[Mapping[str, Any]],
    *,
    strict_mime: bool = False,
    default_per_page: int = DEFAULT_PER_PAGE,
) -> QuerySpec:
    """
    Translate host-library query args into a ``QuerySpec``.

    Free-text search always sorts by relevance, whatever ``orderby`` says.
    A MIME filter spanning several media types cannot be expressed remotely:
    it is dropped (all types returned) or, with ``strict_mime``, rejected with
    ``UnsupportedFilterError``.
    """
    args = host_args or {}

    page = _positive_int(args.get("paged"), DEFAULT_PAGE)
    per_page = _positive_int(args.get("posts_per_page"), default_per_page)
    order = _order(args.get("order"))
    order_by = _order_by(args.get("orderby"))

    search = args.get("s")
    search = search.strip() if isinstance(search, str) else None
    if search:
        order_by = RELEVANCE_ORDER_BY
    else:
        search = None

    media_type, mime_type = _mime_filter(args.get("post_mime_type"), strict=strict_mime)

    return QuerySpec(
        page=page,
        per_page=per_page,
        order=order,
        order_by=order_by,
        search=search,
        media_type=media_type,
        mime_type=mime_type,
        embed=True,
    )


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


def _order(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    direction = value.strip().lower()
    return direction if direction in ORDER_DIRECTIONS else None


def _order_by(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    mapped = ORDER_BY_MAP.get(value.strip().lower())
    if mapped is None:
        logger.debug(f"Dropping unsupported orderby: {value!r}")
    return mapped


def _mime_values(raw: Any) -> List[str]:
    if isinstance(raw, str):
        parts: Iterable[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple, set, frozenset)):
        parts = raw
    else:
        return []
    values = [p.strip().lower() for p in parts if isinstance(p, str) and p.strip()]
    return list(dict.fromkeys(values))


def _mime_filter(raw: Any, *, strict: bool) -> Tuple[Optional[str], Optional[str]]:
    values = _mime_values(raw)
    if not values:
        return None, None

    if len(values) == 1:
        value = values[0]
        primary, _, subtype = value.partition("/")
        media_type = primary if primary in MEDIA_TYPES else None
        mime_type = value if subtype and subtype != "*" else None
        return media_type, mime_type

    primaries = {v.partition("/")[0] for v in values}
    if len(primaries) == 1:
        primary = primaries.pop()
        if primary in MEDIA_TYPES:
            return primary, None

    if strict:
        raise UnsupportedFilterError(
            f"MIME filter {values} spans several media types; the remote API accepts one"
        )
    logger.warning(f"Ignoring ambiguous MIME filter {values}; querying all media types")
    return None, None
