from dataclasses import dataclass
from typing import Tuple

from .media import MediaItem


@dataclass(frozen=True)
class MediaPageDTO:
    items: Tuple[MediaItem, ...]

    # X-WP-Total / X-WP-TotalPages, 0 when the header is missing
    total: int
    total_pages: int

    page: int
    per_page: int
