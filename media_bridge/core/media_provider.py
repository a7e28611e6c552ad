from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from media_bridge.core.api.contracts.media import MediaAPIClient
from media_bridge.core.dto.media import MediaItem
from media_bridge.core.dto.page import MediaPageDTO
from media_bridge.core.dto.upload import UploadFile
from media_bridge.core.errors import APIError, DecodeError, RemoteDecodeError
from media_bridge.core.media_factory import MediaItemFactory
from media_bridge.core.query import DEFAULT_PER_PAGE, translate_query

logger = logging.getLogger(__name__)

FETCH_ERROR_PREFIX = "Could not fetch media"


class MediaProvider:
    """
    Authoritative domain manager for remote media retrieval.

    Guarantees:
    - Translates host query args into the remote vocabulary
    - Returns DTOs only, never partially populated items
    - One file-size probe per item, run concurrently per page
    """

    def __init__(
        self,
        client: MediaAPIClient,
        factory: Optional[MediaItemFactory] = None,
        *,
        strict_mime: bool = False,
        page_timeout: Optional[float] = None,
        default_per_page: int = DEFAULT_PER_PAGE,
    ):
        self._client = client
        self._factory = factory or MediaItemFactory()
        self._strict_mime = strict_mime
        self._page_timeout = page_timeout
        self._default_per_page = default_per_page

    # ---------------------------------------------------------
    # Listing
    # ---------------------------------------------------------

    def list(self, host_args: Optional[Mapping[str, Any]] = None) -> MediaPageDTO:
        """Blocking entry point; must not be called from a running event loop."""
        return asyncio.run(self.alist(host_args))

    async def alist(self, host_args: Optional[Mapping[str, Any]] = None) -> MediaPageDTO:
        query = translate_query(
            host_args,
            strict_mime=self._strict_mime,
            default_per_page=self._default_per_page,
        )

        data = await asyncio.to_thread(self._client.get_media_page, query.to_params())
        records = data.get("records") or []

        mapping = self._factory.create_many(records)
        if self._page_timeout is not None:
            try:
                items = await asyncio.wait_for(mapping, timeout=self._page_timeout)
            except asyncio.TimeoutError as e:
                raise APIError(
                    f"{self._client.PLATFORM} media page mapping exceeded {self._page_timeout}s"
                ) from e
        else:
            items = await mapping

        logger.info(
            f"Media page {query.page}: {len(items)} items "
            f"(total={data.get('total', 0)}, per_page={query.per_page})"
        )
        return MediaPageDTO(
            items=tuple(items),
            total=int(data.get("total") or 0),
            total_pages=int(data.get("total_pages") or 0),
            page=query.page,
            per_page=query.per_page,
        )

    # ---------------------------------------------------------
    # Single item
    # ---------------------------------------------------------

    def get(self, media_id: str) -> MediaItem:
        data = self._client.get_media(str(media_id))
        return self._create_single(data)

    # ---------------------------------------------------------
    # Upload
    # ---------------------------------------------------------

    def upload(self, file: Union[UploadFile, str, Path]) -> MediaItem:
        upload = file if isinstance(file, UploadFile) else UploadFile.from_path(file)
        data = self._client.upload_media(upload)
        return self._create_single(data)

    # ---------------------------------------------------------
    # Internal
    # ---------------------------------------------------------

    def _create_single(self, data: Any) -> MediaItem:
        try:
            return self._factory.create(data)
        except DecodeError as e:
            raise RemoteDecodeError(f"{self._client.PLATFORM} returned an unusable media record: {e}") from e

    @staticmethod
    def describe_error(error: BaseException) -> str:
        """User-visible message for a failed media request."""
        return f"{FETCH_ERROR_PREFIX}: {error}"
