from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import quote

from media_bridge.core.dto.query import EMBED_RELATIONS
from media_bridge.core.dto.upload import UploadFile
from media_bridge.core.errors import RemoteDecodeError

from .base import BaseAPIClient, header_int


class WordPressClient(BaseAPIClient):
    API_PATH = "/wp-json/wp/v2"
    PLATFORM = "wordpress"
    MEDIA_PATH = "/media"
    _logger = logging.getLogger(__name__)

    # --------------------------------------------------
    # Listing
    # --------------------------------------------------

    def get_media_page(self, params: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._request("GET", self.MEDIA_PATH, params=params, timeout=self.timeout)
        data = self._decode_json(resp)
        if not isinstance(data, list):
            raise RemoteDecodeError(
                f"{self.PLATFORM} media response not a list (got {type(data).__name__})"
            )

        total = header_int(resp.headers, "X-WP-Total")
        total_pages = header_int(resp.headers, "X-WP-TotalPages")
        self._logger.debug(f"Media page: {len(data)} records, total={total}, total_pages={total_pages}")

        return {
            "records": data,
            "total": total,
            "total_pages": total_pages,
        }

    def get_media(self, media_id: str) -> Dict[str, Any]:
        path = f"{self.MEDIA_PATH}/{quote(str(media_id), safe='')}"
        resp = self._request("GET", path, params={"_embed": EMBED_RELATIONS})
        data = self._decode_json(resp)
        if not isinstance(data, dict):
            raise RemoteDecodeError(f"{self.PLATFORM} media response not an object")
        return data

    # --------------------------------------------------
    # Upload
    # --------------------------------------------------

    def upload_media(self, upload: UploadFile) -> Dict[str, Any]:
        filename = upload.filename.replace('"', "")
        headers = {
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Type": upload.mime_type,
        }
        authorization = self._authorization()
        if authorization:
            headers["Authorization"] = authorization

        self._logger.info(f"Uploading {filename} ({len(upload.content)} bytes, {upload.mime_type})")
        resp = self._request(
            "POST",
            self.MEDIA_PATH,
            headers=headers,
            data=upload.content,
            timeout=self.upload_timeout,
        )
        data = self._decode_json(resp)
        if not isinstance(data, dict):
            raise RemoteDecodeError(f"{self.PLATFORM} upload response not an object")
        return data
