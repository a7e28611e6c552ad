from __future__ import annotations

from typing import Any, Dict, Protocol

from media_bridge.core.dto.upload import UploadFile


class MediaAPIClient(Protocol):
    PLATFORM: str

    # Listing
    def get_media_page(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ...

    # Single record
    def get_media(self, media_id: str) -> Dict[str, Any]:
        ...

    # Upload
    def upload_media(self, upload: UploadFile) -> Dict[str, Any]:
        ...
