from media_bridge.core.api.base import BaseAPIClient
from media_bridge.core.api.wordpress import WordPressClient
from media_bridge.core.errors import APIError, RemoteDecodeError

__all__ = [
    "BaseAPIClient",
    "APIError",
    "RemoteDecodeError",
    "WordPressClient",
]
