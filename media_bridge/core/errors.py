from __future__ import annotations

from typing import Optional


class MediaBridgeError(RuntimeError):
    """Base class for every error raised by the media bridge core."""


class APIError(MediaBridgeError):
    """Raised for remote HTTP / transport errors."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteDecodeError(APIError):
    """Raised when a response body is not JSON or not the expected shape."""


class DecodeError(MediaBridgeError, ValueError):
    """Raised when a raw media record lacks its id or MIME type."""


class UnsupportedFilterError(MediaBridgeError, ValueError):
    """Raised for a MIME filter that no single remote filter can express."""
