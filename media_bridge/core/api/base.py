"""
CORE API CONTRACT

This module is intentionally DTO-agnostic.
Platform quirks are normalized inside platform clients.

Contract goals:
- Stable, minimal surface area
- Transport and decode failures surface as APIError / RemoteDecodeError
- Returns plain dict/list payloads (DTO creation belongs to the factory)
"""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests

from media_bridge.core.dto.upload import UploadFile
from media_bridge.core.errors import APIError, RemoteDecodeError
from media_bridge.core.http_client import API_HEADERS

logger = logging.getLogger(__name__)


def header_int(headers: Mapping[str, str], name: str) -> int:
    """Integer response header, 0 when missing or malformed."""
    value = headers.get(name)
    if value is None:
        return 0
    try:
        return max(0, int(str(value).strip()))
    except ValueError:
        return 0


class BaseAPIClient(ABC):
    """
    Authoritative Core API contract.

    Callers must NOT call platform clients directly; the provider should.
    """

    API_PATH: str  # e.g. /wp-json/wp/v2
    PLATFORM: str  # e.g. "wordpress"

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        *,
        auth_token: Optional[str] = None,
        auth_scheme: str = "Basic",
        timeout: float = 30,
        upload_timeout: float = 3600,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self._auth_token = auth_token or None
        self._auth_scheme = auth_scheme
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self._configure_session()

    # ------------------------------------------------------------------
    # Session / Request helpers
    # ------------------------------------------------------------------

    def _configure_session(self) -> None:
        self.session.headers.update(API_HEADERS)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{self.API_PATH}{path}"

    def _authorization(self) -> Optional[str]:
        """
        Authorization header value for the opaque credential.

        A Basic credential given as ``user:password`` is base64-encoded; any
        other value is sent as-is.
        """
        if not self._auth_token:
            return None
        token = self._auth_token
        if self._auth_scheme.lower() == "basic" and ":" in token:
            token = base64.b64encode(token.encode("utf-8")).decode("ascii")
        return f"{self._auth_scheme} {token}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        url = self._url(path)

        if params:
            logger.debug(f"Request params: {params}")
            logger.info(f"API Request: {method} {url}?{urlencode(params, doseq=True)}")
        else:
            logger.info(f"API Request: {method} {url}")

        try:
            resp = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                data=data,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            raise APIError(f"{self.PLATFORM} request failed: {e}") from e

        if not resp.ok:
            raise APIError(
                f"{self.PLATFORM} API error {resp.status_code}: {resp.text[:500]}",
                status_code=resp.status_code,
            )
        return resp

    def _decode_json(self, resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteDecodeError(f"{self.PLATFORM} returned a non-JSON body: {e}") from e

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    @abstractmethod
    def get_media_page(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Returns one page of raw media records.

        Page dict keys:
          - records (list of raw record dicts, possibly empty)
          - total (int, 0 if the API did not report it)
          - total_pages (int, 0 if the API did not report it)
        """

    @abstractmethod
    def get_media(self, media_id: str) -> Dict[str, Any]:
        """Returns a single raw media record."""

    @abstractmethod
    def upload_media(self, upload: UploadFile) -> Dict[str, Any]:
        """Uploads raw bytes and returns the created raw media record."""
