"""
HTTP session factory shared by the REST client and the file size probe.

- requests.Session for listing, single lookups and uploads (JSON headers,
  pooled keep-alive connections)
- aiohttp.ClientSession for concurrent HEAD probes, its connector sized to
  the probe concurrency
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp
import requests
from aiohttp import ClientTimeout, TCPConnector
from requests.adapters import HTTPAdapter

from media_bridge import __version__

logger = logging.getLogger(__name__)


USER_AGENT = f"MediaBridge/{__version__}"

# REST API requests (JSON in and out)
API_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
    "Content-Type": "application/json",
    "Connection": "keep-alive",
}

# HEAD probes against asset URLs
PROBE_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
    # Content-Length must describe the stored bytes, not a compressed transfer.
    "Accept-Encoding": "identity",
    "Connection": "keep-alive",
}


@dataclass
class HttpClientConfig:
    list_timeout: float = 30
    upload_timeout: float = 3600
    probe_timeout: float = 10
    probe_concurrency: int = 8
    max_connections_per_host: int = 16
    connect_timeout: float = 10

    def __post_init__(self):
        self.probe_concurrency = max(1, int(self.probe_concurrency))

    @classmethod
    def from_settings(cls, settings) -> "HttpClientConfig":
        return cls(
            list_timeout=settings.list_timeout,
            upload_timeout=settings.upload_timeout,
            probe_timeout=settings.probe_timeout,
            probe_concurrency=settings.probe_concurrency,
        )


class HttpClient:
    """
    Builds configured sessions.

    The sync session is created once and reused; async sessions are created
    per page of probes and closed by their caller.
    """

    def __init__(self, config: Optional[HttpClientConfig] = None):
        self.config = config or HttpClientConfig()
        self._sync_session: Optional[requests.Session] = None

    def create_sync_session(self, headers: Optional[Dict[str, str]] = None) -> requests.Session:
        """New requests.Session with API headers and a pool sized per host."""
        session = requests.Session()
        session.headers.update(headers or API_HEADERS)
        adapter = HTTPAdapter(
            pool_connections=1,
            pool_maxsize=self.config.max_connections_per_host,
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        self._sync_session = session
        return session

    @property
    def sync_session(self) -> requests.Session:
        if self._sync_session is None:
            return self.create_sync_session()
        return self._sync_session

    async def create_async_session(
        self,
        headers: Optional[Dict[str, str]] = None,
        total_timeout: Optional[float] = None,
    ) -> aiohttp.ClientSession:
        """
        New aiohttp.ClientSession for probes.

        Per-probe deadlines are enforced by the probe itself; ``total_timeout``
        only caps each request when set.
        """
        limit = self.config.probe_concurrency
        connector = TCPConnector(
            limit=limit,
            limit_per_host=min(limit, self.config.max_connections_per_host),
            ttl_dns_cache=300,
            family=socket.AF_INET,
        )
        return aiohttp.ClientSession(
            connector=connector,
            timeout=ClientTimeout(total=total_timeout, connect=self.config.connect_timeout),
            headers=headers or PROBE_HEADERS,
            raise_for_status=False,
        )

    def close(self):
        if self._sync_session is not None:
            self._sync_session.close()
            self._sync_session = None


def create_http_client_from_settings(settings) -> HttpClient:
    """HttpClient configured from a SourceSettings instance."""
    config = HttpClientConfig.from_settings(settings)
    logger.debug(
        f"HTTP client config - list_timeout: {config.list_timeout}, "
        f"probe_timeout: {config.probe_timeout}, probe_concurrency: {config.probe_concurrency}"
    )
    return HttpClient(config)
