"""
Remote file size lookup without downloading the body.

A HEAD request is issued per asset URL and the size read from
``Content-Length`` (or the total of a ``Content-Range``). Any failure, a
timeout included, is reported as size 0; probes never raise.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

import aiohttp
import requests

from media_bridge.core.http_client import PROBE_HEADERS

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 10.0
DEFAULT_PROBE_CONCURRENCY = 8

AsyncSessionFactory = Callable[[], Awaitable[Any]]


def extract_total_length(headers: Mapping[str, str]) -> Optional[int]:
    total = None
    content_range = headers.get("Content-Range")
    if content_range:
        try:
            total_str = content_range.split("/")[-1]
            if total_str and total_str != "*":
                total = int(total_str)
        except (TypeError, ValueError):
            total = None
    if total is None:
        content_length = headers.get("Content-Length")
        if content_length:
            try:
                total = int(content_length)
            except (TypeError, ValueError):
                total = None
    if total is not None and total <= 0:
        return None
    return total


class FileSizeProbe:
    """
    HEAD-based file size probe.

    ``probe`` is the blocking form used for single records (uploads, lookups).
    ``probe_many`` runs a page worth of probes on one aiohttp session, at most
    ``max_concurrency`` at a time, each bounded by ``timeout`` seconds.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        async_session_factory: Optional[AsyncSessionFactory] = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        max_concurrency: int = DEFAULT_PROBE_CONCURRENCY,
    ):
        self._session = session
        self._async_session_factory = async_session_factory
        self.timeout = timeout
        self.max_concurrency = max(1, int(max_concurrency))

    # ------------------------------------------------------------------
    # Blocking
    # ------------------------------------------------------------------

    def probe(self, url: str) -> int:
        if not url:
            return 0
        head = self._session.head if self._session is not None else requests.head
        try:
            resp = head(url, headers=PROBE_HEADERS, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.debug(f"File size probe failed for {url}: {e}")
            return 0
        try:
            if resp.status_code >= 400:
                logger.debug(f"File size probe for {url} returned HTTP {resp.status_code}")
                return 0
            return extract_total_length(resp.headers) or 0
        finally:
            resp.close()

    # ------------------------------------------------------------------
    # Concurrent
    # ------------------------------------------------------------------

    async def probe_many(self, urls: Sequence[str], *, session: Optional[Any] = None) -> List[int]:
        """
        Probe every URL concurrently; results follow the order of ``urls``.

        Duplicate URLs are probed once. Cancelling the caller cancels every
        in-flight probe.
        """
        unique = [u for u in dict.fromkeys(urls) if u]
        if not unique:
            return [0 for _ in urls]

        owns_session = session is None
        if owns_session:
            session = await self._create_session()

        semaphore = asyncio.Semaphore(self.max_concurrency)
        try:
            results = await asyncio.gather(
                *(self._probe_bounded(session, semaphore, url) for url in unique)
            )
        finally:
            if owns_session:
                await session.close()

        sizes: Dict[str, int] = dict(zip(unique, results))
        logger.debug(f"Probed {len(unique)} file sizes (concurrency={self.max_concurrency})")
        return [sizes.get(url, 0) for url in urls]

    async def probe_async(self, session: Any, url: str) -> int:
        if not url:
            return 0
        try:
            return await asyncio.wait_for(self._head(session, url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.debug(f"File size probe timed out after {self.timeout}s for {url}")
        except aiohttp.ClientError as e:
            logger.debug(f"File size probe failed for {url}: {e}")
        except ValueError as e:
            # aiohttp raises ValueError/InvalidURL for malformed URLs
            logger.debug(f"File size probe rejected {url}: {e}")
        return 0

    async def _probe_bounded(self, session: Any, semaphore: asyncio.Semaphore, url: str) -> int:
        async with semaphore:
            return await self.probe_async(session, url)

    async def _head(self, session: Any, url: str) -> int:
        async with session.head(url, allow_redirects=True) as resp:
            if resp.status >= 400:
                logger.debug(f"File size probe for {url} returned HTTP {resp.status}")
                return 0
            return extract_total_length(resp.headers) or 0

    async def _create_session(self) -> Any:
        if self._async_session_factory is not None:
            return await self._async_session_factory()
        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=self.max_concurrency),
            headers=PROBE_HEADERS,
        )
