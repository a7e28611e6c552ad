from __future__ import annotations

import aiohttp
import pytest

from media_bridge.core.http_client import (
    API_HEADERS,
    PROBE_HEADERS,
    HttpClient,
    HttpClientConfig,
    create_http_client_from_settings,
)
from media_bridge.core.settings import SourceSettings


def test_config_from_settings():
    settings = SourceSettings(base_url="https://x.example", probe_timeout=3, probe_concurrency=0)
    client = create_http_client_from_settings(settings)
    assert client.config.probe_timeout == 3
    assert client.config.probe_concurrency == 1
    assert client.config.list_timeout == 30


def test_sync_session_is_reused_and_closed():
    client = HttpClient()
    session = client.sync_session
    assert client.sync_session is session
    assert session.headers["Accept"] == API_HEADERS["Accept"]
    client.close()
    assert client.sync_session is not session


@pytest.mark.asyncio
async def test_async_session_uses_probe_headers():
    client = HttpClient(HttpClientConfig(probe_concurrency=4, max_connections_per_host=2))
    session = await client.create_async_session()
    try:
        assert isinstance(session, aiohttp.ClientSession)
        assert session.headers["Accept-Encoding"] == PROBE_HEADERS["Accept-Encoding"]
        assert session.connector.limit == 4
        assert session.connector.limit_per_host == 2
    finally:
        await session.close()
