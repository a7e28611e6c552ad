from __future__ import annotations

from unittest.mock import Mock

from media_bridge.core.context import CoreContext
from media_bridge.core.settings import SourceSettings


def _settings(**overrides):
    values = dict(
        base_url="https://example.com",
        auth_token="user:pass",
        list_timeout=12,
        upload_timeout=600,
        probe_timeout=4,
        probe_concurrency=5,
        per_page_default=20,
        size_names=("medium",),
    )
    values.update(overrides)
    return SourceSettings(**values)


def test_context_wires_settings_through():
    ctx = CoreContext(settings=_settings())
    try:
        assert ctx.client.base_url == "https://example.com"
        assert ctx.client.timeout == 12
        assert ctx.client.upload_timeout == 600
        assert ctx.client._authorization() == "Basic dXNlcjpwYXNz"
        assert ctx.probe.timeout == 4
        assert ctx.probe.max_concurrency == 5
        assert ctx.client.session is ctx.session
    finally:
        ctx.close()


def test_context_reads_settings_from_database():
    db = Mock()
    db.conn = None
    db.get_config.side_effect = lambda key, default=None: {
        "source_domain": "https://stored.example/wp-json",
    }.get(key, default)

    ctx = CoreContext(db=db)
    db.connect.assert_called_once()
    assert ctx.settings.base_url == "https://stored.example"
    ctx.close()
    db.close.assert_called_once()
