from __future__ import annotations

import json

import pytest
from cryptography.fernet import Fernet

from media_bridge import main as cli
from media_bridge.core.database import SettingsDatabase
from media_bridge.core.dto.page import MediaPageDTO
from media_bridge.core.errors import RemoteDecodeError
from media_bridge.core.media_factory import MediaItemFactory
from tests.utils import FakeProbe, make_raw_record


class FakeProvider:
    def __init__(self, error=None):
        self.error = error
        self.host_args = None
        self._factory = MediaItemFactory(probe=FakeProbe())

    def list(self, host_args):
        if self.error:
            raise self.error
        self.host_args = host_args
        items = (self._factory.create(make_raw_record(), file_size=1),)
        return MediaPageDTO(items=items, total=1, total_pages=1, page=1, per_page=40)


class FakeContext:
    provider = None
    closed = False

    def __init__(self, *, db=None, strict_mime=False):
        self.media = FakeContext.provider
        self.db = db

    def close(self):
        FakeContext.closed = True
        self.db.close()


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    key = Fernet.generate_key()
    monkeypatch.setattr(cli, "SettingsDatabase", lambda path: SettingsDatabase(path, encryption_key=key))
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "CoreContext", FakeContext)
    FakeContext.closed = False
    return ["--db", str(tmp_path / "settings.db")]


def test_list_prints_json(cli_env, capsys):
    FakeContext.provider = FakeProvider()
    code = cli.main(cli_env + ["list", "--page", "2", "--search", "cat", "--mime", "image/jpeg"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["total"] == 1
    assert out["items"][0]["type"] == "image"
    assert out["items"][0]["id"] == "101"
    assert FakeContext.provider.host_args == {"paged": 2, "s": "cat", "post_mime_type": "image/jpeg"}
    assert FakeContext.closed


def test_error_exits_non_zero_with_message(cli_env, capsys):
    FakeContext.provider = FakeProvider(error=RemoteDecodeError("wordpress returned a non-JSON body"))
    code = cli.main(cli_env + ["list"])
    assert code == 1
    assert "Could not fetch media: wordpress returned a non-JSON body" in capsys.readouterr().err


def test_configure_persists_settings(cli_env, capsys):
    code = cli.main(cli_env + ["configure", "--domain", "https://example.com/wp-json/", "--token", "t0k"])
    assert code == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown == {"source_domain": "https://example.com"}
