# tests/conftest.py
from __future__ import annotations

import pytest

from media_bridge.core.media_factory import MediaItemFactory
from tests.utils import FakeProbe


def pytest_configure(config):
    config.addinivalue_line("markers", "network: exercises HTTP code paths against mocked transports")


# -------- Mapping fixtures --------
@pytest.fixture
def fake_probe():
    return FakeProbe()


@pytest.fixture
def factory(fake_probe):
    """Factory whose probe reports 0 bytes for every URL."""
    return MediaItemFactory(probe=fake_probe)
