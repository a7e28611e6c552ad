from __future__ import annotations

import logging

import pytest

from media_bridge.utils.logging_config import (
    DEFAULT_LOG_LEVELS,
    LoggerCategory,
    LoggingManager,
    category_for,
)


class DictStore:
    def __init__(self, values=None):
        self.values = dict(values or {})

    def get_config(self, key, default=None):
        return self.values.get(key, default)

    def set_config(self, key, value, encrypt=False):
        self.values[key] = value


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_defaults_without_store(tmp_path):
    manager = LoggingManager(log_dir=tmp_path)
    assert manager.get_all_levels() == DEFAULT_LOG_LEVELS


def test_levels_read_from_store(tmp_path):
    store = DictStore({"log_level_api": "debug", "log_level_core": "nonsense"})
    manager = LoggingManager(log_dir=tmp_path, store=store)
    assert manager.get_category_level(LoggerCategory.API) == logging.DEBUG
    assert manager.get_category_level(LoggerCategory.CORE) == DEFAULT_LOG_LEVELS[LoggerCategory.CORE]


def test_set_category_level_persists_and_applies(tmp_path):
    store = DictStore()
    manager = LoggingManager(log_dir=tmp_path, store=store)
    manager.set_category_level(LoggerCategory.NETWORK, logging.DEBUG)
    assert store.values["log_level_network"] == "DEBUG"
    assert logging.getLogger("media_bridge.core.file_size_probe").level == logging.DEBUG


def test_setup_logging_writes_file(tmp_path, restore_root_logger):
    manager = LoggingManager(log_dir=tmp_path)
    manager.setup_logging()
    logging.getLogger("media_bridge.core.media_provider").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello" in (tmp_path / "media_bridge.log").read_text(encoding="utf-8")
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_category_for_uses_longest_prefix():
    assert category_for("media_bridge.core.api.wordpress") == LoggerCategory.API
    assert category_for("media_bridge.core.file_size_probe") == LoggerCategory.NETWORK
    assert category_for("media_bridge.core.media_factory") == LoggerCategory.CORE
    assert category_for("media_bridge_extra") is None
    assert category_for("urllib3") is None
