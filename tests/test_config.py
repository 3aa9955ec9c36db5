"""
Block Filter Index Configuration Tests
"""

import logging

import pytest

from blockfilter.config import IndexConfig, StoreConfig, LogConfig, setup_logging
from blockfilter.constants import DEFAULT_COMMIT_INTERVAL


class TestIndexConfig:
    """Tests for IndexConfig."""

    def test_defaults_valid(self):
        config = IndexConfig()
        assert config.filter_types == ["basic"]
        assert config.store.commit_interval == DEFAULT_COMMIT_INTERVAL
        assert config.validate() == []

    def test_db_path(self, tmp_path):
        config = IndexConfig(store=StoreConfig(data_dir=str(tmp_path)))
        assert config.db_path("extended") == tmp_path / "block_filter_extended.sqlite"

    def test_unknown_filter_type(self):
        config = IndexConfig(filter_types=["basic", "bogus"])
        assert config.validate() == ["Unknown filter type: bogus"]

    def test_duplicate_filter_type(self):
        config = IndexConfig(filter_types=["basic", "basic"])
        assert "filter_types contains duplicates" in config.validate()

    def test_store_errors(self):
        config = IndexConfig(
            store=StoreConfig(
                data_dir="",
                cache_size_bytes=-1,
                commit_interval=-5,
                synchronous="SOMETIMES",
            )
        )
        errors = config.validate()
        assert len(errors) == 4

    def test_empty_data_dir_in_memory(self):
        config = IndexConfig(store=StoreConfig(data_dir="", in_memory=True))
        assert config.validate() == []

    def test_invalid_log_level(self):
        config = IndexConfig(log=LogConfig(level="LOUD"))
        assert config.validate() == ["Invalid log level: LOUD"]

    def test_non_level_logging_attribute(self):
        config = IndexConfig(log=LogConfig(level="getLogger"))
        assert config.validate() == ["Invalid log level: getLogger"]

    def test_save_load(self, tmp_path):
        path = tmp_path / "config.json"
        config = IndexConfig(
            filter_types=["basic", "extended"],
            store=StoreConfig(data_dir="/var/filters", commit_interval=50, synchronous="NORMAL"),
            log=LogConfig(level="DEBUG"),
        )
        config.save(str(path))

        loaded = IndexConfig.load(str(path))
        assert loaded.filter_types == ["basic", "extended"]
        assert loaded.store == config.store
        assert loaded.log.level == "DEBUG"

    def test_load_partial(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"store": {"wipe": true}}')
        loaded = IndexConfig.load(str(path))
        assert loaded.store.wipe
        assert loaded.filter_types == ["basic"]
        assert loaded.log == LogConfig()


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture
    def captured(self, monkeypatch):
        calls = {}

        def fake_basic_config(**kwargs):
            calls.update(kwargs)

        monkeypatch.setattr(logging, "basicConfig", fake_basic_config)
        yield calls
        for handler in calls.get("handlers", []):
            handler.close()

    def test_console_only(self, captured):
        setup_logging(LogConfig(level="debug"))
        assert captured["level"] == logging.DEBUG
        assert len(captured["handlers"]) == 1

    def test_rotating_file(self, captured, tmp_path):
        from logging.handlers import RotatingFileHandler

        setup_logging(LogConfig(file=str(tmp_path / "index.log"), max_size_mb=1, backup_count=2))
        file_handler = captured["handlers"][1]
        assert isinstance(file_handler, RotatingFileHandler)
        assert file_handler.maxBytes == 1024 * 1024
        assert file_handler.backupCount == 2
