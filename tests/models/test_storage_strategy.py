"""Tests for the storage strategy container."""

from urfocus_cli.adapters import RestApiRecordStore, SqliteRecordStore
from urfocus_cli.models.storage_strategy import (
    LocalStorageStrategy,
    RemoteStorageStrategy,
    StorageStrategyContext,
)


class TestLocalStorageStrategy:
    def test_initialization(self, tmp_path):
        db_path = str(tmp_path / "focus.db")
        strategy = LocalStorageStrategy(db_path=db_path)

        assert strategy.storage_type == "local"
        assert strategy.db_path == db_path
        assert isinstance(strategy.get_record_store(), SqliteRecordStore)

    def test_store_is_reused(self, tmp_path):
        strategy = LocalStorageStrategy(db_path=str(tmp_path / "focus.db"))
        assert strategy.get_record_store() is strategy.get_record_store()


class TestRemoteStorageStrategy:
    def test_initialization(self, tmp_config):
        strategy = RemoteStorageStrategy(config_service=tmp_config)
        assert strategy.storage_type == "remote"
        assert isinstance(strategy.get_record_store(), RestApiRecordStore)


class TestStorageStrategyContext:
    def test_exposes_strategy_store(self, tmp_path, tmp_config):
        local = LocalStorageStrategy(db_path=str(tmp_path / "focus.db"))
        context = StorageStrategyContext(local)
        assert context.storage_type == "local"
        assert context.strategy is local
        assert context.record_store is local.get_record_store()

        remote = StorageStrategyContext(RemoteStorageStrategy(config_service=tmp_config))
        assert remote.storage_type == "remote"
        assert isinstance(remote.record_store, RestApiRecordStore)
