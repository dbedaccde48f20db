"""Unit tests for services/config_service.py.

Uses a real ConfigService pointed at a tmp_path directory.
"""

from __future__ import annotations

import json
import stat

import pytest
from pydantic import ValidationError

from urfocus_cli.adapters import RestApiRecordStore, SqliteRecordStore
from urfocus_cli.models.storage_strategy import LocalStorageStrategy, RemoteStorageStrategy
from urfocus_cli.services.config_service import (
    DEFAULT_CLOUD_ENDPOINT,
    ConfigService,
    get_config_service,
    get_storage_strategy_context,
)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_first_load_creates_config_file(self, tmp_config):
        assert tmp_config.config_path.exists()
        assert stat.S_IMODE(tmp_config.config_path.stat().st_mode) == 0o600

    def test_default_contexts(self, tmp_config):
        names = [ctx.name for ctx in tmp_config.list_contexts()]
        assert names == ["local", "cloud"]
        assert tmp_config.get_current_context().name == "local"
        assert tmp_config.config.get_context("cloud").source == DEFAULT_CLOUD_ENDPOINT

    def test_local_user_id_survives_reload(self, tmp_config):
        user_id = tmp_config.config.focus.local_user_id
        reloaded = ConfigService()
        assert reloaded.config.focus.local_user_id == user_id

    def test_cached_factory(self, tmp_config):
        assert get_config_service() is tmp_config

    def test_corrupt_config_raises(self, tmp_config):
        tmp_config.config_path.write_text("{broken")
        with pytest.raises(RuntimeError):
            ConfigService().load_config()


# ---------------------------------------------------------------------------
# get / set
# ---------------------------------------------------------------------------


class TestGetSet:
    def test_get_nested(self, tmp_config):
        assert tmp_config.get("focus.session_minutes") == 25
        assert tmp_config.get("sync.poll_interval") == 15.0

    def test_get_unknown(self, tmp_config):
        assert tmp_config.get("focus.nope") is None
        assert tmp_config.get("focus.session_minutes.deeper") is None

    def test_set_persists(self, tmp_config):
        tmp_config.set("focus.session_minutes", 50)
        saved = json.loads(tmp_config.config_path.read_text())
        assert saved["focus"]["session_minutes"] == 50

    def test_set_validates(self, tmp_config):
        with pytest.raises(ValidationError):
            tmp_config.set("sync.poll_interval", 60)
        assert tmp_config.get("sync.poll_interval") == 15.0

    def test_set_unknown_key(self, tmp_config):
        with pytest.raises(KeyError):
            tmp_config.set("focus.unknown", 1)

    def test_reset_restores_defaults(self, tmp_config):
        tmp_config.set("focus.coins", 999)
        tmp_config.reset_config()
        assert tmp_config.get("focus.coins") == 0


# ---------------------------------------------------------------------------
# Contexts and credentials
# ---------------------------------------------------------------------------


class TestContexts:
    def test_local_strategy_by_default(self, tmp_config):
        ctx = get_storage_strategy_context()
        assert isinstance(ctx.strategy, LocalStorageStrategy)
        assert isinstance(ctx.record_store, SqliteRecordStore)
        assert ctx.storage_type == "local"

    def test_use_cloud_switches_strategy(self, tmp_config):
        tmp_config.use_context("cloud")
        ctx = tmp_config.storage_strategy_context
        assert isinstance(ctx.strategy, RemoteStorageStrategy)
        assert isinstance(ctx.record_store, RestApiRecordStore)

    def test_use_unknown_context(self, tmp_config):
        with pytest.raises(ValueError):
            tmp_config.use_context("nowhere")

    def test_credentials_per_context(self, tmp_config):
        assert tmp_config.load_credentials() is None
        tmp_config.save_credentials("tok-123", "cloud")
        assert tmp_config.load_credentials() is None
        tmp_config.use_context("cloud")
        assert tmp_config.load_credentials() == {"token": "tok-123"}

    def test_credentials_file_is_owner_only(self, tmp_config):
        tmp_config.save_credentials("tok", "cloud")
        path = tmp_config.credentials_dir / "cloud.json"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
