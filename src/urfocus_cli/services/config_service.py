"""Configuration service for managing UR Focus CLI configuration.

This module provides the ConfigService class, which is the single source of truth
for all configuration management in UR Focus CLI. It handles:

- Loading and saving config.json
- Context management (list, switch)
- Credential management for remote contexts
- Config file initialization with sensible defaults
"""

from __future__ import annotations

import json
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel

from urfocus_cli.models.config_models import AppConfig, Context
from urfocus_cli.models.storage_strategy import (
    LocalStorageStrategy,
    RemoteStorageStrategy,
    StorageStrategyContext,
)

DEFAULT_CLOUD_ENDPOINT = "https://focus.rochester-campus.app/api"


class ConfigService:
    """Service for managing application configuration.

    Loads, saves and manipulates the application's configuration settings,
    including the local focus preferences, and builds the storage strategy
    for the active context.
    """

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("urfocus_cli"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.data_dir = Path(user_data_dir("urfocus_cli"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._storage_strategy_context: StorageStrategyContext | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def storage_strategy_context(self) -> StorageStrategyContext:
        """Get a StorageStrategyContext based on the current configuration."""
        if self._storage_strategy_context is None:
            self._storage_strategy_context = StorageStrategyContext(
                self._build_strategy()
            )
        return self._storage_strategy_context

    def _build_strategy(self):
        context = self.get_current_context()
        if context.type == "remote":
            return RemoteStorageStrategy(config_service=self)
        return LocalStorageStrategy(db_path=context.source)

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run: create the default config and persist the generated
            # local user id right away
            self._config = self.create_default_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self):
        """Reset configuration to defaults."""
        self._config = None
        self._storage_strategy_context = None
        if self.config_path.exists():
            self.config_path.unlink()
        for cred_file in self.credentials_dir.glob("*.json"):
            cred_file.unlink()
        self.create_default_config()

    def create_default_config(self) -> AppConfig:
        """Create a default configuration with local and cloud contexts.

        The local context is active by default so the timer works offline
        without any account.
        """
        local_context = Context(
            name="local",
            type="local",
            source=str(self.data_dir / "urfocus.db"),
            description="Local SQLite storage",
        )
        cloud_context = Context(
            name="cloud",
            type="remote",
            source=DEFAULT_CLOUD_ENDPOINT,
            description="Shared campus goal (requires token)",
        )

        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, cloud_context],
        )
        self.save_config()
        return self._config

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel):
                if k not in type(value).model_fields:
                    return None
                value = getattr(value, k)
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        The whole config is re-validated, so invalid values raise
        ``pydantic.ValidationError`` and leave the config unchanged.
        """
        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                raise KeyError(f"Unknown configuration key: {key}")
            current = current[k]
        if keys[-1] not in current:
            raise KeyError(f"Unknown configuration key: {key}")
        current[keys[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()

    def list_contexts(self) -> list[Context]:
        """List all available contexts."""
        return self.config.contexts

    def get_current_context(self) -> Context:
        """Get the currently active context.

        Raises:
            ValueError: If the current context is not found
        """
        return self.config.get_current_context()

    def use_context(self, name: str) -> Context:
        """Set the current context by name."""
        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self.save_config()
        self._storage_strategy_context = None
        return context

    def load_credentials(self) -> dict | None:
        """Load credentials for the current context.

        Returns:
            dict with 'token', or None if not found
        """
        try:
            current_context = self.config.get_current_context()
        except ValueError:
            return None
        return self.load_context_credentials(current_context.name)

    def load_context_credentials(self, context_name: str) -> dict | None:
        """Load credentials for a specific context."""
        cred_path = self.credentials_dir / f"{context_name}.json"
        if not cred_path.exists():
            return None

        try:
            with open(cred_path, encoding="utf-8") as f:
                return json.load(f)
        except JSONDecodeError:
            return None

    def save_credentials(self, access_token: str, context_name: str | None = None):
        """Save an access token for a context (defaults to current context)."""
        if context_name is None:
            context_name = self.config.get_current_context().name

        cred_path = self.credentials_dir / f"{context_name}.json"
        cred_path.parent.mkdir(parents=True, exist_ok=True)

        with open(cred_path, "w", encoding="utf-8") as f:
            json.dump({"token": access_token}, f, indent=2)

        cred_path.chmod(0o600)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_storage_strategy_context() -> StorageStrategyContext:
    """Get a StorageStrategyContext based on the current configuration."""
    return get_config_service().storage_strategy_context
