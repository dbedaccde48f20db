"""
Strategy Pattern: Storage Strategy Container

The StorageStrategyContext holds the strategy chosen at startup from the
active context and hands the record store to services. Services never know
which backend they are using.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from urfocus_cli.repositories import RecordStore


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    A strategy encapsulates the record store for a given storage backend
    (either Local SQLite or Remote API).
    """

    @abstractmethod
    def get_record_store(self) -> RecordStore:
        """Get record store implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class LocalStorageStrategy(StorageStrategy):
    """
    Local SQLite storage strategy.

    Instantiated once at startup if the active context is 'local'.
    """

    def __init__(self, db_path: str):
        """
        Initialize local strategy.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Import here to avoid circular dependencies
        from urfocus_cli.adapters.sqlite import SqliteRecordStore

        self._record_store = SqliteRecordStore(db_path=db_path)

    def get_record_store(self) -> RecordStore:
        return self._record_store

    @property
    def storage_type(self) -> str:
        return "local"


class RemoteStorageStrategy(StorageStrategy):
    """
    Remote API storage strategy.

    Instantiated once at startup if the active context is 'remote'.
    """

    def __init__(self, config_service=None):
        from urfocus_cli.adapters.rest_api import RestApiRecordStore
        from urfocus_cli.services.api.client import APIClient

        client = APIClient(config_service) if config_service is not None else None
        self._record_store = RestApiRecordStore(client)

    def get_record_store(self) -> RecordStore:
        return self._record_store

    @property
    def storage_type(self) -> str:
        return "remote"


class StorageStrategyContext:
    """
    Strategy context that provides access to the record store.

    Usage:
        # At startup
        strategy = LocalStorageStrategy(db_path="/path/to/db")
        context = StorageStrategyContext(strategy)

        # In services
        store = context.record_store
    """

    def __init__(self, strategy: StorageStrategy):
        self._strategy = strategy

    @property
    def record_store(self) -> RecordStore:
        """Get record store from current strategy."""
        return self._strategy.get_record_store()

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    @property
    def strategy(self) -> StorageStrategy:
        """Get underlying strategy."""
        return self._strategy
