"""Persistence port for UR Focus.

Business logic talks to a single ``RecordStore`` interface. Concrete
adapters live in ``urfocus_cli.adapters``:

- ``SqliteRecordStore``: document-style records with atomic increments
- ``RestApiRecordStore``: remote key-record API, read-increment-write
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from urfocus_cli.models import Record

from .subscription import RecordCallback, Subscription


class RecordStore(ABC):
    """Abstract base class for record persistence.

    All failures of the underlying backend are raised as
    ``TransientNetworkError``; a missing record is not an error.
    """

    @property
    def supports_atomic_increment(self) -> bool:
        """Whether ``atomic_increment`` is linearizable on this backend."""
        return False

    @abstractmethod
    async def get_record(self, collection: str, record_id: str) -> Record | None:
        """Get a record by ID.

        Args:
            collection: Collection name
            record_id: Record identifier

        Returns:
            The record, or None if it does not exist
        """
        raise NotImplementedError(
            "RecordStore.get_record() must be implemented by adapter"
        )

    @abstractmethod
    async def create_or_update_record(
        self,
        collection: str,
        record_id: str,
        fields: dict[str, Any],
        merge: bool = True,
    ) -> Record:
        """Create a record or update an existing one.

        Args:
            collection: Collection name
            record_id: Record identifier
            fields: Field values to write
            merge: Keep existing fields not present in ``fields`` when True,
                replace the whole record when False

        Returns:
            The stored record
        """
        raise NotImplementedError(
            "RecordStore.create_or_update_record() must be implemented by adapter"
        )

    @abstractmethod
    async def create_if_absent(
        self, collection: str, record_id: str, defaults: dict[str, Any]
    ) -> Record:
        """Create a record from ``defaults`` unless it already exists.

        An existing record keeps every stored field; only keys it lacks are
        filled from ``defaults``. Never overwrites a concurrent writer.

        Returns:
            The record as stored after the call
        """
        raise NotImplementedError(
            "RecordStore.create_if_absent() must be implemented by adapter"
        )

    @abstractmethod
    async def atomic_increment(
        self, collection: str, record_id: str, deltas: dict[str, int]
    ) -> Record:
        """Add ``deltas`` to numeric fields, creating the record if needed.

        Missing fields count as zero. Concurrent increments from other
        clients must not be lost on backends that report
        ``supports_atomic_increment``.

        Returns:
            The record after the increment
        """
        raise NotImplementedError(
            "RecordStore.atomic_increment() must be implemented by adapter"
        )

    @abstractmethod
    async def query_top(
        self,
        collection: str,
        sort_field: str,
        descending: bool = True,
        limit: int = 10,
    ) -> list[Record]:
        """List records of a collection ordered by a numeric field."""
        raise NotImplementedError(
            "RecordStore.query_top() must be implemented by adapter"
        )

    @abstractmethod
    async def find_records(
        self, collection: str, field: str, value: Any, limit: int = 10
    ) -> list[Record]:
        """List records whose ``field`` equals ``value``."""
        raise NotImplementedError(
            "RecordStore.find_records() must be implemented by adapter"
        )

    def subscribe(
        self,
        collection: str,
        record_id: str,
        on_change: RecordCallback,
        interval: float = 15.0,
    ) -> Subscription:
        """Watch a record and call ``on_change`` whenever it changes.

        Must be called from a running event loop. The default implementation
        polls ``get_record`` every ``interval`` seconds.
        """

        async def fetch() -> Record | None:
            return await self.get_record(collection, record_id)

        return Subscription(fetch, on_change, interval).start()

    async def close(self) -> None:
        """Release backend resources."""
