"""REST API adapter - RecordStore over the UR Focus records service.

The records service is a plain key-record store: it can fetch, save and
query whole records but has no server-side increment. ``atomic_increment``
is therefore a read-increment-write and two clients incrementing at the
same moment may lose one delta.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from urfocus_cli.models import Record
from urfocus_cli.models.exceptions import TransientNetworkError
from urfocus_cli.repositories import RecordStore
from urfocus_cli.services.api.client import APIClient


def _path(collection: str, record_id: str | None = None) -> str:
    path = f"/v1/records/{quote(collection, safe='')}"
    if record_id is not None:
        path += f"/{quote(record_id, safe='')}"
    return path


def _to_record(
    data: dict[str, Any], collection: str, record_id: str | None = None
) -> Record:
    data = dict(data)
    data.setdefault("collection", collection)
    if record_id is not None:
        data.setdefault("id", record_id)
    return Record.model_validate(data)


class RestApiRecordStore(RecordStore):
    """Record store implementation using the remote records API."""

    def __init__(self, client: APIClient | None = None):
        """Initialize REST API record store.

        Args:
            client: Optional API client; created lazily from config if None
        """
        self._client = client

    @property
    def client(self) -> APIClient:
        """Get or create the API client."""
        if self._client is None:
            self._client = APIClient()
        return self._client

    async def get_record(self, collection: str, record_id: str) -> Record | None:
        """Get a record by ID, or None on 404."""
        try:
            response = await self.client.get(_path(collection, record_id))
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise TransientNetworkError(
                f"Failed to fetch {collection}/{record_id}: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise TransientNetworkError(
                f"Failed to fetch {collection}/{record_id}: {e}"
            ) from e
        return _to_record(response.json(), collection, record_id)

    async def create_or_update_record(
        self,
        collection: str,
        record_id: str,
        fields: dict[str, Any],
        merge: bool = True,
    ) -> Record:
        """Save a record; the server merges fields when ``merge`` is set."""
        try:
            response = await self.client.put(
                _path(collection, record_id),
                json={"fields": fields, "merge": merge},
            )
        except httpx.HTTPError as e:
            raise TransientNetworkError(
                f"Failed to save {collection}/{record_id}: {e}"
            ) from e
        return _to_record(response.json(), collection, record_id)

    async def create_if_absent(
        self, collection: str, record_id: str, defaults: dict[str, Any]
    ) -> Record:
        """Conditional create; 412 means another client got there first."""
        try:
            response = await self.client.put(
                _path(collection, record_id),
                json={"fields": defaults, "merge": False},
                headers={"If-None-Match": "*"},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 412:
                raise TransientNetworkError(
                    f"Failed to create {collection}/{record_id}: {e}"
                ) from e
            existing = await self.get_record(collection, record_id)
            if existing is None:
                raise TransientNetworkError(
                    f"{collection}/{record_id} vanished after a conflicting create"
                ) from e
            return existing
        except httpx.HTTPError as e:
            raise TransientNetworkError(
                f"Failed to create {collection}/{record_id}: {e}"
            ) from e
        return _to_record(response.json(), collection, record_id)

    async def atomic_increment(
        self, collection: str, record_id: str, deltas: dict[str, int]
    ) -> Record:
        """Read-increment-write; concurrent writers may lose deltas."""
        current = await self.get_record(collection, record_id)
        updated = {
            field: (current.int_value(field) if current else 0) + int(delta)
            for field, delta in deltas.items()
        }
        return await self.create_or_update_record(
            collection, record_id, updated, merge=True
        )

    async def _list(self, collection: str, params: dict[str, Any]) -> list[Record]:
        try:
            response = await self.client.get(_path(collection), params=params)
        except httpx.HTTPError as e:
            raise TransientNetworkError(f"Failed to query {collection}: {e}") from e
        data = response.json()
        items = data.get("records", []) if isinstance(data, dict) else data
        return [_to_record(item, collection) for item in items]

    async def query_top(
        self,
        collection: str,
        sort_field: str,
        descending: bool = True,
        limit: int = 10,
    ) -> list[Record]:
        """List records ordered by a numeric field."""
        records = await self._list(
            collection,
            {
                "order_by": sort_field,
                "order": "desc" if descending else "asc",
                "limit": limit,
            },
        )
        # The service sorts lexically for mixed types; re-sort numerically
        records.sort(key=lambda r: r.int_value(sort_field), reverse=descending)
        return records[:limit]

    async def find_records(
        self, collection: str, field: str, value: Any, limit: int = 10
    ) -> list[Record]:
        """List records whose field equals value."""
        return await self._list(
            collection, {"field": field, "value": value, "limit": limit}
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.close()
