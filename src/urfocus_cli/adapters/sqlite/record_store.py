"""SQLite implementation of RecordStore."""

from __future__ import annotations

import json
import re
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from urfocus_cli.adapters.sqlite.connection import get_connection
from urfocus_cli.models import Record
from urfocus_cli.models.exceptions import TransientNetworkError
from urfocus_cli.repositories import RecordStore, Subscription
from urfocus_cli.repositories.subscription import RecordCallback

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_path(field: str) -> str:
    if not _FIELD_NAME.match(field):
        raise ValueError(f"Invalid field name: {field!r}")
    return f"$.{field}"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _row_to_record(row: sqlite3.Row) -> Record:
    return Record(
        collection=row["collection"],
        id=row["id"],
        fields=json.loads(row["fields"] or "{}"),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SqliteRecordStore(RecordStore):
    """Record store backed by a local SQLite database.

    Increments run as a single ``BEGIN IMMEDIATE`` transaction, so concurrent
    writers (other processes sharing the vault) never lose each other's
    deltas.
    """

    def __init__(self, db_path: str | None = None):
        """Initialize SQLite record store.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None
        self._subscriptions: dict[tuple[str, str], set[Subscription]] = {}

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    @property
    def supports_atomic_increment(self) -> bool:
        return True

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self.connection
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    def _fetch(self, conn: sqlite3.Connection, collection: str, record_id: str):
        return conn.execute(
            "SELECT * FROM records WHERE collection = ? AND id = ?",
            (collection, record_id),
        ).fetchone()

    def _notify(self, collection: str, record_id: str) -> None:
        for subscription in list(self._subscriptions.get((collection, record_id), ())):
            subscription.poke()

    async def get_record(self, collection: str, record_id: str) -> Record | None:
        """Get a record by ID, or None if it does not exist."""
        try:
            row = self._fetch(self.connection, collection, record_id)
        except sqlite3.Error as e:
            raise TransientNetworkError(f"Failed to read {collection}/{record_id}: {e}") from e
        return _row_to_record(row) if row else None

    async def create_or_update_record(
        self,
        collection: str,
        record_id: str,
        fields: dict[str, Any],
        merge: bool = True,
    ) -> Record:
        """Create or update a record, merging fields when requested."""
        now = _now_iso()
        try:
            with self._transaction() as conn:
                row = self._fetch(conn, collection, record_id)
                if row and merge:
                    stored = {**json.loads(row["fields"] or "{}"), **fields}
                else:
                    stored = dict(fields)
                conn.execute(
                    """INSERT INTO records (collection, id, fields, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?)
                       ON CONFLICT (collection, id)
                       DO UPDATE SET fields = excluded.fields, updated_at = excluded.updated_at""",
                    (collection, record_id, json.dumps(stored), now, now),
                )
                row = self._fetch(conn, collection, record_id)
        except sqlite3.Error as e:
            raise TransientNetworkError(f"Failed to write {collection}/{record_id}: {e}") from e

        self._notify(collection, record_id)
        return _row_to_record(row)

    async def create_if_absent(
        self, collection: str, record_id: str, defaults: dict[str, Any]
    ) -> Record:
        """Insert the record if missing, then fill only the keys it lacks."""
        paths = {field: _json_path(field) for field in defaults}
        now = _now_iso()
        try:
            with self._transaction() as conn:
                conn.execute(
                    """INSERT INTO records (collection, id, fields, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?)
                       ON CONFLICT (collection, id) DO NOTHING""",
                    (collection, record_id, json.dumps(defaults), now, now),
                )
                for field, value in defaults.items():
                    # json_insert never replaces an existing key
                    conn.execute(
                        """UPDATE records SET fields = json_insert(fields, ?, json(?))
                           WHERE collection = ? AND id = ?""",
                        (paths[field], json.dumps(value), collection, record_id),
                    )
                row = self._fetch(conn, collection, record_id)
        except sqlite3.Error as e:
            raise TransientNetworkError(
                f"Failed to create {collection}/{record_id}: {e}"
            ) from e

        self._notify(collection, record_id)
        return _row_to_record(row)

    async def atomic_increment(
        self, collection: str, record_id: str, deltas: dict[str, int]
    ) -> Record:
        """Add deltas to numeric fields inside one write transaction."""
        paths = {field: _json_path(field) for field in deltas}
        now = _now_iso()
        try:
            with self._transaction() as conn:
                conn.execute(
                    """INSERT INTO records (collection, id, fields, created_at, updated_at)
                       VALUES (?, ?, '{}', ?, ?)
                       ON CONFLICT (collection, id) DO NOTHING""",
                    (collection, record_id, now, now),
                )
                for field, delta in deltas.items():
                    path = paths[field]
                    conn.execute(
                        """UPDATE records
                           SET fields = json_set(fields, ?, COALESCE(json_extract(fields, ?), 0) + ?),
                               updated_at = ?
                           WHERE collection = ? AND id = ?""",
                        (path, path, int(delta), now, collection, record_id),
                    )
                row = self._fetch(conn, collection, record_id)
        except sqlite3.Error as e:
            raise TransientNetworkError(
                f"Failed to increment {collection}/{record_id}: {e}"
            ) from e

        self._notify(collection, record_id)
        return _row_to_record(row)

    async def query_top(
        self,
        collection: str,
        sort_field: str,
        descending: bool = True,
        limit: int = 10,
    ) -> list[Record]:
        """List records ordered by a numeric field."""
        path = _json_path(sort_field)
        direction = "DESC" if descending else "ASC"
        try:
            rows = self.connection.execute(
                f"""SELECT * FROM records WHERE collection = ?
                    ORDER BY COALESCE(CAST(json_extract(fields, ?) AS REAL), 0) {direction}, id
                    LIMIT ?""",
                (collection, path, limit),
            ).fetchall()
        except sqlite3.Error as e:
            raise TransientNetworkError(f"Failed to query {collection}: {e}") from e
        return [_row_to_record(row) for row in rows]

    async def find_records(
        self, collection: str, field: str, value: Any, limit: int = 10
    ) -> list[Record]:
        """List records whose field equals value."""
        path = _json_path(field)
        try:
            rows = self.connection.execute(
                """SELECT * FROM records
                   WHERE collection = ? AND json_extract(fields, ?) = ?
                   ORDER BY id LIMIT ?""",
                (collection, path, value, limit),
            ).fetchall()
        except sqlite3.Error as e:
            raise TransientNetworkError(f"Failed to query {collection}: {e}") from e
        return [_row_to_record(row) for row in rows]

    def subscribe(
        self,
        collection: str,
        record_id: str,
        on_change: RecordCallback,
        interval: float = 15.0,
    ) -> Subscription:
        """Watch a record; writes through this store are delivered immediately."""
        key = (collection, record_id)

        async def fetch() -> Record | None:
            return await self.get_record(collection, record_id)

        def forget(subscription: Subscription) -> None:
            self._subscriptions.get(key, set()).discard(subscription)

        subscription = Subscription(fetch, on_change, interval, on_close=forget)
        self._subscriptions.setdefault(key, set()).add(subscription)
        return subscription.start()

    async def close(self) -> None:
        """Cancel subscriptions and close the connection."""
        for subscriptions in list(self._subscriptions.values()):
            for subscription in list(subscriptions):
                subscription.unsubscribe()
        if self._connection is not None:
            self._connection.close()
            self._connection = None
