"""Database connection management for the local SQLite record store."""

from __future__ import annotations

import os
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from platformdirs import user_data_dir

from urfocus_cli.adapters.sqlite import schema


def default_db_path() -> Path:
    """Default location of the local vault."""
    return Path(user_data_dir("urfocus_cli")) / "urfocus.db"


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Open and configure a connection to the local vault.

    Provides:
    - Autocommit mode; callers open explicit transactions
    - WAL mode so other processes can read during writes
    - Automatic directory creation
    - Owner-only file permissions for new databases
    - Schema initialization

    Args:
        db_path: Path to database file, ``":memory:"`` for an in-memory
            database, or None for the default location

    Returns:
        Configured sqlite3.Connection
    """
    if db_path is None:
        db_path = default_db_path()

    in_memory = str(db_path) == ":memory:"
    is_new_database = False
    if not in_memory:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        timeout=30.0,  # Wait up to 30s for locks
        isolation_level=None,
    )
    connection.row_factory = sqlite3.Row
    if not in_memory:
        connection.execute("PRAGMA journal_mode = WAL")
        if is_new_database:
            os.chmod(db_path, 0o600)

    initialize_schema(connection)
    return connection


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Create tables if they do not exist yet."""
    for statement in schema.ALL_STATEMENTS:
        connection.execute(statement)
    row = connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
    if row[0] is None:
        connection.execute(
            "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
            (schema.SCHEMA_VERSION, datetime.now(UTC).isoformat()),
        )
