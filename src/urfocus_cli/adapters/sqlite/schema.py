"""Database schema definitions for the local SQLite record store.

Records are stored document-style: one row per (collection, id) with the
field values serialized as a JSON object, so numeric fields can be
incremented in place with the JSON1 functions.
"""

from __future__ import annotations

SCHEMA_VERSION = 1

CREATE_RECORDS_TABLE = """
CREATE TABLE IF NOT EXISTS records (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    fields TEXT NOT NULL DEFAULT '{}',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    PRIMARY KEY (collection, id)
)
"""

CREATE_RECORDS_UPDATED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_records_collection_updated
ON records(collection, updated_at)
"""

CREATE_SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at DATETIME NOT NULL
)
"""

ALL_STATEMENTS = [
    CREATE_RECORDS_TABLE,
    CREATE_RECORDS_UPDATED_INDEX,
    CREATE_SCHEMA_VERSION_TABLE,
]
