"""Adapters module - RecordStore implementations for different storage backends.

- sqlite: Local SQLite vault with atomic increments
- rest_api: Remote records API (read-increment-write)
"""

from .rest_api import RestApiRecordStore
from .sqlite import SqliteRecordStore

__all__ = ["SqliteRecordStore", "RestApiRecordStore"]
