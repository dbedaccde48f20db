"""SQLite adapter - local vault implementation of RecordStore."""

from .record_store import SqliteRecordStore

__all__ = ["SqliteRecordStore"]
