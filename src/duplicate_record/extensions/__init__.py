"""Optional extensions built on the record store contract."""

from .memory_store import InMemoryCollection, InMemoryRecord, InMemoryRecordStore

__all__ = ["InMemoryCollection", "InMemoryRecord", "InMemoryRecordStore"]
