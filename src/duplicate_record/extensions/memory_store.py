"""In-memory record store.

A small, process-local implementation of the record store contract. It keeps
records as plain dicts keyed by an auto-incrementing integer and hands out
deep copies, so nothing a caller does to a snapshot reaches stored state.
Concurrency protection and persistence are out of scope.
"""

from __future__ import annotations

from collections.abc import Mapping
import copy
import itertools
from typing import Any


class InMemoryRecord:
    """A stored record; `to_flat_snapshot` returns a detached copy."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = copy.deepcopy(dict(values))

    def to_flat_snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._values)

    def __repr__(self) -> str:
        return f"InMemoryRecord({self._values!r})"


class InMemoryCollection:
    """A named collection with field metadata and auto-increment keys."""

    def __init__(
        self,
        name: str,
        fields: Mapping[str, Any],
        *,
        identifier: str = "id",
    ) -> None:
        """Initialize an empty collection.

        Args:
            name: Collection name.
            fields: Field name to descriptor. A None descriptor declares a
                field with no metadata (the identifier usually is one).
            identifier: Primary key field, filled in on create.
        """
        self.name = name
        self.identifier = identifier
        self._fields = dict(fields)
        self._rows: dict[Any, dict[str, Any]] = {}
        self._keys = itertools.count(1)
        self.create_calls: list[dict[str, Any]] = []

    def field_metadata(self, field_name: str) -> Any | None:
        return self._fields.get(field_name)

    async def fetch_one(self, key: Any) -> InMemoryRecord | None:
        row = self._rows.get(key)
        return None if row is None else InMemoryRecord(row)

    async def create(self, values: Mapping[str, Any]) -> InMemoryRecord:
        """Store `values` under a fresh key and return the stored record."""
        self.create_calls.append(copy.deepcopy(dict(values)))
        key = next(self._keys)
        while key in self._rows:
            key = next(self._keys)
        row = {self.identifier: key}
        row.update(
            (k, copy.deepcopy(v)) for k, v in values.items() if k != self.identifier
        )
        self._rows[key] = row
        return InMemoryRecord(row)

    def insert(self, row: Mapping[str, Any]) -> InMemoryRecord:
        """Seed a row as-is, keeping its own key when it has one."""
        data = copy.deepcopy(dict(row))
        key = data.get(self.identifier)
        if key is None:
            key = next(self._keys)
            data[self.identifier] = key
        self._rows[key] = data
        return InMemoryRecord(data)

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryRecordStore:
    """Maps collection names to in-memory collections."""

    def __init__(self) -> None:
        self._collections: dict[str, InMemoryCollection] = {}

    def define_collection(
        self,
        name: str,
        fields: Mapping[str, Any],
        *,
        identifier: str = "id",
    ) -> InMemoryCollection:
        """Create (or replace) a collection and return it."""
        collection = InMemoryCollection(name, fields, identifier=identifier)
        self._collections[name] = collection
        return collection

    def resolve_collection(self, name: str) -> InMemoryCollection | None:
        return self._collections.get(name)
