"""Protocols for the collaborators a duplication depends on.

The host framework owns the record store and the execution context. These
protocols pin down the small surface the engine actually touches so that any
host (or a test double) can be plugged in.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Record(Protocol):
    """A stored record that can serialize itself to a flat mapping."""

    def to_flat_snapshot(self) -> Mapping[str, Any]: ...  # noqa: D102


class CollectionHandle(Protocol):
    """A resolved collection: field metadata plus single-record reads and writes."""

    def field_metadata(self, field_name: str) -> Any | None:
        """Return the descriptor for `field_name`, or None if it is unknown."""
        ...

    async def fetch_one(self, key: Any) -> Record | None:
        """Return the record whose primary key is `key`, if any."""
        ...

    async def create(self, values: Mapping[str, Any]) -> Record:
        """Create a record from `values` and return it."""
        ...


class RecordStore(Protocol):
    """Looks up collections by name."""

    def resolve_collection(self, name: str) -> CollectionHandle | None: ...  # noqa: D102


class StepLogger(Protocol):
    """The logging surface the host provides per invocation."""

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...  # noqa: D102
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...  # noqa: D102
    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...  # noqa: D102


class ExecutionContext(Protocol):
    """Per-invocation services supplied by the host pipeline."""

    logger: StepLogger

    def resolve_config_value(self, raw: Any) -> Any:
        """Resolve a configuration value that may be a template or expression."""
        ...


class WorkflowNode(Protocol):
    """A node of the host workflow carrying this step's raw configuration."""

    id: Any
    config: Mapping[str, Any] | None


class Job(Protocol):
    """The host's record of one step execution."""

    status: Any
    result: Any

    def set(self, key: str, value: Any) -> None: ...  # noqa: D102
