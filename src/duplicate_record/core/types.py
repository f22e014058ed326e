"""Core data types that flow through a duplication.

Requests and intermediate values are immutable; every invocation builds its
own and discards them when it finishes. The only mutable type is `Outcome`,
which mirrors the host workflow's job record so the host can revisit it on
resume.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import enum
import typing

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _is_tuple_of(value: object, typ: type | tuple[type, ...]) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, typ) for v in value)


# --- Result Monad ---
# Stages return Success|Failure instead of raising so the engine can turn
# every error into an Outcome in exactly one place.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed result, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Field metadata ---


class FieldKind(enum.Enum):
    """How a field's metadata classifies it for duplication."""

    NO_METADATA = "no_metadata"
    SCALAR = "scalar"
    RELATION = "relation"


# --- Request ---


@dataclasses.dataclass(frozen=True, slots=True)
class OverrideField:
    """A caller-supplied value that supersedes the copied source value."""

    field: str
    value: typing.Any = None

    def __post_init__(self) -> None:
        """Validate the field name."""
        _require(
            condition=isinstance(self.field, str) and self.field.strip() != "",
            message="must be a non-empty str",
            field_name="field",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class DuplicationRequest:
    """Everything the engine needs to duplicate one record.

    `collection_name` and `source_record_id` are deliberately optional here;
    their absence is reported as a failed outcome rather than a constructor
    error, so a misconfigured workflow step can still be recorded by the host.
    """

    collection_name: str | None
    source_record_id: typing.Any = None
    override_fields: tuple[OverrideField, ...] = ()
    ignore_failure: bool = False
    previous_result: typing.Any = None

    def __post_init__(self) -> None:
        """Validate container types."""
        _require(
            condition=_is_tuple_of(self.override_fields, OverrideField),
            message="must be a tuple[OverrideField, ...]",
            field_name="override_fields",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.ignore_failure, bool),
            message="must be a bool",
            field_name="ignore_failure",
            exc=TypeError,
        )

    def resolve_source_record_id(self) -> typing.Any:
        """Return the explicit source id, else the previous result's `id`."""
        if self.source_record_id is not None and self.source_record_id != "":
            return self.source_record_id
        previous = self.previous_result
        if previous is None:
            return None
        if isinstance(previous, Mapping):
            return previous.get("id")
        return getattr(previous, "id", None)


@dataclasses.dataclass(frozen=True, slots=True)
class DuplicatedRecord:
    """The value produced by a successful duplication."""

    record_id: typing.Any
    snapshot: Mapping[str, typing.Any]
    values: Mapping[str, typing.Any]


# --- Outcome ---


class JobStatus(enum.IntEnum):
    """Job status codes shared with the host workflow."""

    PENDING = 0
    RESOLVED = 1
    FAILED = -1


@dataclasses.dataclass(slots=True)
class Outcome:
    """Terminal result of one duplication attempt.

    On success `result` is the new record's flat snapshot. On failure, and on
    an ignored failure, it is `{"error": message, "stack": trace}` and
    `errored` is set; a success snapshot may itself have an `error` column.
    """

    status: JobStatus
    result: dict[str, typing.Any] = dataclasses.field(default_factory=dict)
    record_id: typing.Any = None
    errored: bool = False

    def set(self, key: str, value: typing.Any) -> None:
        """Assign an attribute by name, the way host job records are updated."""
        _require(
            condition=key in ("status", "result"),
            message=f"unknown outcome attribute {key!r}",
            field_name="key",
        )
        setattr(self, key, value)

    @property
    def is_failure(self) -> bool:
        return self.status == JobStatus.FAILED

    @property
    def error(self) -> str | None:
        return self.result.get("error") if self.errored else None

    @property
    def stack(self) -> str | None:
        return self.result.get("stack") if self.errored else None

    @property
    def new_record_id(self) -> typing.Any:
        return self.record_id


def reconsider(outcome: Outcome, ignore_failure: bool) -> Outcome:
    """Re-evaluate a recorded outcome when a pipeline revisits the step.

    Returns the same object unless it is a failure and failures are ignored,
    in which case a copy with status RESOLVED is returned. The error payload is
    kept as data either way.
    """
    if not outcome.is_failure or not ignore_failure:
        return outcome
    return dataclasses.replace(
        outcome, status=JobStatus.RESOLVED, result=dict(outcome.result)
    )
