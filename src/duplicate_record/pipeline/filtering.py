"""Field filtering and override application.

Both passes are pure: they read a snapshot and return a fresh dict, leaving
their inputs untouched.
"""

from collections.abc import Callable, Iterable, Mapping
import logging
from typing import Any

from duplicate_record.core.fields import classify_field
from duplicate_record.core.types import FieldKind, OverrideField

logger = logging.getLogger(__name__)


def filter_duplicable_fields(
    snapshot: Mapping[str, Any],
    field_metadata: Callable[[str], Any],
    *,
    identifier_field: str = "id",
    extra_relation_types: Iterable[str] = (),
    log: Any = logger,
) -> dict[str, Any]:
    """Return the fields of `snapshot` that a duplicate should carry.

    Walks the snapshot in its own key order and keeps a field only when its
    descriptor classifies as SCALAR. The identifier field is always dropped,
    relation fields are dropped, and fields the schema does not know about
    are dropped.
    """
    relation_types = frozenset(extra_relation_types)
    values: dict[str, Any] = {}
    for name, value in snapshot.items():
        if name == identifier_field:
            continue
        kind = classify_field(field_metadata(name), relation_types)
        if kind is FieldKind.SCALAR:
            values[name] = value
        elif kind is FieldKind.NO_METADATA:
            log.debug("Skipping field %r: not defined on the collection", name)
    return values


def apply_overrides(
    values: Mapping[str, Any],
    overrides: Iterable[OverrideField],
    *,
    identifier_field: str = "id",
    log: Any = logger,
) -> dict[str, Any]:
    """Apply overrides in order, last write wins, never touching the identifier.

    An override may introduce a field that was not in the source snapshot.
    """
    result = dict(values)
    for override in overrides:
        if override.field == identifier_field:
            log.debug('Ignoring override of identifier field "%s"', override.field)
            continue
        log.debug('Overriding field "%s"', override.field)
        result[override.field] = override.value
    return result
