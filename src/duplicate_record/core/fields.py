"""Classification of field descriptors returned by a record store."""

from collections.abc import Iterable, Mapping
from typing import Any

from duplicate_record.core.types import FieldKind

# Relation tags understood by every host; extra tags come from settings.
RELATION_TYPES: frozenset[str] = frozenset(
    {"belongsTo", "hasOne", "hasMany", "belongsToMany"}
)


def descriptor_type(descriptor: Any) -> str | None:
    """Return the `type` tag of a descriptor given as a mapping or an object."""
    if isinstance(descriptor, Mapping):
        tag = descriptor.get("type")
    else:
        tag = getattr(descriptor, "type", None)
    return tag if isinstance(tag, str) else None


def classify_field(
    descriptor: Any, extra_relation_types: Iterable[str] = ()
) -> FieldKind:
    """Classify a descriptor as missing, a plain scalar, or a relation.

    Only the descriptor's presence and its `type` tag are considered; field
    names are never inspected, so a scalar foreign key such as `authorId`
    classifies as SCALAR as long as its own descriptor is not a relation.
    """
    if descriptor is None:
        return FieldKind.NO_METADATA
    tag = descriptor_type(descriptor)
    if tag is not None and (tag in RELATION_TYPES or tag in extra_relation_types):
        return FieldKind.RELATION
    return FieldKind.SCALAR
