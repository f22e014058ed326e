"""Configuration data types, following the resolve-once, freeze-then-flow pattern."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    Carries the origin of every field for audit and debugging.
    """

    identifier_field: str
    extra_relation_types: tuple[str, ...]
    instruction_name: str
    workflow_plugin_name: str

    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration handed to the engine."""
        return FrozenConfig(
            identifier_field=self.identifier_field,
            extra_relation_types=self.extra_relation_types,
            instruction_name=self.instruction_name,
            workflow_plugin_name=self.workflow_plugin_name,
        )


@dataclass(frozen=True, slots=True)
class FrozenConfig:
    """Immutable settings consumed by the engine, instruction and plugin."""

    identifier_field: str = "id"
    extra_relation_types: tuple[str, ...] = ("belongsToArray",)
    instruction_name: str = "duplicate-record"
    workflow_plugin_name: str = "workflow"
