"""Settings schema and validation using Pydantic.

This module defines the settings that validate and coerce configuration values
from the environment, `pyproject.toml` and programmatic overrides into the
correct types with proper defaults.
"""

from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from duplicate_record.core.fields import RELATION_TYPES


class DuplicateRecordSettings(BaseSettings):
    """Pydantic settings schema for the duplicate-record instruction.

    Integrates with environment variables using the DUPLICATE_RECORD_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUPLICATE_RECORD_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    identifier_field: str = Field(
        default="id",
        description="Primary key field; never copied and never overridden",
        min_length=1,
    )

    extra_relation_types: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("belongsToArray",),
        description="Relation tags treated like belongsTo/hasOne/hasMany/belongsToMany",
    )

    instruction_name: str = Field(
        default="duplicate-record",
        description="Name the instruction is registered under",
        min_length=1,
    )

    workflow_plugin_name: str = Field(
        default="workflow",
        description="Plugin manager key of the host workflow plugin",
        min_length=1,
    )

    @field_validator("extra_relation_types", mode="before")
    @classmethod
    def parse_relation_types(cls, v: Any) -> tuple[str, ...]:
        """Accept a comma separated string or any iterable of tags."""
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list | tuple | set | frozenset):
            raise ValueError(
                f"Invalid extra_relation_types: {v!r}. "
                "Expected a comma separated string or a list of strings"
            )
        tags = tuple(str(tag).strip() for tag in v if str(tag).strip())
        # Built-in relation tags are always honoured; no need to repeat them.
        return tuple(tag for tag in dict.fromkeys(tags) if tag not in RELATION_TYPES)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for origin annotation."""
        return {
            "identifier_field": self.identifier_field,
            "extra_relation_types": self.extra_relation_types,
            "instruction_name": self.instruction_name,
            "workflow_plugin_name": self.workflow_plugin_name,
        }
