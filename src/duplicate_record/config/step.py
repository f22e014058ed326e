"""Parsing of a workflow node's step configuration."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from duplicate_record.core.types import DuplicationRequest, OverrideField


class OverrideFieldConfig(BaseModel):
    """One `{field, value}` entry of `overrideFields`."""

    model_config = ConfigDict(extra="ignore")

    field: str = Field(min_length=1)
    value: Any = None


class StepConfig(BaseModel):
    """The step configuration object a workflow node carries.

    Keys use the host's camelCase names; snake_case names are accepted too.
    Required values are optional here on purpose: the engine reports their
    absence as a failed outcome.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    collection: str | None = None
    source_record_id: Any = Field(default=None, alias="sourceRecordId")
    override_fields: list[OverrideFieldConfig] = Field(
        default_factory=list, alias="overrideFields"
    )
    ignore_fail: bool = Field(default=False, alias="ignoreFail")

    @field_validator("override_fields", mode="before")
    @classmethod
    def none_means_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("ignore_fail", mode="before")
    @classmethod
    def none_means_false(cls, v: Any) -> Any:
        return False if v is None else v

    @classmethod
    def read_ignore_fail(cls, raw: Any) -> bool:
        """Read only `ignoreFail`, coerced as a full parse would coerce it.

        Used when the rest of the configuration is unusable. A value that is
        not a valid boolean counts as False.
        """
        if not isinstance(raw, Mapping):
            return False
        value = raw.get("ignoreFail", raw.get("ignore_fail"))
        try:
            return cls.model_validate({"ignoreFail": value}).ignore_fail
        except ValidationError:
            return False

    def to_request(self, previous_result: Any = None) -> DuplicationRequest:
        """Build the engine request, carrying the prior step's result."""
        return DuplicationRequest(
            collection_name=self.collection,
            source_record_id=self.source_record_id,
            override_fields=tuple(
                OverrideField(o.field, o.value) for o in self.override_fields
            ),
            ignore_failure=self.ignore_fail,
            previous_result=previous_result,
        )
