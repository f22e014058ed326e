"""Workflow instruction that duplicates a record with field filtering and overrides."""

import importlib.metadata
import logging

from duplicate_record.config import FrozenConfig, StepConfig, resolve_config
from duplicate_record.core.contracts import (
    CollectionHandle,
    ExecutionContext,
    Record,
    RecordStore,
)
from duplicate_record.core.exceptions import (
    ConfigurationError,
    DuplicateRecordError,
    NotFoundError,
    PluginError,
    StoreOperationError,
)
from duplicate_record.core.fields import classify_field
from duplicate_record.core.types import (
    DuplicatedRecord,
    DuplicationRequest,
    Failure,
    FieldKind,
    JobStatus,
    Outcome,
    OverrideField,
    Result,
    Success,
    reconsider,
)
from duplicate_record.instruction import DuplicateRecordInstruction
from duplicate_record.pipeline.engine import DuplicationEngine, duplicate
from duplicate_record.pipeline.filtering import apply_overrides, filter_duplicable_fields
from duplicate_record.plugin import WorkflowDuplicateRecordPlugin
from duplicate_record.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("duplicate-record")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the host configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Engine and host bindings
    "DuplicationEngine",
    "duplicate",
    "DuplicateRecordInstruction",
    "WorkflowDuplicateRecordPlugin",
    # Field handling
    "classify_field",
    "filter_duplicable_fields",
    "apply_overrides",
    # Types
    "DuplicationRequest",
    "OverrideField",
    "DuplicatedRecord",
    "FieldKind",
    "JobStatus",
    "Outcome",
    "reconsider",
    "Result",
    "Success",
    "Failure",
    # Contracts
    "RecordStore",
    "CollectionHandle",
    "Record",
    "ExecutionContext",
    # Configuration
    "FrozenConfig",
    "StepConfig",
    "resolve_config",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "DuplicateRecordError",
    "ConfigurationError",
    "NotFoundError",
    "StoreOperationError",
    "PluginError",
]
