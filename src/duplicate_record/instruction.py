"""Host binding: the `duplicate-record` workflow instruction."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from duplicate_record.config.step import StepConfig
from duplicate_record.config.types import FrozenConfig
from duplicate_record.core.exceptions import ConfigurationError
from duplicate_record.core.types import DuplicationRequest, JobStatus, Outcome
from duplicate_record.pipeline.engine import DuplicationEngine

if TYPE_CHECKING:
    from duplicate_record.core.contracts import (
        ExecutionContext,
        Job,
        RecordStore,
        WorkflowNode,
    )
    from duplicate_record.telemetry import TelemetryReporter

logger = logging.getLogger(__name__)


class DuplicateRecordInstruction:
    """Workflow instruction that duplicates a record.

    The host calls `run` when the node executes and `resume` when it revisits
    a recorded job for the node.
    """

    def __init__(
        self,
        store: RecordStore,
        config: FrozenConfig | None = None,
        *,
        reporters: Iterable[TelemetryReporter] = (),
    ) -> None:
        """Initialize with the host's record store and resolved settings."""
        self.config = config or FrozenConfig()
        self.engine = DuplicationEngine(store, self.config, reporters=reporters)

    async def run(
        self,
        node: WorkflowNode,
        prev_job: Job | Mapping[str, Any] | None,
        processor: ExecutionContext,
    ) -> Outcome:
        """Execute the node: parse its configuration and duplicate the record."""
        raw = node.config or {}
        try:
            raw = _resolve_config(processor, raw)
            request = _parse_request(raw, prev_job)
        except ConfigurationError as e:
            return self.engine.failure_outcome(
                e,
                ignore_failure=StepConfig.read_ignore_fail(raw),
                log=getattr(processor, "logger", None) or logger,
            )
        return await self.engine.duplicate(request, processor)

    async def resume(
        self, node: WorkflowNode, job: Job, processor: ExecutionContext
    ) -> Job:
        """Revisit a recorded job.

        Only a failed job whose node ignores failures changes: its status is
        set to RESOLVED in place and its error payload is kept.
        """
        _ = processor
        if job.status != JobStatus.FAILED or not StepConfig.read_ignore_fail(
            node.config
        ):
            return job
        job.set("status", JobStatus.RESOLVED)
        return job


def _resolve_config(processor: Any, raw: Any) -> Any:
    try:
        return processor.resolve_config_value(raw)
    except Exception as e:
        raise ConfigurationError(f"Could not resolve step configuration: {e}") from e


def _parse_request(raw: Any, prev_job: Any) -> DuplicationRequest:
    try:
        step = StepConfig.model_validate(raw or {})
        return step.to_request(previous_result=_job_result(prev_job))
    except (ValidationError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid step configuration: {e}") from e


def _job_result(prev_job: Any) -> Any:
    if prev_job is None:
        return None
    if isinstance(prev_job, Mapping):
        return prev_job.get("result")
    return getattr(prev_job, "result", None)
