"""The duplication engine.

Validates a request, fetches the source record, filters its fields, applies
overrides and creates the duplicate. Every error raised along the way is
turned into a `Failure` in `_attempt` and then into an `Outcome`; nothing
escapes `duplicate`.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import traceback
from typing import TYPE_CHECKING

from duplicate_record.config.types import FrozenConfig
from duplicate_record.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    StoreOperationError,
)
from duplicate_record.core.types import (
    DuplicatedRecord,
    DuplicationRequest,
    Failure,
    JobStatus,
    Outcome,
    Result,
    Success,
)
from duplicate_record.pipeline.filtering import apply_overrides, filter_duplicable_fields
from duplicate_record.telemetry import (
    TelemetryContext,
    TelemetryContextProtocol,
    TelemetryReporter,
)

if TYPE_CHECKING:
    from duplicate_record.core.contracts import (
        ExecutionContext,
        RecordStore,
        StepLogger,
    )

logger = logging.getLogger(__name__)


class DuplicationEngine:
    """Duplicates one record per call. Holds no per-request state."""

    def __init__(
        self,
        store: RecordStore,
        config: FrozenConfig | None = None,
        *,
        reporters: Iterable[TelemetryReporter] = (),
    ) -> None:
        """Initialize the engine.

        Args:
            store: The host's record store.
            config: Resolved settings; defaults are used when omitted.
            reporters: Optional telemetry reporters.
        """
        self.store = store
        self.config = config or FrozenConfig()
        self._reporters = tuple(reporters)

    async def duplicate(
        self, request: DuplicationRequest, context: ExecutionContext
    ) -> Outcome:
        """Duplicate the requested record and report the outcome.

        A failure yields status FAILED, or RESOLVED when the request ignores
        failures; in both cases the result is `{"error", "stack"}`.
        """
        log: StepLogger = getattr(context, "logger", None) or logger
        ctx = TelemetryContext(*self._reporters)

        result = await self._attempt(request, log, ctx)
        if isinstance(result, Success):
            record = result.value
            log.info(
                "DuplicateRecord completed successfully. New record ID: %s",
                record.record_id,
            )
            return Outcome(
                JobStatus.RESOLVED, dict(record.snapshot), record_id=record.record_id
            )

        return self.failure_outcome(
            result.error, ignore_failure=request.ignore_failure, log=log, ctx=ctx
        )

    def failure_outcome(
        self,
        error: BaseException,
        *,
        ignore_failure: bool,
        log: StepLogger = logger,
        ctx: TelemetryContextProtocol | None = None,
    ) -> Outcome:
        """Normalize an error into an outcome carrying `{"error", "stack"}`."""
        if ctx is None:
            ctx = TelemetryContext(*self._reporters)
        ctx.count("duplicate.failure", error_type=type(error).__name__)
        log.error("DuplicateRecord failed: %s", error, exc_info=error)
        payload = {
            "error": _message(error),
            "stack": "".join(traceback.format_exception(error)),
        }
        status = JobStatus.RESOLVED if ignore_failure else JobStatus.FAILED
        return Outcome(status, payload, errored=True)

    async def _attempt(
        self,
        request: DuplicationRequest,
        log: StepLogger,
        ctx: TelemetryContextProtocol,
    ) -> Result[DuplicatedRecord, Exception]:
        try:
            return Success(await self._duplicate(request, log, ctx))
        except Exception as e:
            return Failure(e)

    async def _duplicate(
        self,
        request: DuplicationRequest,
        log: StepLogger,
        ctx: TelemetryContextProtocol,
    ) -> DuplicatedRecord:
        name = request.collection_name
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Collection is required")
        log.info("DuplicateRecord instruction starting for collection: %s", name)

        collection = self.store.resolve_collection(name)
        if collection is None:
            raise NotFoundError(f'Collection "{name}" not found')

        source_id = request.resolve_source_record_id()
        if source_id is None or source_id == "":
            raise ConfigurationError("Source record ID is required")

        log.debug("DuplicateRecord fetching source record with ID: %s", source_id)
        with ctx("duplicate.fetch", collection=name):
            try:
                source = await collection.fetch_one(source_id)
            except Exception as e:
                raise StoreOperationError(_message(e), operation="fetch") from e
        if source is None:
            raise NotFoundError(f'Source record with ID "{source_id}" not found')

        identifier = self.config.identifier_field
        values = filter_duplicable_fields(
            dict(source.to_flat_snapshot()),
            collection.field_metadata,
            identifier_field=identifier,
            extra_relation_types=self.config.extra_relation_types,
            log=log,
        )
        values = apply_overrides(
            values, request.override_fields, identifier_field=identifier, log=log
        )

        log.debug("DuplicateRecord duplicating record with fields: %s", list(values))
        with ctx("duplicate.create", collection=name):
            try:
                created = await collection.create(values)
            except Exception as e:
                raise StoreOperationError(_message(e), operation="create") from e

        snapshot = dict(created.to_flat_snapshot())
        return DuplicatedRecord(
            record_id=snapshot.get(identifier), snapshot=snapshot, values=values
        )


def _message(error: BaseException) -> str:
    return str(error) or type(error).__name__


async def duplicate(
    store: RecordStore,
    request: DuplicationRequest,
    context: ExecutionContext,
    config: FrozenConfig | None = None,
) -> Outcome:
    """Convenience wrapper: duplicate one record with a throwaway engine."""
    return await DuplicationEngine(store, config).duplicate(request, context)

