"""Timings and failure counts for duplication runs.

Off unless `DUPLICATE_RECORD_TELEMETRY=1` is set and at least one reporter is
passed to the engine. While off, every call goes to a shared stand-in that
does nothing.
"""

from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
import logging
import os
import time
from typing import Any, Protocol, runtime_checkable

log = logging.getLogger(__name__)

ENV_FLAG = "DUPLICATE_RECORD_TELEMETRY"


def telemetry_enabled() -> bool:
    return os.getenv(ENV_FLAG) == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Receives timings and counters; any object with these two methods works."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


class _Silent:
    __slots__ = ()

    @contextmanager
    def __call__(self, scope: str, **metadata: Any) -> Iterator[None]:  # noqa: ARG002
        yield

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _Reporting:
    """Times a `with ctx(scope)` block and forwards counters to reporters."""

    __slots__ = ("_reporters",)

    def __init__(self, reporters: tuple[TelemetryReporter, ...]):
        self._reporters = reporters

    @contextmanager
    def __call__(self, scope: str, **metadata: Any) -> Iterator[None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            self._emit("record_timing", scope, time.perf_counter() - started, metadata)

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        self._emit("record_metric", name, increment, {"metric_type": "counter", **metadata})

    def _emit(self, method: str, scope: str, value: Any, metadata: dict[str, Any]) -> None:
        # A broken reporter must not turn a duplication into a failure.
        for reporter in self._reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception:
                log.exception(
                    "Telemetry reporter %s failed on %s", type(reporter).__name__, scope
                )


type TelemetryContextProtocol = _Silent | _Reporting

_SILENT = _Silent()


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return a reporting context, or the shared silent one when telemetry is off."""
    if reporters and telemetry_enabled():
        return _Reporting(reporters)
    return _SILENT


class InMemoryReporter:
    """Keeps the most recent entries per scope, for development and tests."""

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = {}

    def _bucket(self, store: dict[str, deque], scope: str) -> deque:
        return store.setdefault(scope, deque(maxlen=self.max_entries))

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self._bucket(self.timings, scope).append((duration, metadata))

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self._bucket(self.metrics, scope).append((value, metadata))
