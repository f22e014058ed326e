"""
Global test configuration and shared doubles for the record store contract.
"""

from collections.abc import Callable
import logging
import os
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def isolate_duplicate_record_env(request, monkeypatch):
    """Ensure a clean DUPLICATE_RECORD_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("DUPLICATE_RECORD_"):
            monkeypatch.delenv(key, raising=False)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests against the in-memory store",
        "contract: Invariants of the public types and protocols",
        "allow_env_pollution: Keep DUPLICATE_RECORD_* variables from the real env",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Record store doubles ---


def make_record(snapshot: dict[str, Any]) -> MagicMock:
    """A record double whose flat snapshot is `snapshot`."""
    record = MagicMock(name="record")
    record.to_flat_snapshot.return_value = snapshot
    return record


def field_lookup(fields: dict[str, Any]) -> Callable[[str], Any]:
    """`field_metadata` side effect: unknown names have no descriptor."""
    return lambda name: fields.get(name)


@pytest.fixture
def record_factory() -> Callable[[dict[str, Any]], MagicMock]:
    return make_record


@pytest.fixture
def fields_factory() -> Callable[[dict[str, Any]], Callable[[str], Any]]:
    return field_lookup


@pytest.fixture
def mock_collection() -> MagicMock:
    """A collection handle with async fetch/create and no known fields."""
    collection = MagicMock(name="collection")
    collection.fetch_one = AsyncMock(return_value=None)
    collection.create = AsyncMock()
    collection.field_metadata = MagicMock(side_effect=field_lookup({}))
    return collection


@pytest.fixture
def mock_store(mock_collection) -> MagicMock:
    store = MagicMock(name="store")
    store.resolve_collection.return_value = mock_collection
    return store


@pytest.fixture
def step_logger() -> logging.Logger:
    """A real logger so assertions can go through caplog."""
    return logging.getLogger("tests.duplicate_record.step")


@pytest.fixture
def processor(step_logger) -> SimpleNamespace:
    """Execution context: config values pass through unchanged."""
    return SimpleNamespace(
        resolve_config_value=MagicMock(side_effect=lambda raw: raw),
        logger=step_logger,
    )
