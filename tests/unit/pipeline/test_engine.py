"""Behavioral tests for DuplicationEngine."""

import logging

import pytest

from duplicate_record.config.types import FrozenConfig
from duplicate_record.core.types import (
    DuplicationRequest,
    JobStatus,
    Outcome,
    OverrideField,
)
from duplicate_record.pipeline.engine import DuplicationEngine, duplicate
from duplicate_record.telemetry import InMemoryReporter

USER_FIELDS = {
    "id": None,
    "name": {"type": "string"},
    "email": {"type": "string"},
    "age": {"type": "integer"},
}
JOHN = {"id": 1, "name": "John Doe", "email": "john@example.com", "age": 30}


@pytest.fixture
def users(mock_collection, record_factory, fields_factory):
    mock_collection.field_metadata.side_effect = fields_factory(USER_FIELDS)
    mock_collection.fetch_one.return_value = record_factory(dict(JOHN))
    mock_collection.create.side_effect = lambda values: record_factory(
        {"id": 2, **values}
    )
    return mock_collection


def _created_values(collection) -> dict:
    collection.create.assert_awaited_once()
    return collection.create.await_args.args[0]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_duplicates_basic_fields(mock_store, users, processor):
    engine = DuplicationEngine(mock_store)

    outcome = await engine.duplicate(
        DuplicationRequest(collection_name="users", source_record_id=1), processor
    )

    assert isinstance(outcome, Outcome)
    assert outcome.status == JobStatus.RESOLVED
    assert outcome.new_record_id == 2
    assert outcome.result == {
        "id": 2,
        "name": "John Doe",
        "email": "john@example.com",
        "age": 30,
    }
    mock_store.resolve_collection.assert_called_once_with("users")
    users.fetch_one.assert_awaited_once_with(1)
    assert _created_values(users) == {
        "name": "John Doe",
        "email": "john@example.com",
        "age": 30,
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_identifier_override_is_ignored(mock_store, users, processor):
    request = DuplicationRequest(
        collection_name="users",
        source_record_id=1,
        override_fields=(OverrideField("id", 999), OverrideField("name", "Jane Doe")),
    )

    outcome = await DuplicationEngine(mock_store).duplicate(request, processor)

    assert outcome.status == JobStatus.RESOLVED
    assert _created_values(users) == {
        "name": "Jane Doe",
        "email": "john@example.com",
        "age": 30,
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_override_may_introduce_new_field(mock_store, users, processor):
    request = DuplicationRequest(
        collection_name="users",
        source_record_id=1,
        override_fields=(OverrideField("status", "inactive"),),
    )

    await DuplicationEngine(mock_store).duplicate(request, processor)

    assert _created_values(users)["status"] == "inactive"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_source_id_falls_back_to_previous_result(mock_store, users, processor):
    request = DuplicationRequest(collection_name="users", previous_result={"id": 42})

    outcome = await DuplicationEngine(mock_store).duplicate(request, processor)

    assert outcome.status == JobStatus.RESOLVED
    users.fetch_one.assert_awaited_once_with(42)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_explicit_source_id_wins_over_previous_result(
    mock_store, users, processor
):
    request = DuplicationRequest(
        collection_name="users", source_record_id=7, previous_result={"id": 42}
    )

    await DuplicationEngine(mock_store).duplicate(request, processor)

    users.fetch_one.assert_awaited_once_with(7)


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("name", [None, "", "   "])
async def test_missing_collection_fails(mock_store, processor, name):
    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name=name, source_record_id=1), processor
    )

    assert outcome.status == JobStatus.FAILED
    assert "Collection is required" in outcome.error
    mock_store.resolve_collection.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_collection_fails(mock_store, processor):
    mock_store.resolve_collection.return_value = None

    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name="non_existent_collection", source_record_id=1),
        processor,
    )

    assert outcome.status == JobStatus.FAILED
    assert 'Collection "non_existent_collection" not found' in outcome.error


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_source_id_fails(mock_store, mock_collection, processor):
    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name="users"), processor
    )

    assert outcome.status == JobStatus.FAILED
    assert "Source record ID is required" in outcome.error
    mock_collection.fetch_one.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_source_record_fails(mock_store, mock_collection, processor):
    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name="users", source_record_id=999), processor
    )

    assert outcome.status == JobStatus.FAILED
    assert 'Source record with ID "999" not found' in outcome.error
    mock_collection.create.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_error_is_a_hard_failure_by_default(
    mock_store, mock_collection, processor, caplog
):
    mock_collection.fetch_one.side_effect = RuntimeError("Database error")
    caplog.set_level(logging.ERROR, logger=processor.logger.name)

    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name="users", source_record_id=1), processor
    )

    assert outcome.status == JobStatus.FAILED
    assert outcome.is_failure
    assert "Database error" in outcome.error
    assert "RuntimeError" in outcome.stack
    assert outcome.new_record_id is None
    assert any(r.levelno == logging.ERROR for r in caplog.records)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_error_is_kept_as_data_when_ignored(
    mock_store, mock_collection, processor
):
    mock_collection.fetch_one.side_effect = RuntimeError("Database error")

    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(
            collection_name="users", source_record_id=1, ignore_failure=True
        ),
        processor,
    )

    assert outcome.status == JobStatus.RESOLVED
    assert not outcome.is_failure
    assert "Database error" in outcome.error
    assert outcome.stack
    assert outcome.new_record_id is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_error_is_reported(mock_store, users, processor):
    users.create.side_effect = RuntimeError("unique constraint violated")

    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name="users", source_record_id=1), processor
    )

    assert outcome.status == JobStatus.FAILED
    assert "unique constraint violated" in outcome.error


@pytest.mark.unit
@pytest.mark.asyncio
async def test_execution_steps_are_logged(mock_store, users, processor, caplog):
    caplog.set_level(logging.DEBUG, logger=processor.logger.name)

    await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(
            collection_name="users",
            source_record_id=1,
            override_fields=(OverrideField("name", "Jane Doe"),),
        ),
        processor,
    )

    messages = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert (
        logging.INFO,
        "DuplicateRecord instruction starting for collection: users",
    ) in messages
    assert any(
        lvl == logging.DEBUG and "fetching source record with ID: 1" in msg
        for lvl, msg in messages
    )
    assert any(
        lvl == logging.DEBUG and "duplicating record" in msg for lvl, msg in messages
    )
    assert any(
        lvl == logging.DEBUG and 'Overriding field "name"' in msg
        for lvl, msg in messages
    )
    assert any(
        lvl == logging.INFO and "completed successfully. New record ID: 2" in msg
        for lvl, msg in messages
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_custom_identifier_field(
    mock_store, mock_collection, record_factory, fields_factory, processor
):
    mock_collection.field_metadata.side_effect = fields_factory(
        {"uuid": {"type": "uuid"}, "name": {"type": "string"}}
    )
    mock_collection.fetch_one.return_value = record_factory({"uuid": "a", "name": "n"})
    mock_collection.create.return_value = record_factory({"uuid": "b", "name": "n"})

    outcome = await DuplicationEngine(
        mock_store, FrozenConfig(identifier_field="uuid")
    ).duplicate(
        DuplicationRequest(
            collection_name="things",
            source_record_id="a",
            override_fields=(OverrideField("uuid", "forced"),),
        ),
        processor,
    )

    assert outcome.new_record_id == "b"
    mock_collection.create.assert_awaited_once_with({"name": "n"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_error_column_does_not_mask_success(
    mock_store, mock_collection, record_factory, fields_factory, processor
):
    mock_collection.field_metadata.side_effect = fields_factory(
        {"id": None, "error": {"type": "string"}}
    )
    mock_collection.fetch_one.return_value = record_factory({"id": 1, "error": "timeout"})
    mock_collection.create.side_effect = lambda values: record_factory(
        {"id": 2, **values}
    )

    outcome = await DuplicationEngine(mock_store).duplicate(
        DuplicationRequest(collection_name="jobs", source_record_id=1), processor
    )

    assert outcome.status == JobStatus.RESOLVED
    assert outcome.result == {"id": 2, "error": "timeout"}
    assert outcome.new_record_id == 2
    assert outcome.error is None
    assert not outcome.errored


@pytest.mark.unit
@pytest.mark.asyncio
async def test_module_level_duplicate_helper(mock_store, users, processor):
    outcome = await duplicate(
        mock_store, DuplicationRequest(collection_name="users", source_record_id=1), processor
    )
    assert outcome.status == JobStatus.RESOLVED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_telemetry_scopes_when_enabled(mock_store, users, processor, monkeypatch):
    monkeypatch.setenv("DUPLICATE_RECORD_TELEMETRY", "1")
    reporter = InMemoryReporter()
    engine = DuplicationEngine(mock_store, reporters=[reporter])

    await engine.duplicate(
        DuplicationRequest(collection_name="users", source_record_id=1), processor
    )
    users.fetch_one.side_effect = RuntimeError("boom")
    await engine.duplicate(
        DuplicationRequest(collection_name="users", source_record_id=1), processor
    )

    assert {"duplicate.fetch", "duplicate.create"} <= set(reporter.timings)
    assert len(reporter.metrics["duplicate.failure"]) == 1
