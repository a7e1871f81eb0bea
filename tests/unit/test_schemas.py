"""Tests for schema validation of audit events and processing results."""

from collections.abc import Callable

import jsonschema
import pytest

from dupguard.engine import process_duplicates
from dupguard.store import MemoryRecord, MemoryRecordStore, load_schema


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    return load_schema("log_event.schema.json")


@pytest.fixture(scope="module")
def result_schema() -> dict:
    """Load processing result JSON schema."""
    return load_schema("processing_result.schema.json")


@pytest.mark.unit
def test_generated_events_and_result_validate(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
    audit_logger,
    read_events,
    event_schema: dict,
    result_schema: dict,
) -> None:
    """Test a real run produces schema-valid events and result."""
    merged = make_record("NEW1", doi="10.1/a")
    flagged = make_record("NEW2", title="Deep Learning Basics", creators=["Smith"], date="2020")
    store = make_store(
        merged,
        flagged,
        make_record("OLD1", doi="10.1/a"),
        make_record("OLD2", title="Deep Learning Basics Part 2", creators=["Smith"], date="2020"),
    )

    result = process_duplicates([merged, flagged], store, logger=audit_logger)

    jsonschema.validate(instance=result.to_dict(), schema=result_schema)
    events = read_events()
    assert events
    for event in events:
        jsonschema.validate(instance=event, schema=event_schema)


@pytest.mark.unit
def test_invalid_data_rejected_by_schema(event_schema: dict, result_schema: dict) -> None:
    """Test schemas reject invalid levels, confidence and missing fields."""
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={"ts": "t", "run_id": "r", "level": "TRACE", "event": "e", "data": {}},
            schema=event_schema,
        )

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance={"ts": "t", "run_id": "r"}, schema=event_schema)

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={
                "auto_merged": [],
                "possible_duplicates": [
                    {
                        "new_key": "a",
                        "new_title": "t",
                        "existing_key": "b",
                        "existing_title": "t",
                        "score": 80,
                        "reason": "r",
                        "confidence": "low",
                        "message": "m",
                    }
                ],
                "processed": True,
                "errors": [],
                "records": [],
            },
            schema=result_schema,
        )
