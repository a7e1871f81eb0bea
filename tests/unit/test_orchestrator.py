"""Tests for batch duplicate processing and detect-only mode."""

from collections.abc import Callable

import pytest

import dupguard.engine.orchestrator as orchestrator
from dupguard.engine import ResolverConfig, detect_duplicates, process_duplicates
from dupguard.store import MemoryRecord, MemoryRecordStore


@pytest.mark.unit
def test_merged_slot_replaced_without_mutating_input(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test the output list substitutes the existing record; the input list is untouched."""
    new = make_record("NEW", doi="10.1/a")
    unique = make_record("UNIQUE", title="Nothing Like It")
    existing = make_record("OLD", doi="10.1/a")
    store = make_store(new, unique, existing)
    batch = [new, unique]

    result = process_duplicates(batch, store)

    assert batch == [new, unique]
    assert [r.key for r in result.records] == ["OLD", "UNIQUE"]
    assert result.records[0] is existing
    assert result.processed
    assert result.errors == []


@pytest.mark.unit
def test_record_failure_is_isolated(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
    monkeypatch: pytest.MonkeyPatch,
    audit_logger,
    read_events,
) -> None:
    """Test one record's failure is reported and the batch continues."""
    bad = make_record("BAD", doi="10.1/bad")
    good = make_record("GOOD", doi="10.1/good")
    store = make_store(bad, good, make_record("OLD", doi="10.1/good"))

    real_find = orchestrator.find_candidates

    def flaky_find(identifiers, record_key, *args, **kwargs):  # type: ignore[no-untyped-def]
        if record_key == "BAD":
            raise RuntimeError("search backend unavailable")
        return real_find(identifiers, record_key, *args, **kwargs)

    monkeypatch.setattr(orchestrator, "find_candidates", flaky_find)

    result = process_duplicates([bad, good], store, logger=audit_logger)

    assert result.errors == [
        "Error processing duplicates for record BAD: search backend unavailable"
    ]
    assert [a.deleted_key for a in result.auto_merged] == ["GOOD"]
    assert [r.key for r in result.records] == ["BAD", "OLD"]

    errors = [e for e in read_events() if e["event"] == "error"]
    assert errors[0]["rid"] == "BAD"
    assert "traceback" in errors[0]["data"]


@pytest.mark.unit
def test_critical_error_keeps_partial_results(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test a batch-level failure still returns a result with every slot."""
    records = [make_record("A"), make_record("B")]

    def broken_config(config):  # type: ignore[no-untyped-def]
        raise RuntimeError("registry unavailable")

    monkeypatch.setattr(orchestrator, "strategies_from_config", broken_config)

    result = process_duplicates(records, make_store(*records))

    assert result.errors == ["Critical processing error: registry unavailable"]
    assert [r.key for r in result.records] == ["A", "B"]
    assert result.auto_merged == []


@pytest.mark.unit
def test_stage_events_logged(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
    audit_logger,
    read_events,
) -> None:
    """Test stage start/finish events with counters."""
    new = make_record("NEW", doi="10.1/a")
    store = make_store(new, make_record("OLD", doi="10.1/a"))

    process_duplicates([new], store, logger=audit_logger)

    events = read_events()
    assert events[0]["event"] == "stage_started"
    finished = [e for e in events if e["event"] == "stage_finished"]
    assert finished[0]["data"]["counters"] == {
        "records_in": 1,
        "auto_merged": 1,
        "possible_duplicates": 0,
        "errors": 0,
    }


@pytest.mark.unit
def test_dry_run_never_deletes(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test dry runs flag auto-merge tier candidates instead of deleting."""
    new = make_record("NEW", doi="10.1/a")
    store = make_store(new, make_record("OLD", doi="10.1/a"))

    result = process_duplicates([new], store, dry_run=True)

    assert result.auto_merged == []
    assert [f.existing_key for f in result.possible_duplicates] == ["OLD"]
    assert store.get("NEW") is new


@pytest.mark.unit
def test_detect_duplicates_is_idempotent(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test detect-only runs repeat the same answer and leave the store intact."""
    new = make_record("NEW", title="Deep Learning Basics", creators=["Smith"], date="2020")
    store = make_store(
        new,
        make_record("SEQUEL", title="Deep Learning Basics Part 2", creators=["Smith"], date="2020"),
    )

    first = detect_duplicates(new, store)
    second = detect_duplicates(new, store)

    assert first == second
    assert [f.existing_key for f in first] == ["SEQUEL"]
    assert len(store) == 2


@pytest.mark.unit
def test_custom_config_applied(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test a disabled strategy finds nothing."""
    new = make_record("NEW", doi="10.1/a")
    store = make_store(new, make_record("OLD", doi="10.1/a"))

    result = process_duplicates([new], store, config=ResolverConfig(strategies=["isbn"]))

    assert result.auto_merged == []
    assert result.possible_duplicates == []
    assert store.get("NEW") is new
