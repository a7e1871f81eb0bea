"""Tests for the public API module."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from dupguard import ResolveError, delete_key, lookup_identifier, lookup_url, resolve_file
from dupguard.api import open_logger
from dupguard.engine import ResolverConfig
from dupguard.store import MemoryRecord, StoreError, load_store


@pytest.fixture
def library(
    make_record: Callable[..., MemoryRecord],
    write_store: Callable[..., Path],
) -> Path:
    """Store with a DOI duplicate, a title-only near duplicate and an unrelated record."""
    return write_store(
        make_record("OLD1", title="Graph Neural Networks", doi="10.1000/gnn"),
        make_record(
            "OLD2",
            title="Deep Learning Basics Part 2",
            creators=["Smith, John"],
            date="2020",
        ),
        make_record("NEW1", title="Graph neural networks", doi="10.1000/GNN"),
        make_record("NEW2", title="Deep Learning Basics", creators=["Smith, John"], date="2020"),
    )


@pytest.mark.unit
def test_resolve_file_merges_and_flags(library: Path) -> None:
    """Test resolve_file merges the DOI duplicate and flags the near duplicate."""
    result = resolve_file(library, ["NEW1", "NEW2"])

    assert [a.deleted_key for a in result.auto_merged] == ["NEW1"]
    assert [f.existing_key for f in result.possible_duplicates] == ["OLD2"]
    assert [r.key for r in result.records] == ["OLD1", "NEW2"]
    assert result.errors == []

    stored = load_store(library)
    assert "NEW1" not in stored
    assert "NEW2" in stored


@pytest.mark.unit
def test_resolve_file_dry_run_does_not_write(library: Path) -> None:
    """Test dry run leaves the store file byte-identical."""
    before = library.read_bytes()

    result = resolve_file(library, ["NEW1"], dry_run=True)

    assert result.auto_merged == []
    assert result.possible_duplicates[0].existing_key == "OLD1"
    assert library.read_bytes() == before


@pytest.mark.unit
def test_resolve_file_output_path(library: Path, tmp_path: Path) -> None:
    """Test output_path receives the updated store instead of the input."""
    output = tmp_path / "resolved.jsonl"

    resolve_file(library, ["NEW1"], output_path=output)

    assert "NEW1" in load_store(library)
    assert "NEW1" not in load_store(output)


@pytest.mark.unit
def test_resolve_file_respects_config(library: Path) -> None:
    """Test a raised flag threshold suppresses the near-duplicate warning."""
    config = ResolverConfig(auto_merge_threshold=99, flag_threshold=90)

    result = resolve_file(library, ["NEW2"], config=config)

    assert result.possible_duplicates == []
    assert result.auto_merged == []


@pytest.mark.unit
def test_resolve_file_unknown_key(library: Path) -> None:
    """Test an unknown key raises ResolveError carrying the key."""
    with pytest.raises(ResolveError) as exc_info:
        resolve_file(library, ["NOPE"])

    assert exc_info.value.key == "NOPE"


@pytest.mark.unit
def test_resolve_file_missing_store(tmp_path: Path) -> None:
    """Test a missing store file raises StoreError."""
    with pytest.raises(StoreError, match="not found"):
        resolve_file(tmp_path / "missing.jsonl", ["A"])


@pytest.mark.unit
def test_resolve_file_logs_run_events(library: Path, tmp_path: Path) -> None:
    """Test run_started and run_finished bracket the processing events."""
    log_path = tmp_path / "logs" / "events.jsonl"

    with open_logger(log_path) as logger:
        resolve_file(library, ["NEW1"], logger=logger)

    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert events[0]["event"] == "run_started"
    assert events[-1]["event"] == "run_finished"
    assert events[-1]["data"]["status"] == "success"
    assert events[-1]["data"]["records_processed"] == 1
    assert len({e["run_id"] for e in events}) == 1


@pytest.mark.unit
def test_lookup_helpers(library: Path) -> None:
    """Test lookup_identifier and lookup_url against a store file."""
    assert lookup_identifier(library, "doi", "https://doi.org/10.1000/gnn") == ["OLD1", "NEW1"]
    assert lookup_url(library, "https://example.org/none") == []

    with pytest.raises(ValueError, match="Unknown identifier kind"):
        lookup_identifier(library, "issn", "1234-5678")


@pytest.mark.unit
def test_delete_key_writes_store(library: Path) -> None:
    """Test delete_key removes the record from the file."""
    result = delete_key(library, "OLD2")

    assert result.success
    assert "OLD2" not in load_store(library)


@pytest.mark.unit
def test_delete_key_not_found_leaves_file(library: Path) -> None:
    """Test a failed deletion does not rewrite the store."""
    before = library.read_bytes()

    result = delete_key(library, "NOPE")

    assert not result.success
    assert result.category == "not_found"
    assert library.read_bytes() == before
