"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from dupguard.audit import AuditLogger  # noqa: E402
from dupguard.models import Creator  # noqa: E402
from dupguard.store import MemoryRecord, MemoryRecordStore  # noqa: E402


def _creator(value: str | Creator) -> Creator:
    """Build a creator from ``"Last, First"``, ``"Last"`` or a Creator."""
    if isinstance(value, Creator):
        return value
    if "," in value:
        last, first = (part.strip() for part in value.split(",", 1))
        return Creator(last_name=last, first_name=first or None)
    return Creator(last_name=value.strip())


@pytest.fixture
def make_record() -> Callable[..., MemoryRecord]:
    """Factory for test records with minimal boilerplate.

    Only fields the engine reads are configurable; unset fields are left
    out of the record entirely.
    """

    def _factory(
        key: str = "NEW00001",
        *,
        title: str | None = None,
        creators: list[str | Creator] | None = None,
        date: str | None = None,
        doi: str | None = None,
        isbn: str | None = None,
        issn: str | None = None,
        pmid: str | None = None,
        url: str | None = None,
        extra: str | None = None,
        item_type: str = "journalArticle",
        editable: bool = True,
        deleted: bool = False,
    ) -> MemoryRecord:
        fields = {
            name: value
            for name, value in (
                ("title", title),
                ("date", date),
                ("DOI", doi),
                ("ISBN", isbn),
                ("ISSN", issn),
                ("PMID", pmid),
                ("url", url),
                ("extra", extra),
            )
            if value is not None
        }
        return MemoryRecord(
            key=key,
            item_type=item_type,
            fields=fields,
            creators=[_creator(c) for c in creators or []],
            editable=editable,
            deleted=deleted,
        )

    return _factory


@pytest.fixture
def make_store() -> Callable[..., MemoryRecordStore]:
    """Factory for in-memory stores holding the given records."""

    def _factory(*records: MemoryRecord) -> MemoryRecordStore:
        return MemoryRecordStore(records)

    return _factory


@pytest.fixture
def audit_logger(tmp_path: Path) -> Iterator[AuditLogger]:
    """Audit logger writing to a temporary events file."""
    logger = AuditLogger(run_id="test-run", log_path=tmp_path / "events.jsonl")
    yield logger
    logger.close()


@pytest.fixture
def read_events(tmp_path: Path) -> Callable[[], list[dict]]:
    """Read the events written by ``audit_logger``."""
    import json

    def _read() -> list[dict]:
        path = tmp_path / "events.jsonl"
        if not path.exists():
            return []
        with path.open(encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    return _read


@pytest.fixture
def write_store(tmp_path: Path) -> Callable[..., Path]:
    """Write records to a JSONL store file under ``tmp_path``."""
    from dupguard.store import save_store

    def _write(*records: MemoryRecord, name: str = "library.jsonl") -> Path:
        path = tmp_path / name
        save_store(MemoryRecordStore(records), path)
        return path

    return _write
