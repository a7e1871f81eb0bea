"""JSONL persistence for the in-memory store.

One record per line, each validated against the bundled
``record.schema.json``.
"""

import json
from functools import cache
from pathlib import Path
from typing import Any

import jsonschema

from dupguard.store.memory import MemoryRecord, MemoryRecordStore, StoreError

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


@cache
def load_schema(name: str) -> dict[str, Any]:
    """Load a bundled JSON schema by file name."""
    with (SCHEMAS_DIR / name).open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def load_store(path: Path | str) -> MemoryRecordStore:
    """Load a store from a JSONL file.

    Parameters
    ----------
    path : Path | str
        JSONL file, one record object per line. Blank lines are skipped.

    Returns
    -------
    MemoryRecordStore
        Store holding the records in file order.

    Raises
    ------
    StoreError
        If the file is missing, a line is not JSON, a record fails schema
        validation or a key is repeated.
    """
    path = Path(path)
    if not path.exists():
        raise StoreError(f"Store file not found: {path}")

    schema = load_schema("record.schema.json")
    store = MemoryRecordStore()
    with path.open(encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
                jsonschema.validate(instance=data, schema=schema)
            except json.JSONDecodeError as e:
                raise StoreError(f"{path}:{line_no}: invalid JSON: {e.msg}") from e
            except jsonschema.ValidationError as e:
                raise StoreError(f"{path}:{line_no}: invalid record: {e.message}") from e
            if data["key"] in store:
                raise StoreError(f"{path}:{line_no}: duplicate key {data['key']!r}")
            store.add(MemoryRecord.from_dict(data))
    return store


def save_store(store: MemoryRecordStore, path: Path | str) -> None:
    """Write every stored record to *path* as deterministic JSONL."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for record in store:
            f.write(json.dumps(record.to_dict(), ensure_ascii=False, sort_keys=True))
            f.write("\n")
