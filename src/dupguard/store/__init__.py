"""In-memory record store with JSONL persistence."""

from dupguard.store.jsonl import load_schema, load_store, save_store
from dupguard.store.memory import MemoryRecord, MemoryRecordStore, StoreError, matches

__all__ = [
    "MemoryRecord",
    "MemoryRecordStore",
    "StoreError",
    "matches",
    "load_schema",
    "load_store",
    "save_store",
]
