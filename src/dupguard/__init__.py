"""Duplicate resolution for newly created bibliographic records.

This package provides:
- Data models (dupguard.models): record/store protocols, identifier sets
- Extraction (dupguard.extract): identifier extraction
- Scoring (dupguard.scoring): title/author/year similarity
- Candidates (dupguard.candidates): search strategies and aggregation
- Decision (dupguard.decision): merge-or-flag policy
- Merge (dupguard.merge): deadline-bounded deletion
- Engine (dupguard.engine): batch orchestration
- Store (dupguard.store): in-memory store with JSONL persistence
- Audit (dupguard.audit): structured event logging
- CLI (dupguard.cli): command-line interface
- Public API (dupguard.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from dupguard.api import (
    ResolveError,
    delete_key,
    lookup_identifier,
    lookup_url,
    resolve_file,
)
from dupguard.engine import ResolverConfig, detect_duplicates, process_duplicates
from dupguard.store import MemoryRecord, MemoryRecordStore, StoreError

__all__ = [
    "__version__",
    "__license__",
    "ResolverConfig",
    "process_duplicates",
    "detect_duplicates",
    "MemoryRecord",
    "MemoryRecordStore",
    "StoreError",
    "resolve_file",
    "lookup_url",
    "lookup_identifier",
    "delete_key",
    "ResolveError",
]
