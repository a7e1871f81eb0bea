"""Public API for resolving duplicates in a JSONL record store.

This module provides the main public API for dupguard, enabling:
- Resolving newly created records against a store file
- Looking up records by URL or identifier
- Deleting a record by key
"""

from __future__ import annotations

import time
from pathlib import Path

from dupguard.audit.helpers import generate_run_id
from dupguard.audit.logger import AuditLogger
from dupguard.decision.models import DuplicateProcessingResult
from dupguard.engine.config import ResolverConfig
from dupguard.engine.orchestrator import process_duplicates
from dupguard.lookup import delete_record_by_key, find_record_by_identifier, find_record_by_url
from dupguard.merge.executor import ADMIN_DELETE_TIMEOUT
from dupguard.merge.models import DeletionResult
from dupguard.store import MemoryRecord, load_store, save_store

__all__ = [
    "resolve_file",
    "lookup_url",
    "lookup_identifier",
    "delete_key",
    "open_logger",
    "ResolveError",
]


class ResolveError(Exception):
    """Raised when resolution cannot start."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
    ) -> None:
        """Initialize resolve error.

        Parameters
        ----------
        message : str
            Error message.
        key : str | None, optional
            Record key that caused the error.
        """
        super().__init__(message)
        self.key = key


def open_logger(log_path: str | Path) -> AuditLogger:
    """Open an audit logger with a fresh run ID."""
    return AuditLogger(run_id=generate_run_id(), log_path=Path(log_path))


def resolve_file(
    store_path: str | Path,
    keys: list[str],
    *,
    config: ResolverConfig | None = None,
    output_path: str | Path | None = None,
    dry_run: bool = False,
    logger: AuditLogger | None = None,
) -> DuplicateProcessingResult:
    """Resolve newly created records of a JSONL store.

    Parameters
    ----------
    store_path : str | Path
        JSONL store holding both the new and the existing records.
    keys : list[str]
        Keys of the newly created records, in batch order.
    config : ResolverConfig | None, optional
        Resolver configuration, defaults when None.
    output_path : str | Path | None, optional
        Where to write the store after processing; *store_path* when None.
    dry_run : bool, optional
        Report only: nothing is deleted and the store is not written.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DuplicateProcessingResult
        Merges, possible duplicates, errors and output record keys.

    Raises
    ------
    StoreError
        If the store file is missing or malformed.
    ResolveError
        If a key is not in the store.

    Examples
    --------
        >>> from dupguard import resolve_file
        >>> result = resolve_file("library.jsonl", ["NEW1", "NEW2"])
        >>> [action.kept_key for action in result.auto_merged]
    """
    config = config if config is not None else ResolverConfig()
    start = time.perf_counter()
    store = load_store(store_path)

    records: list[MemoryRecord] = []
    for key in keys:
        record = store.get(key)
        if record is None:
            raise ResolveError(f"Record with key {key!r} not found in {store_path}", key=key)
        records.append(record)

    if logger:
        logger.run_started(
            command=["resolve", str(store_path), *keys],
            parameters={"config": config.to_dict(), "dry_run": dry_run},
        )

    result = process_duplicates(records, store, config=config, logger=logger, dry_run=dry_run)

    if not dry_run:
        save_store(store, output_path if output_path is not None else store_path)

    if logger:
        logger.run_finished(
            status="success" if not result.errors else "partial",
            duration_seconds=time.perf_counter() - start,
            records_processed=len(records),
        )
    return result


def lookup_url(
    store_path: str | Path,
    url: str,
    logger: AuditLogger | None = None,
) -> list[str]:
    """Return keys of the records saved for *url*."""
    store = load_store(store_path)
    return [record.key for record in find_record_by_url(store, url, logger=logger)]


def lookup_identifier(
    store_path: str | Path,
    kind: str,
    value: str,
    logger: AuditLogger | None = None,
) -> list[str]:
    """Return keys of the records carrying an identifier.

    Raises
    ------
    ValueError
        If *kind* is unknown.
    """
    store = load_store(store_path)
    return [
        record.key for record in find_record_by_identifier(store, kind, value, logger=logger)
    ]


def delete_key(
    store_path: str | Path,
    key: str,
    *,
    timeout: float = ADMIN_DELETE_TIMEOUT,
    logger: AuditLogger | None = None,
) -> DeletionResult:
    """Delete a record by key and write the store back on success."""
    store = load_store(store_path)
    result = delete_record_by_key(store, key, timeout=timeout, logger=logger)
    if result.success:
        save_store(store, store_path)
    return result
