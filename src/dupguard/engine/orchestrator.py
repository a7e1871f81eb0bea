"""Batch duplicate processing.

Chains identifier extraction, candidate search, aggregation and the
merge-or-flag policy for every newly created record of a batch.

Architecture Flow (per record):
    1. Identifier extraction
    2. Candidate search (all configured strategies)
    3. Aggregation and ranking
    4. Merge-or-flag decision (deletion only of the new record)

Records are processed sequentially so that two new records of one batch
can never race to delete each other. Each record is isolated: an
unexpected failure is reported in ``errors`` and the record is left as is.
"""

from __future__ import annotations

import time
import traceback
from collections.abc import Iterable

from dupguard.audit.logger import AuditLogger
from dupguard.candidates import find_candidates, strategies_from_config
from dupguard.candidates.strategies import SearchStrategy
from dupguard.decision.models import (
    DuplicateProcessingResult,
    FlaggedDuplicate,
    RecordResolution,
)
from dupguard.decision.policy import resolve_record
from dupguard.engine.config import ResolverConfig
from dupguard.extract import extract_identifiers
from dupguard.merge.executor import MergeExecutor
from dupguard.models import Record, RecordStore

STAGE_NAME = "duplicate_processing"


def _resolve_one(
    record: Record,
    store: RecordStore,
    strategies: list[SearchStrategy],
    executor: MergeExecutor | None,
    config: ResolverConfig,
    logger: AuditLogger | None,
) -> RecordResolution:
    """Extract, search, aggregate and decide for a single record."""
    identifiers = extract_identifiers(record, logger=logger)
    candidates = find_candidates(
        identifiers,
        record.key,
        store,
        strategies,
        limit=config.max_candidates,
        parallel=config.parallel_search,
        logger=logger,
    )
    if not candidates:
        return RecordResolution(record=record)
    return resolve_record(record, candidates, executor, config, logger=logger)


def process_duplicates(
    records: Iterable[Record],
    store: RecordStore,
    config: ResolverConfig | None = None,
    logger: AuditLogger | None = None,
    *,
    executor: MergeExecutor | None = None,
    dry_run: bool = False,
) -> DuplicateProcessingResult:
    """Resolve every new record of a batch against the store.

    Parameters
    ----------
    records : Iterable[Record]
        Newly created records, already saved in *store*. Never mutated.
    store : RecordStore
        Library store.
    config : ResolverConfig | None, optional
        Resolver configuration; defaults are used when None.
    logger : AuditLogger | None, optional
        Audit logger for observability events.
    executor : MergeExecutor | None, optional
        Deletion executor; built from *store* and ``config.delete_timeout``
        when None.
    dry_run : bool, optional
        Never delete; auto-merge tier candidates are flagged instead.

    Returns
    -------
    DuplicateProcessingResult
        Merges, flags, errors and the output record list (existing
        records substituted for merged slots). Returned even when the
        batch fails part way.
    """
    config = config if config is not None else ResolverConfig()
    result = DuplicateProcessingResult()
    start = time.perf_counter()
    batch: list[Record] = []

    if logger:
        logger.stage_started(STAGE_NAME)

    try:
        batch = list(records)
        strategies = strategies_from_config(config)
        if dry_run:
            executor = None
        elif executor is None:
            executor = MergeExecutor(store, timeout=config.delete_timeout, logger=logger)

        for record in batch:
            try:
                resolution = _resolve_one(record, store, strategies, executor, config, logger)
            except Exception as e:
                error_msg = f"Error processing duplicates for record {record.key}: {e}"
                result.errors.append(error_msg)
                if logger:
                    logger.error(
                        exception_class=type(e).__name__,
                        message=error_msg,
                        stage=STAGE_NAME,
                        rid=record.key,
                        traceback=traceback.format_exc(),
                    )
                resolution = RecordResolution(record=record)
            result.add(resolution)

    except Exception as e:
        error_msg = f"Critical processing error: {e}"
        result.errors.append(error_msg)
        # Unprocessed slots keep their new record
        result.records.extend(batch[len(result.records) :])
        if logger:
            logger.error(
                exception_class=type(e).__name__,
                message=error_msg,
                stage=STAGE_NAME,
                traceback=traceback.format_exc(),
            )

    if logger:
        logger.stage_finished(
            stage=STAGE_NAME,
            duration_seconds=time.perf_counter() - start,
            counters={
                "records_in": len(batch),
                "auto_merged": len(result.auto_merged),
                "possible_duplicates": len(result.possible_duplicates),
                "errors": len(result.errors),
            },
        )

    return result


def detect_duplicates(
    record: Record,
    store: RecordStore,
    config: ResolverConfig | None = None,
    logger: AuditLogger | None = None,
) -> list[FlaggedDuplicate]:
    """Report possible duplicates of *record* without deleting anything.

    Every candidate at or above the flag threshold is reported, including
    those that would be merged automatically.

    Parameters
    ----------
    record : Record
        Record to check.
    store : RecordStore
        Library store.
    config : ResolverConfig | None, optional
        Resolver configuration.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    list[FlaggedDuplicate]
        Possible duplicates, best first.
    """
    config = config if config is not None else ResolverConfig()
    resolution = _resolve_one(
        record, store, strategies_from_config(config), None, config, logger
    )
    return resolution.flagged
