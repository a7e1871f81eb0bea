"""Candidate aggregation across search strategies.

Runs the configured strategies for one record and folds their results into
a single ranked list with one entry per existing record.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from dupguard.audit.logger import AuditLogger
from dupguard.candidates.models import Candidate, StrategyOutcome
from dupguard.candidates.strategies import SearchStrategy, run_strategy
from dupguard.models import IdentifierSet, RecordStore

DEFAULT_MAX_CANDIDATES = 5
REASON_SEPARATOR = " + "


def aggregate_candidates(
    candidates: Iterable[Candidate],
    limit: int = DEFAULT_MAX_CANDIDATES,
) -> list[Candidate]:
    """Merge candidates that refer to the same record.

    Parameters
    ----------
    candidates : Iterable[Candidate]
        Candidates in discovery order (strategy order, then store order).
    limit : int, optional
        Maximum number of candidates returned.

    Returns
    -------
    list[Candidate]
        One candidate per record key with the maximum score and the joined
        reasons, sorted by score descending; ties keep discovery order.
    """
    merged: dict[str, Candidate] = {}
    for candidate in candidates:
        previous = merged.get(candidate.key)
        if previous is None:
            merged[candidate.key] = candidate
            continue
        merged[candidate.key] = Candidate(
            record=previous.record,
            score=max(previous.score, candidate.score),
            reason=f"{previous.reason}{REASON_SEPARATOR}{candidate.reason}",
        )

    # sorted() is stable, so equal scores stay in discovery order
    ranked = sorted(merged.values(), key=lambda c: c.score, reverse=True)
    return ranked[:limit]


def run_strategies(
    identifiers: IdentifierSet,
    record_key: str,
    store: RecordStore,
    strategies: Sequence[SearchStrategy],
    *,
    parallel: bool = False,
    logger: AuditLogger | None = None,
) -> list[StrategyOutcome]:
    """Run every strategy and return outcomes in strategy order.

    With ``parallel=True`` strategies run on a thread pool; results are
    still returned in strategy order.
    """
    if parallel and len(strategies) > 1:
        with ThreadPoolExecutor(max_workers=len(strategies)) as pool:
            return list(
                pool.map(
                    lambda strategy: run_strategy(strategy, identifiers, record_key, store, logger),
                    strategies,
                )
            )
    return [run_strategy(strategy, identifiers, record_key, store, logger) for strategy in strategies]


def find_candidates(
    identifiers: IdentifierSet,
    record_key: str,
    store: RecordStore,
    strategies: Sequence[SearchStrategy],
    *,
    limit: int = DEFAULT_MAX_CANDIDATES,
    parallel: bool = False,
    logger: AuditLogger | None = None,
) -> list[Candidate]:
    """Find and rank duplicate candidates for one record.

    Parameters
    ----------
    identifiers : IdentifierSet
        Identifiers of the new record.
    record_key : str
        Key of the new record (never returned).
    store : RecordStore
        Store to search.
    strategies : Sequence[SearchStrategy]
        Strategies to run.
    limit : int, optional
        Maximum number of candidates returned.
    parallel : bool, optional
        Run strategies concurrently.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    list[Candidate]
        Aggregated candidates, best first.
    """
    start = time.perf_counter()
    outcomes = run_strategies(
        identifiers, record_key, store, strategies, parallel=parallel, logger=logger
    )
    candidates = aggregate_candidates(
        (candidate for outcome in outcomes for candidate in outcome.candidates),
        limit=limit,
    )

    if logger:
        logger.event(
            "candidates_found",
            data={
                "strategies_applied": [o.strategy for o in outcomes if o.applied and o.ok],
                "strategies_failed": [o.strategy for o in outcomes if not o.ok],
                "candidates": [c.to_dict() for c in candidates],
                "duration_seconds": time.perf_counter() - start,
            },
            rid=record_key,
        )

    return candidates
