"""Tiered merge-or-flag decision policy.

Candidates are walked best first. An auto-merge tier candidate deletes the
new record and ends the walk; a failed deletion degrades it to a flag and
the walk continues with the next candidate. Flag tier candidates are
reported and the walk continues. The first candidate below the flag
threshold ends the walk.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from dupguard.audit.logger import AuditLogger
from dupguard.candidates.models import Candidate
from dupguard.decision.models import FlaggedDuplicate, RecordResolution, Tier
from dupguard.merge.executor import MergeExecutor
from dupguard.models import Record

if TYPE_CHECKING:
    from dupguard.engine.config import ResolverConfig

UNTITLED = "Untitled"


def classify_score(score: int, config: ResolverConfig) -> Tier:
    """Map a candidate score to its tier.

    Parameters
    ----------
    score : int
        Candidate score.
    config : ResolverConfig
        Configuration carrying the thresholds.

    Returns
    -------
    Tier
        AUTO_MERGE, FLAG or IGNORE.
    """
    if score >= config.auto_merge_threshold:
        return Tier.AUTO_MERGE
    if score >= config.flag_threshold:
        return Tier.FLAG
    return Tier.IGNORE


def _title(record: Record) -> str:
    return record.get_field("title") or UNTITLED


def flag_possible_duplicate(
    new_record: Record,
    candidate: Candidate,
    reason: str | None = None,
) -> FlaggedDuplicate:
    """Build the warning for a possible duplicate.

    *reason* overrides the candidate's reason (used for degraded merges).
    """
    reason = reason if reason is not None else candidate.reason
    return FlaggedDuplicate(
        new_key=new_record.key,
        new_title=_title(new_record),
        existing_key=candidate.key,
        existing_title=_title(candidate.record),
        score=candidate.score,
        reason=reason,
        confidence=candidate.confidence,
        message=f'Possible duplicate detected: "{_title(candidate.record)}" ({reason})',
    )


def resolve_record(
    new_record: Record,
    candidates: Sequence[Candidate],
    executor: MergeExecutor | None,
    config: ResolverConfig,
    logger: AuditLogger | None = None,
) -> RecordResolution:
    """Decide what to do with *new_record* given its ranked candidates.

    Parameters
    ----------
    new_record : Record
        Freshly created record.
    candidates : Sequence[Candidate]
        Aggregated candidates, best first.
    executor : MergeExecutor | None
        Deletion executor; None reports auto-merge tier candidates as
        flags without deleting anything. At most one deletion is attempted:
        after a failure the remaining auto-merge tier candidates are flagged.
    config : ResolverConfig
        Thresholds.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    RecordResolution
        Output record, merge action, flags and errors for this record.
    """
    resolution = RecordResolution(record=new_record)
    # One deletion attempt per record; later auto-merge candidates are flagged
    can_delete = executor is not None

    for candidate in sorted(candidates, key=lambda c: c.score, reverse=True):
        tier = classify_score(candidate.score, config)

        if tier is Tier.IGNORE:
            break

        if tier is Tier.AUTO_MERGE and can_delete and executor is not None:
            action, result = executor.merge(
                new_record, candidate.record, candidate.reason, candidate.score
            )
            if action is not None:
                resolution.merge = action
                resolution.record = candidate.record
                break
            can_delete = False

            failure = f"[{result.category}] {result.message}"
            flag = flag_possible_duplicate(
                new_record,
                candidate,
                reason=f"{candidate.reason} (auto-deletion failed: {failure})",
            )
            resolution.flagged.append(flag)
            resolution.errors.append(
                f"Failed to auto-merge duplicate {new_record.key} into {candidate.key}: {failure}"
            )
            if logger:
                logger.record_flagged(
                    rid=new_record.key,
                    existing_key=candidate.key,
                    score=candidate.score,
                    reason=flag.reason,
                )
            continue

        flag = flag_possible_duplicate(new_record, candidate)
        resolution.flagged.append(flag)
        if logger:
            logger.record_flagged(
                rid=new_record.key,
                existing_key=candidate.key,
                score=candidate.score,
                reason=candidate.reason,
            )

    return resolution
