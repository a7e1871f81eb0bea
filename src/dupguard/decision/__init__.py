"""Merge-or-flag decision policy and result types."""

from dupguard.decision.models import (
    DuplicateProcessingResult,
    FlaggedDuplicate,
    RecordResolution,
    Tier,
)
from dupguard.decision.policy import classify_score, flag_possible_duplicate, resolve_record

__all__ = [
    "Tier",
    "FlaggedDuplicate",
    "RecordResolution",
    "DuplicateProcessingResult",
    "classify_score",
    "flag_possible_duplicate",
    "resolve_record",
]
