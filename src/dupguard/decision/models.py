"""Data models for the merge-or-flag decision.

This module defines score tiers, flagged duplicates, the per-record
resolution and the batch-level processing result.
"""

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from dupguard.merge.models import MergeAction
from dupguard.models import Record


class Tier(StrEnum):
    """Score tiers of a duplicate candidate.

    Attributes
    ----------
    AUTO_MERGE : str
        Score >= auto-merge threshold: delete the new record.
    FLAG : str
        Score >= flag threshold: keep both, report a possible duplicate.
    IGNORE : str
        Below the flag threshold.
    """

    AUTO_MERGE = "auto_merge"
    FLAG = "flag"
    IGNORE = "ignore"


@dataclass(frozen=True)
class FlaggedDuplicate:
    """A possible duplicate reported for user attention.

    Attributes
    ----------
    new_key : str
        Key of the new record.
    new_title : str
        Title of the new record (``"Untitled"`` when empty).
    existing_key : str
        Key of the existing record.
    existing_title : str
        Title of the existing record (``"Untitled"`` when empty).
    score : int
        Candidate score.
    reason : str
        Matching strategies, annotated when an auto-merge failed.
    confidence : str
        ``"high"`` or ``"medium"``.
    message : str
        Human-readable warning.
    """

    new_key: str
    new_title: str
    existing_key: str
    existing_title: str
    score: int
    reason: str
    confidence: str
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class RecordResolution:
    """Outcome of resolving one new record against its candidates.

    Attributes
    ----------
    record : Record
        Record to put in the output slot: the kept existing record after a
        merge, otherwise the new record.
    merge : MergeAction | None
        Merge performed, if any.
    flagged : list[FlaggedDuplicate]
        Possible duplicates reported.
    errors : list[str]
        Failed auto-merges.
    """

    record: Record
    merge: MergeAction | None = None
    flagged: list[FlaggedDuplicate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def merged(self) -> bool:
        """True when the new record was replaced by an existing one."""
        return self.merge is not None


@dataclass
class DuplicateProcessingResult:
    """Accumulated result of processing one batch of new records.

    Attributes
    ----------
    auto_merged : list[MergeAction]
        Completed merges.
    possible_duplicates : list[FlaggedDuplicate]
        Possible duplicates, including degraded auto-merges.
    processed : bool
        Whether the batch was processed.
    errors : list[str]
        Per-record and batch-level error messages.
    records : list[Record]
        Output records, one per input slot.
    """

    auto_merged: list[MergeAction] = field(default_factory=list)
    possible_duplicates: list[FlaggedDuplicate] = field(default_factory=list)
    processed: bool = True
    errors: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)

    def add(self, resolution: RecordResolution) -> None:
        """Fold one record resolution into the batch result."""
        if resolution.merge is not None:
            self.auto_merged.append(resolution.merge)
        self.possible_duplicates.extend(resolution.flagged)
        self.errors.extend(resolution.errors)
        self.records.append(resolution.record)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "auto_merged": [action.to_dict() for action in self.auto_merged],
            "possible_duplicates": [flag.to_dict() for flag in self.possible_duplicates],
            "processed": self.processed,
            "errors": list(self.errors),
            "records": [record.key for record in self.records],
        }
