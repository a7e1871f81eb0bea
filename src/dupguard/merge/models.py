"""Data models for duplicate merging.

This module defines deletion outcomes and the merge action recorded after
a new record was deleted in favour of an existing one.
"""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class DeletionCategory(StrEnum):
    """Failure categories of a record deletion.

    Attributes
    ----------
    TIMEOUT : str
        The deletion exceeded its time budget; store state is unknown.
    TRANSACTION : str
        The store reported a transaction or database failure.
    GENERAL : str
        Any other store failure.
    PRECONDITION : str
        The record cannot be deleted (read-only library, already deleted).
    NOT_FOUND : str
        No record exists under the requested key.
    """

    TIMEOUT = "timeout"
    TRANSACTION = "transaction"
    GENERAL = "general"
    PRECONDITION = "precondition"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of one deletion attempt.

    Attributes
    ----------
    success : bool
        Whether the record was deleted.
    category : DeletionCategory | None
        Failure category, None on success.
    message : str
        Human-readable outcome.
    """

    success: bool
    category: DeletionCategory | None = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "category": str(self.category) if self.category else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class MergeAction:
    """Record of a completed automatic merge.

    Only built after the new record was deleted; the existing record is
    never modified.

    Attributes
    ----------
    kept_key : str
        Key of the existing record that was kept.
    deleted_key : str
        Key of the new record that was deleted.
    reason : str
        Strategies that matched.
    score : int
        Candidate score.
    success : bool
        Always True for recorded merges.
    message : str
        Human-readable summary.
    action : str
        Always ``"kept_existing"``.
    """

    kept_key: str
    deleted_key: str
    reason: str
    score: int
    success: bool = True
    message: str = ""
    action: str = "kept_existing"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
