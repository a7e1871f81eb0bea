"""Data models for duplicate candidates.

This module defines the candidate produced by the search strategies and
the per-strategy outcome wrapper used to keep strategy failures visible.
"""

from dataclasses import dataclass, field
from typing import Any

from dupguard.models import Record

__all__ = [
    "HIGH_CONFIDENCE_SCORE",
    "Candidate",
    "StrategyOutcome",
    "confidence_for",
]

HIGH_CONFIDENCE_SCORE = 85


def confidence_for(score: int) -> str:
    """Return ``"high"`` for scores of 85 and above, else ``"medium"``."""
    return "high" if score >= HIGH_CONFIDENCE_SCORE else "medium"


@dataclass(frozen=True)
class Candidate:
    """A store record proposed as a duplicate of a new record.

    Attributes
    ----------
    record : Record
        The existing store record.
    score : int
        Match score in [0, 100].
    reason : str
        Strategies that found the record, joined with ``" + "``.
    """

    record: Record
    score: int
    reason: str

    def __post_init__(self) -> None:
        """Validate score range."""
        if not 0 <= self.score <= 100:
            raise ValueError(f"score must be in [0, 100], got {self.score}")

    @property
    def key(self) -> str:
        """Key of the candidate record."""
        return self.record.key

    @property
    def confidence(self) -> str:
        """``"high"`` iff score >= 85, else ``"medium"``."""
        return confidence_for(self.score)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "score": self.score,
            "reason": self.reason,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class StrategyOutcome:
    """Result of running one search strategy.

    Attributes
    ----------
    strategy : str
        Strategy name.
    candidates : tuple[Candidate, ...]
        Candidates found (empty on failure or when not applicable).
    applied : bool
        Whether the strategy had the identifiers it needs.
    error : str | None
        Failure description, None on success.
    """

    strategy: str
    candidates: tuple[Candidate, ...] = field(default_factory=tuple)
    applied: bool = True
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the strategy did not fail."""
        return self.error is None
