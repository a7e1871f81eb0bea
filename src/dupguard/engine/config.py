"""Resolver configuration."""

from dataclasses import asdict, dataclass, field
from typing import Any

from dupguard.scoring import DEFAULT_WEIGHTS, ScoreWeights

DEFAULT_STRATEGIES: tuple[str, ...] = (
    "doi",
    "isbn",
    "title_author_year",
    "title_only",
    "pmid",
    "pmcid",
    "arxiv",
    "url",
)

DEFAULT_STRATEGY_SCORES: dict[str, int] = {
    "doi": 100,
    "isbn": 95,
    "pmid": 98,
    "pmcid": 98,
    "arxiv": 96,
    "url": 88,
}


@dataclass
class ResolverConfig:
    """Configuration for duplicate resolution.

    Attributes
    ----------
    auto_merge_threshold : int
        Candidates scoring at least this are merged automatically (default: 85).
    flag_threshold : int
        Candidates scoring at least this are flagged for review (default: 70).
    max_candidates : int
        Candidates kept per record after aggregation (default: 5).
    delete_timeout : float
        Per-deletion time budget in seconds (default: 5.0).
    strategies : list[str]
        Strategy names, run in this order. Available: 'doi', 'isbn',
        'title_author_year', 'title_only', 'pmid', 'pmcid', 'arxiv', 'url'.
    strategy_scores : dict[str, int]
        Fixed scores of the exact-identifier strategies.
    author_search_limit : int
        Same-author records inspected by the title/author/year strategy.
    title_search_limit : int
        Records inspected by the title-only strategy.
    extra_search_limit : int
        Matches kept by the PMID/PMCID/ArXiv strategies.
    url_search_limit : int
        Same-host records inspected by the URL strategy.
    min_fuzzy_score : int
        Minimum score kept by the fuzzy strategies.
    weights : ScoreWeights
        Title/author/year weights of the combined similarity.
    parallel_search : bool
        Run the strategies of one record on a thread pool.
    """

    auto_merge_threshold: int = 85
    flag_threshold: int = 70
    max_candidates: int = 5
    delete_timeout: float = 5.0
    strategies: list[str] = field(default_factory=lambda: list(DEFAULT_STRATEGIES))
    strategy_scores: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_STRATEGY_SCORES))
    author_search_limit: int = 10
    title_search_limit: int = 5
    extra_search_limit: int = 5
    url_search_limit: int = 10
    min_fuzzy_score: int = 70
    weights: ScoreWeights = DEFAULT_WEIGHTS
    parallel_search: bool = False

    def __post_init__(self) -> None:
        """Validate ranges and strategy names."""
        for name in ("auto_merge_threshold", "flag_threshold", "min_fuzzy_score"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be in [0, 100], got {value}")

        if self.flag_threshold >= self.auto_merge_threshold:
            raise ValueError(
                f"flag_threshold ({self.flag_threshold}) must be less than "
                f"auto_merge_threshold ({self.auto_merge_threshold})"
            )

        if self.delete_timeout <= 0:
            raise ValueError(f"delete_timeout must be positive, got {self.delete_timeout}")

        for name in (
            "max_candidates",
            "author_search_limit",
            "title_search_limit",
            "extra_search_limit",
            "url_search_limit",
        ):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")

        unknown = [name for name in self.strategies if name not in DEFAULT_STRATEGIES]
        if unknown:
            valid = ", ".join(DEFAULT_STRATEGIES)
            raise ValueError(f"Unknown strategies: {unknown}. Valid strategies: {valid}")

        # Unlisted scores fall back to the defaults
        self.strategy_scores = {**DEFAULT_STRATEGY_SCORES, **self.strategy_scores}
        for name, score in self.strategy_scores.items():
            if name not in DEFAULT_STRATEGY_SCORES:
                raise ValueError(f"No fixed score for strategy {name!r}")
            if not 0 <= score <= 100:
                raise ValueError(f"strategy score for {name} must be in [0, 100], got {score}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
