"""Duplicate candidate search and aggregation."""

from dupguard.candidates.aggregator import (
    aggregate_candidates,
    find_candidates,
    run_strategies,
)
from dupguard.candidates.factory import (
    STRATEGY_REGISTRY,
    StrategyConfig,
    create_strategies,
    create_strategy,
    strategies_from_config,
    strategy_configs,
)
from dupguard.candidates.models import (
    HIGH_CONFIDENCE_SCORE,
    Candidate,
    StrategyOutcome,
    confidence_for,
)
from dupguard.candidates.strategies import (
    ArXivStrategy,
    DOIStrategy,
    ISBNStrategy,
    NormalizedURLStrategy,
    PMCIDStrategy,
    PMIDStrategy,
    SearchStrategy,
    TitleAuthorYearStrategy,
    TitleOnlyStrategy,
    run_strategy,
)

__all__ = [
    # Models
    "Candidate",
    "StrategyOutcome",
    "HIGH_CONFIDENCE_SCORE",
    "confidence_for",
    # Protocol
    "SearchStrategy",
    # Exact identifier strategies
    "DOIStrategy",
    "ISBNStrategy",
    "PMIDStrategy",
    "PMCIDStrategy",
    "ArXivStrategy",
    "NormalizedURLStrategy",
    # Fuzzy strategies
    "TitleAuthorYearStrategy",
    "TitleOnlyStrategy",
    "run_strategy",
    # Factory
    "STRATEGY_REGISTRY",
    "StrategyConfig",
    "create_strategy",
    "create_strategies",
    "strategy_configs",
    "strategies_from_config",
    # Aggregation
    "aggregate_candidates",
    "run_strategies",
    "find_candidates",
]
