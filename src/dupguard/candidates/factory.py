"""Registry-based factory for search strategy instantiation.

New strategy types are added by extending ``STRATEGY_REGISTRY`` and the
parameter mapping in ``strategies_from_config``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

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
)

if TYPE_CHECKING:
    from dupguard.engine.config import ResolverConfig

# type → callable that returns a SearchStrategy
STRATEGY_REGISTRY: dict[str, type] = {
    "doi": DOIStrategy,
    "isbn": ISBNStrategy,
    "title_author_year": TitleAuthorYearStrategy,
    "title_only": TitleOnlyStrategy,
    "pmid": PMIDStrategy,
    "pmcid": PMCIDStrategy,
    "arxiv": ArXivStrategy,
    "url": NormalizedURLStrategy,
}


@dataclass(frozen=True)
class StrategyConfig:
    """Declarative configuration for a single search strategy.

    Attributes
    ----------
    type : str
        Key in ``STRATEGY_REGISTRY``.
    enabled : bool
        Disabled configs are silently skipped by ``create_strategies``.
    params : dict[str, Any]
        Keyword arguments forwarded to the strategy constructor.
    """

    type: str
    enabled: bool = True
    params: dict[str, Any] = field(default_factory=dict)


def create_strategy(config: StrategyConfig) -> SearchStrategy:
    """Instantiate a single strategy from *config*.

    Parameters
    ----------
    config : StrategyConfig
        Strategy specification.

    Returns
    -------
    SearchStrategy
        Ready-to-use strategy instance.

    Raises
    ------
    ValueError
        If ``config.type`` is not in the registry.
    """
    cls = STRATEGY_REGISTRY.get(config.type)
    if cls is None:
        valid = ", ".join(sorted(STRATEGY_REGISTRY))
        raise ValueError(f"Unknown strategy type: {config.type!r}. Valid types: {valid}")
    return cls(**config.params)  # type: ignore[no-any-return]


def create_strategies(configs: list[StrategyConfig]) -> list[SearchStrategy]:
    """Instantiate all *enabled* strategies, preserving order."""
    return [create_strategy(cfg) for cfg in configs if cfg.enabled]


def strategy_configs(config: ResolverConfig) -> list[StrategyConfig]:
    """Translate a resolver configuration into strategy configs.

    Parameters
    ----------
    config : ResolverConfig
        Resolver configuration (strategy order, scores and bounds).

    Returns
    -------
    list[StrategyConfig]
        One config per name in ``config.strategies``.
    """
    scores = config.strategy_scores
    params: dict[str, dict[str, Any]] = {
        "doi": {"score": scores["doi"]},
        "isbn": {"score": scores["isbn"]},
        "title_author_year": {
            "limit": config.author_search_limit,
            "min_score": config.min_fuzzy_score,
            "weights": config.weights,
        },
        "title_only": {
            "limit": config.title_search_limit,
            "min_score": config.min_fuzzy_score,
        },
        "pmid": {"score": scores["pmid"], "limit": config.extra_search_limit},
        "pmcid": {"score": scores["pmcid"], "limit": config.extra_search_limit},
        "arxiv": {"score": scores["arxiv"], "limit": config.extra_search_limit},
        "url": {"score": scores["url"], "limit": config.url_search_limit},
    }
    return [StrategyConfig(type=name, params=params.get(name, {})) for name in config.strategies]


def strategies_from_config(config: ResolverConfig) -> list[SearchStrategy]:
    """Instantiate the strategies named by *config*, in its order."""
    return create_strategies(strategy_configs(config))
