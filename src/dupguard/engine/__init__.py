"""Duplicate resolution engine.

This package provides the batch entry point for resolving newly created
records against a library store, including its configuration.
"""

from dupguard.engine.config import DEFAULT_STRATEGIES, DEFAULT_STRATEGY_SCORES, ResolverConfig
from dupguard.engine.orchestrator import detect_duplicates, process_duplicates

__all__ = [
    "ResolverConfig",
    "DEFAULT_STRATEGIES",
    "DEFAULT_STRATEGY_SCORES",
    "process_duplicates",
    "detect_duplicates",
]
