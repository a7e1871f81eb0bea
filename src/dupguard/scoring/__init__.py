"""Similarity scoring primitives and weighted record comparison."""

from dupguard.scoring.similarity import (
    DEFAULT_WEIGHTS,
    ScoreWeights,
    author_similarity_score,
    combined_similarity,
    levenshtein_distance,
    levenshtein_similarity,
    round_half_up,
    title_similarity_score,
    year_similarity_score,
)

__all__ = [
    "ScoreWeights",
    "DEFAULT_WEIGHTS",
    "round_half_up",
    "levenshtein_distance",
    "levenshtein_similarity",
    "title_similarity_score",
    "author_similarity_score",
    "year_similarity_score",
    "combined_similarity",
]
