"""String and record similarity scoring.

This module provides pure, deterministic functions for comparing
bibliographic records. Scores are integers on a 0-100 scale; exact
normalized title equality is capped at 95 so that fuzzy matches never
reach the score reserved for identifier matches.

All functions are locale-independent and reproducible.
"""

import math
from dataclasses import dataclass

from dupguard.extract import first_author_name, parse_year
from dupguard.models import IdentifierSet, Record
from dupguard.utils import normalize_title

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

EXACT_TITLE_SCORE = 95

# (minimum Levenshtein similarity, score), checked top to bottom
TITLE_SCORE_BANDS: tuple[tuple[float, int], ...] = (
    (0.95, 90),
    (0.90, 85),
    (0.80, 75),
    (0.70, 65),
)
LOW_TITLE_SCORE_SCALE = 60

EXACT_YEAR_SCORE = 100
ADJACENT_YEAR_SCORE = 80


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of the title/author/year terms in ``combined_similarity``.

    Attributes
    ----------
    title : float
        Title term weight.
    author : float
        First-author term weight.
    year : float
        Year term weight.
    """

    title: float = 0.5
    author: float = 0.3
    year: float = 0.2

    def __post_init__(self) -> None:
        """Validate weights."""
        for name in ("title", "author", "year"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} weight must be non-negative, got {getattr(self, name)}")


DEFAULT_WEIGHTS = ScoreWeights()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def levenshtein_distance(a: str, b: str) -> int:
    """Compute the edit distance between *a* and *b*.

    Insertions, deletions and substitutions each cost 1.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    int
        Minimum number of single-character edits.
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(
                        previous[j - 1] + 1,  # substitution
                        current[j - 1] + 1,  # insertion
                        previous[j] + 1,  # deletion
                    )
                )
        previous = current
    return previous[-1]


def levenshtein_similarity(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1].

    ``(max_len - distance) / max_len``; two empty strings are identical.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest


def title_similarity_score(title_a: str | None, title_b: str | None) -> int:
    """Score two titles on the 0-100 scale.

    Parameters
    ----------
    title_a : str | None
        First title (raw).
    title_b : str | None
        Second title (raw).

    Returns
    -------
    int
        0 if either title is empty, 95 for equal normalized titles,
        otherwise a banded score derived from Levenshtein similarity.
    """
    if not title_a or not title_b:
        return 0

    norm_a = normalize_title(title_a)
    norm_b = normalize_title(title_b)
    if norm_a == norm_b:
        return EXACT_TITLE_SCORE

    similarity = levenshtein_similarity(norm_a, norm_b)
    for minimum, score in TITLE_SCORE_BANDS:
        if similarity >= minimum:
            return score
    return round_half_up(similarity * LOW_TITLE_SCORE_SCALE)


def author_similarity_score(author_a: str, author_b: str) -> int:
    """Score two author names on the 0-100 scale.

    Containment scores 95 so that ``"Smith"`` matches ``"Smith, J."``.
    """
    norm_a = author_a.casefold().strip()
    norm_b = author_b.casefold().strip()

    if norm_a == norm_b:
        return 100
    if norm_a in norm_b or norm_b in norm_a:
        return 95
    return round_half_up(levenshtein_similarity(norm_a, norm_b) * 100)


def year_similarity_score(year_a: int, year_b: int) -> int:
    """100 for the same year, 80 one year apart, else 0."""
    if year_a == year_b:
        return EXACT_YEAR_SCORE
    if abs(year_a - year_b) <= 1:
        return ADJACENT_YEAR_SCORE
    return 0


def combined_similarity(
    identifiers: IdentifierSet,
    existing: Record,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """Weighted title/author/year similarity between a new and a stored record.

    A term contributes to both the weighted sum and the weight total only
    when both sides carry the value; a year mismatch therefore counts as a
    zero-scored term rather than a missing one.

    Parameters
    ----------
    identifiers : IdentifierSet
        Identifiers of the new record.
    existing : Record
        Stored record to compare against.
    weights : ScoreWeights, optional
        Term weights.

    Returns
    -------
    int
        Rounded weighted mean in [0, 100]; 0 when no term is computable.
    """
    total = 0.0
    weight_sum = 0.0

    existing_title = existing.get_field("title")
    if identifiers.title and existing_title:
        total += title_similarity_score(identifiers.title, existing_title) * weights.title
        weight_sum += weights.title

    existing_author = first_author_name(existing.get_creators())
    if identifiers.first_author and existing_author:
        total += author_similarity_score(identifiers.first_author, existing_author) * weights.author
        weight_sum += weights.author

    existing_year = parse_year(existing.get_field("date"))
    if identifiers.year is not None and existing_year is not None:
        total += year_similarity_score(identifiers.year, existing_year) * weights.year
        weight_sum += weights.year

    if weight_sum <= 0:
        return 0
    return round_half_up(total / weight_sum)
