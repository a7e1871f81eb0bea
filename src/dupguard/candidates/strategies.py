"""Candidate search strategies.

Each strategy turns one kind of signal from an ``IdentifierSet`` into a
store query and scores the records it finds. Strategies are independent:
``run_strategy`` catches and logs any failure so sibling strategies still
run.

Architecture
------------
* ``SearchStrategy``: structural protocol (one attribute + two methods).
* Exact-identifier strategies share ``FieldMatchStrategy`` (structured
  field equality) or ``ExtraIdentifierStrategy`` (free-text containment
  followed by pattern re-validation).
* ``NormalizedURLStrategy`` narrows by host before comparing normalized
  URLs.
* ``TitleAuthorYearStrategy`` and ``TitleOnlyStrategy`` do fuzzy matching;
  exactly one of them applies to a given record.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from dupguard.audit.logger import AuditLogger
from dupguard.candidates.models import Candidate, StrategyOutcome
from dupguard.extract import (
    ARXIV_PATTERNS,
    PMCID_PATTERNS,
    PMID_PATTERNS,
    arxiv_search_text,
    iter_pattern_values,
    to_pmcid,
)
from dupguard.models import IdentifierSet, Record, RecordStore, SearchCondition
from dupguard.models.records import exclude_non_bibliographic
from dupguard.scoring import (
    DEFAULT_WEIGHTS,
    ScoreWeights,
    combined_similarity,
    title_similarity_score,
)
from dupguard.utils import extract_host, normalize_url

# ============================================================================
# Constants
# ============================================================================

DOI_SCORE = 100
ISBN_SCORE = 95
PMID_SCORE = 98
PMCID_SCORE = 98
ARXIV_SCORE = 96
URL_SCORE = 88

EXTRA_SEARCH_LIMIT = 5
URL_SEARCH_LIMIT = 10
AUTHOR_SEARCH_LIMIT = 10
TITLE_SEARCH_LIMIT = 5
MIN_FUZZY_SCORE = 70
TITLE_PREFIX_WORDS = 3

WORD_EDGE_PUNCT_RE = re.compile(r"^\W+|\W+$")


# ============================================================================
# Protocol
# ============================================================================


@runtime_checkable
class SearchStrategy(Protocol):
    """Structural protocol every search strategy must satisfy.

    Attributes
    ----------
    name : str
        Stable identifier used in configuration and audit logs.
    """

    name: str

    def applies(self, identifiers: IdentifierSet) -> bool:
        """Whether *identifiers* carry the signal this strategy needs."""
        ...

    def search(
        self,
        identifiers: IdentifierSet,
        exclude_key: str,
        store: RecordStore,
    ) -> list[Candidate]:
        """Query *store* and return scored candidates, never *exclude_key*."""
        ...


def _others(records: Sequence[Record], exclude_key: str) -> list[Record]:
    return [record for record in records if record.key != exclude_key]


# ============================================================================
# Exact-identifier strategies
# ============================================================================


class FieldMatchStrategy:
    """Exact match on a structured store field.

    Attributes
    ----------
    score : int
        Score given to every match.
    """

    name: str = "field"
    field: str = ""
    identifier: str = ""
    label: str = ""

    def __init__(self, score: int) -> None:
        self.score = score

    def applies(self, identifiers: IdentifierSet) -> bool:
        """True when the identifier is present."""
        return bool(getattr(identifiers, self.identifier))

    def search(
        self,
        identifiers: IdentifierSet,
        exclude_key: str,
        store: RecordStore,
    ) -> list[Candidate]:
        """Return every other record whose field equals the identifier."""
        value = getattr(identifiers, self.identifier)
        records = store.search(exclude_non_bibliographic(SearchCondition(self.field, "is", value)))
        return [
            Candidate(record=record, score=self.score, reason=f"{self.label} match")
            for record in _others(records, exclude_key)
        ]


class DOIStrategy(FieldMatchStrategy):
    """Match on the ``DOI`` field."""

    name = "doi"
    field = "DOI"
    identifier = "doi"
    label = "DOI"

    def __init__(self, score: int = DOI_SCORE) -> None:
        super().__init__(score)


class ISBNStrategy(FieldMatchStrategy):
    """Match on the ``ISBN`` field."""

    name = "isbn"
    field = "ISBN"
    identifier = "isbn"
    label = "ISBN"

    def __init__(self, score: int = ISBN_SCORE) -> None:
        super().__init__(score)


class ExtraIdentifierStrategy:
    """Containment search on the ``extra`` annotation, then re-validation.

    A plain substring hit is not enough (``PMID: 1234`` contains ``123``),
    so each hit is re-parsed with the identifier patterns and kept only if
    one of the parsed values equals the wanted identifier.

    Attributes
    ----------
    score : int
        Score given to every match.
    limit : int
        Maximum number of matches kept.
    """

    name: str = "extra"
    identifier: str = ""
    label: str = ""
    patterns: tuple[re.Pattern[str], ...] = ()

    def __init__(self, score: int, limit: int = EXTRA_SEARCH_LIMIT) -> None:
        self.score = score
        self.limit = limit

    def applies(self, identifiers: IdentifierSet) -> bool:
        """True when the identifier is present."""
        return bool(getattr(identifiers, self.identifier))

    def canonical(self, value: str) -> str:
        """Normalize a parsed value before comparison."""
        return value.casefold()

    def query_value(self, value: str) -> str:
        """Substring searched in the annotation; hits are re-validated."""
        return value

    def searched_text(self, record: Record) -> str:
        """Text of *record* that is re-parsed for the identifier."""
        return record.get_field("extra") or ""

    def matches(self, record: Record, wanted: str) -> bool:
        """Whether *record* really carries the identifier *wanted*."""
        wanted = self.canonical(wanted)
        return any(
            self.canonical(value) == wanted
            for value in iter_pattern_values(self.patterns, self.searched_text(record))
        )

    def search(
        self,
        identifiers: IdentifierSet,
        exclude_key: str,
        store: RecordStore,
    ) -> list[Candidate]:
        """Return other records whose annotation carries the identifier."""
        value = getattr(identifiers, self.identifier)
        records = store.search(
            exclude_non_bibliographic(SearchCondition("extra", "contains", self.query_value(value)))
        )
        verified = [record for record in _others(records, exclude_key) if self.matches(record, value)]
        return [
            Candidate(record=record, score=self.score, reason=f"{self.label} match")
            for record in verified[: self.limit]
        ]


class PMIDStrategy(ExtraIdentifierStrategy):
    """Match on a PubMed ID in the ``extra`` annotation."""

    name = "pmid"
    identifier = "pmid"
    label = "PMID"
    patterns = PMID_PATTERNS

    def __init__(self, score: int = PMID_SCORE, limit: int = EXTRA_SEARCH_LIMIT) -> None:
        super().__init__(score, limit)


class PMCIDStrategy(ExtraIdentifierStrategy):
    """Match on a PubMed Central ID in the ``extra`` annotation."""

    name = "pmcid"
    identifier = "pmcid"
    label = "PMC ID"
    patterns = PMCID_PATTERNS

    def __init__(self, score: int = PMCID_SCORE, limit: int = EXTRA_SEARCH_LIMIT) -> None:
        super().__init__(score, limit)

    def canonical(self, value: str) -> str:
        """Compare PMC IDs in their prefixed upper-case form."""
        return to_pmcid(value)

    def query_value(self, value: str) -> str:
        """Digits only, so both ``PMC555`` and ``PMC: 555`` are found."""
        return to_pmcid(value).removeprefix("PMC")


class ArXivStrategy(ExtraIdentifierStrategy):
    """Match on an ArXiv ID in the ``extra`` annotation or URL."""

    name = "arxiv"
    identifier = "arxiv_id"
    label = "ArXiv ID"
    patterns = ARXIV_PATTERNS

    def __init__(self, score: int = ARXIV_SCORE, limit: int = EXTRA_SEARCH_LIMIT) -> None:
        super().__init__(score, limit)

    def searched_text(self, record: Record) -> str:
        """ArXiv IDs may also live in the URL."""
        return arxiv_search_text(record)


# ============================================================================
# URL strategy
# ============================================================================


class NormalizedURLStrategy:
    """Exact normalized-URL equality within the same host.

    Attributes
    ----------
    score : int
        Score given to every match.
    limit : int
        Maximum number of same-host records inspected.
    """

    name: str = "url"

    def __init__(self, score: int = URL_SCORE, limit: int = URL_SEARCH_LIMIT) -> None:
        self.score = score
        self.limit = limit

    def applies(self, identifiers: IdentifierSet) -> bool:
        """True when the record has a URL."""
        return bool(identifiers.normalized_url)

    def search(
        self,
        identifiers: IdentifierSet,
        exclude_key: str,
        store: RecordStore,
    ) -> list[Candidate]:
        """Return other same-host records with an identical normalized URL."""
        wanted = identifiers.normalized_url or ""
        host = extract_host(wanted)
        records = store.search(
            exclude_non_bibliographic(SearchCondition("url", "contains", host)),
            limit=self.limit,
        )
        candidates: list[Candidate] = []
        for record in _others(records, exclude_key):
            url = record.get_field("url")
            if url and normalize_url(url) == wanted:
                candidates.append(
                    Candidate(record=record, score=self.score, reason="Normalized URL match")
                )
        return candidates


# ============================================================================
# Fuzzy strategies
# ============================================================================


class TitleAuthorYearStrategy:
    """Weighted title/author/year similarity over the first author's records.

    Attributes
    ----------
    limit : int
        Maximum number of same-author records inspected.
    min_score : int
        Minimum combined score kept.
    weights : ScoreWeights
        Term weights for ``combined_similarity``.
    """

    name: str = "title_author_year"

    def __init__(
        self,
        limit: int = AUTHOR_SEARCH_LIMIT,
        min_score: int = MIN_FUZZY_SCORE,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
    ) -> None:
        self.limit = limit
        self.min_score = min_score
        self.weights = weights

    def applies(self, identifiers: IdentifierSet) -> bool:
        """Requires title, first author and year."""
        return bool(identifiers.title and identifiers.first_author and identifiers.year is not None)

    def search(
        self,
        identifiers: IdentifierSet,
        exclude_key: str,
        store: RecordStore,
    ) -> list[Candidate]:
        """Score the first author's other records."""
        records = store.search(
            exclude_non_bibliographic(
                SearchCondition("creator", "contains", identifiers.first_author or "")
            ),
            limit=self.limit,
        )
        candidates: list[Candidate] = []
        for record in _others(records, exclude_key):
            score = combined_similarity(identifiers, record, self.weights)
            if score >= self.min_score:
                candidates.append(
                    Candidate(
                        record=record,
                        score=score,
                        reason=f"Title + Author + Year similarity ({score}%)",
                    )
                )
        return candidates


class TitleOnlyStrategy:
    """Title similarity fallback for records lacking author or year.

    Attributes
    ----------
    limit : int
        Maximum number of records inspected.
    min_score : int
        Minimum title score kept.
    """

    name: str = "title_only"

    def __init__(self, limit: int = TITLE_SEARCH_LIMIT, min_score: int = MIN_FUZZY_SCORE) -> None:
        self.limit = limit
        self.min_score = min_score

    def applies(self, identifiers: IdentifierSet) -> bool:
        """Title present but author or year missing."""
        if not identifiers.title:
            return False
        return not (identifiers.first_author and identifiers.year is not None)

    def search(
        self,
        identifiers: IdentifierSet,
        exclude_key: str,
        store: RecordStore,
    ) -> list[Candidate]:
        """Score records whose title contains the first three title words."""
        title = identifiers.title or ""
        prefix = title_search_prefix(title)
        if not prefix:
            return []
        records = store.search(
            exclude_non_bibliographic(SearchCondition("title", "contains", prefix)),
            limit=self.limit,
        )
        candidates: list[Candidate] = []
        for record in _others(records, exclude_key):
            score = title_similarity_score(title, record.get_field("title"))
            if score >= self.min_score:
                candidates.append(
                    Candidate(record=record, score=score, reason=f"Title similarity ({score}%)")
                )
        return candidates


def title_search_prefix(title: str) -> str:
    """First title words with edge punctuation removed.

    ``"Deep Learning: Basics"`` yields ``"Deep Learning Basics"``; inner
    punctuation such as the hyphen in ``"Graph-based"`` is kept.
    """
    words = (WORD_EDGE_PUNCT_RE.sub("", word) for word in title.split())
    return " ".join([word for word in words if word][:TITLE_PREFIX_WORDS])


# ============================================================================
# Runner
# ============================================================================


def run_strategy(
    strategy: SearchStrategy,
    identifiers: IdentifierSet,
    exclude_key: str,
    store: RecordStore,
    logger: AuditLogger | None = None,
) -> StrategyOutcome:
    """Run *strategy* and capture its result or failure.

    Parameters
    ----------
    strategy : SearchStrategy
        Strategy to run.
    identifiers : IdentifierSet
        Identifiers of the new record.
    exclude_key : str
        Key of the new record (never returned as a candidate).
    store : RecordStore
        Store to query.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    StrategyOutcome
        Candidates found, or an empty outcome carrying the error.
    """
    try:
        if not strategy.applies(identifiers):
            return StrategyOutcome(strategy=strategy.name, applied=False)
        candidates = tuple(strategy.search(identifiers, exclude_key, store))
    except Exception as e:
        message = f"{type(e).__name__}: {e}"
        if logger:
            logger.error(
                exception_class=type(e).__name__,
                message=f"Strategy {strategy.name} failed: {e}",
                rid=exclude_key,
            )
        return StrategyOutcome(strategy=strategy.name, error=message)

    if logger and candidates:
        logger.event(
            "strategy_matched",
            data={
                "strategy": strategy.name,
                "matches": [{"key": c.key, "score": c.score} for c in candidates],
            },
            rid=exclude_key,
        )
    return StrategyOutcome(strategy=strategy.name, candidates=candidates)
