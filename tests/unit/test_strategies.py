"""Tests for candidate search strategies.

Each strategy is exercised against an in-memory store: applicability,
matching, self-exclusion, attachment/note exclusion and bounds.
"""

from collections.abc import Callable

import pytest

from dupguard.candidates import (
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
from dupguard.candidates.strategies import title_search_prefix
from dupguard.extract import extract_identifiers
from dupguard.models import IdentifierSet
from dupguard.store import MemoryRecord, MemoryRecordStore

# ============================================================================
# Protocol
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "strategy",
    [
        DOIStrategy(),
        ISBNStrategy(),
        PMIDStrategy(),
        PMCIDStrategy(),
        ArXivStrategy(),
        NormalizedURLStrategy(),
        TitleAuthorYearStrategy(),
        TitleOnlyStrategy(),
    ],
)
def test_strategies_satisfy_protocol(strategy: SearchStrategy) -> None:
    """Test every strategy is a SearchStrategy."""
    assert isinstance(strategy, SearchStrategy)


@pytest.mark.unit
def test_strategies_do_not_apply_to_empty_identifiers() -> None:
    """Test no strategy applies without signals."""
    empty = IdentifierSet()
    for strategy in (
        DOIStrategy(),
        ISBNStrategy(),
        PMIDStrategy(),
        PMCIDStrategy(),
        ArXivStrategy(),
        NormalizedURLStrategy(),
        TitleAuthorYearStrategy(),
        TitleOnlyStrategy(),
    ):
        assert not strategy.applies(empty)


# ============================================================================
# Exact identifiers
# ============================================================================


@pytest.mark.unit
def test_doi_match_excludes_self_and_attachments(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test DOI equality, self-exclusion and attachment exclusion."""
    new = make_record("NEW", doi="10.1000/xyz")
    store = make_store(
        new,
        make_record("OLD", doi="10.1000/XYZ"),
        make_record("ATT", doi="10.1000/xyz", item_type="attachment"),
        make_record("NOTE", doi="10.1000/xyz", item_type="note"),
        make_record("OTHER", doi="10.1000/abc"),
    )

    candidates = DOIStrategy().search(extract_identifiers(new), "NEW", store)

    assert [c.key for c in candidates] == ["OLD"]
    assert candidates[0].score == 100
    assert candidates[0].reason == "DOI match"
    assert candidates[0].confidence == "high"


@pytest.mark.unit
def test_isbn_match(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test ISBN equality after separator removal."""
    new = make_record("NEW", isbn="978-0-13-468599-1", item_type="book")
    store = make_store(new, make_record("OLD", isbn="9780134685991", item_type="book"))

    candidates = ISBNStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score, c.reason) for c in candidates] == [("OLD", 95, "ISBN match")]


@pytest.mark.unit
def test_pmid_requires_exact_captured_value(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test a containing but different PMID is rejected."""
    new = make_record("NEW", extra="PMID: 1234")
    store = make_store(
        new,
        make_record("LONGER", extra="PMID: 12345"),
        make_record("SAME", extra="Some note\nPMID: 1234"),
        make_record("MENTION", extra="See figure 1234"),
    )

    candidates = PMIDStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score) for c in candidates] == [("SAME", 98)]


@pytest.mark.unit
def test_pmcid_match(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test PMC IDs match regardless of label and case."""
    new = make_record("NEW", extra="PMCID: PMC555")
    store = make_store(new, make_record("OLD", extra="PMC ID: pmc555"), make_record("X", extra="PMC5556"))

    candidates = PMCIDStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score, c.reason) for c in candidates] == [("OLD", 98, "PMC ID match")]


@pytest.mark.unit
def test_pmcid_match_unprefixed_numeric_form(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test a stored ``PMC: 555`` annotation matches a prefixed PMC ID."""
    new = make_record("NEW", extra="PMCID: PMC555")
    store = make_store(
        new,
        make_record("NUMERIC", extra="PMC: 555"),
        make_record("PUBMED", extra="PMID: 555"),
    )

    candidates = PMCIDStrategy().search(extract_identifiers(new), "NEW", store)

    assert [c.key for c in candidates] == ["NUMERIC"]


@pytest.mark.unit
def test_arxiv_match_in_extra(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test ArXiv IDs are matched in the extra annotation."""
    new = make_record("NEW", url="https://arxiv.org/abs/1706.03762")
    store = make_store(new, make_record("OLD", extra="arXiv: 1706.03762"))

    candidates = ArXivStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score) for c in candidates] == [("OLD", 96)]


@pytest.mark.unit
def test_extra_strategies_bounded(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test extra-field strategies keep at most ``limit`` matches."""
    new = make_record("NEW", extra="PMID: 42")
    others = [make_record(f"OLD{i}", extra="PMID: 42") for i in range(8)]
    store = make_store(new, *others)

    assert len(PMIDStrategy().search(extract_identifiers(new), "NEW", store)) == 5
    assert len(PMIDStrategy(limit=2).search(extract_identifiers(new), "NEW", store)) == 2


# ============================================================================
# URL
# ============================================================================


@pytest.mark.unit
def test_normalized_url_match(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test cosmetic URL differences still match, different paths do not."""
    new = make_record("NEW", url="https://www.example.com/paper/1/?utm_source=mail")
    store = make_store(
        new,
        make_record("OLD", url="https://example.com/paper/1"),
        make_record("SIBLING", url="https://example.com/paper/2"),
    )

    candidates = NormalizedURLStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score, c.reason) for c in candidates] == [
        ("OLD", 88, "Normalized URL match")
    ]


# ============================================================================
# Fuzzy
# ============================================================================


@pytest.mark.unit
def test_title_author_year_threshold(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test same-author records are kept only at or above 70."""
    new = make_record("NEW", title="Deep Learning Basics", creators=["Smith, John"], date="2020")
    store = make_store(
        new,
        make_record("SEQUEL", title="Deep Learning Basics Part 2", creators=["Smith, J."], date="2020"),
        make_record("UNRELATED", title="Cooking with Herbs", creators=["Smith, Anna"], date="2001"),
        make_record("OTHER_AUTHOR", title="Deep Learning Basics", creators=["Jones"], date="2020"),
    )

    candidates = TitleAuthorYearStrategy().search(extract_identifiers(new), "NEW", store)

    assert [c.key for c in candidates] == ["SEQUEL"]
    # 65 * 0.5 + 100 * 0.3 + 100 * 0.2 = 82.5
    assert candidates[0].score == 83
    assert candidates[0].reason == "Title + Author + Year similarity (83%)"


@pytest.mark.unit
def test_title_only_applies_when_author_or_year_missing() -> None:
    """Test exactly one fuzzy strategy applies to a titled record."""
    full = IdentifierSet(title="T", first_author="A", year=2020)
    no_year = IdentifierSet(title="T", first_author="A")
    no_author = IdentifierSet(title="T", year=2020)

    assert TitleAuthorYearStrategy().applies(full)
    assert not TitleOnlyStrategy().applies(full)
    for ids in (no_year, no_author):
        assert TitleOnlyStrategy().applies(ids)
        assert not TitleAuthorYearStrategy().applies(ids)


@pytest.mark.unit
def test_title_only_search(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test the title-only fallback searches by the first three words."""
    new = make_record("NEW", title="Attention Is All You Need")
    store = make_store(
        new,
        make_record("OLD", title="Attention is all you need."),
        make_record("FAR", title="Attention is all that matters in a very long unrelated title"),
        make_record("MISS", title="Transformers"),
    )

    candidates = TitleOnlyStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score, c.reason) for c in candidates] == [
        ("OLD", 95, "Title similarity (95%)")
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("title", "prefix"),
    [
        ("Deep Learning: Basics", "Deep Learning Basics"),
        ('"Graph-based" methods, revisited', "Graph-based methods revisited"),
        ("A - B", "A B"),
        ("?!", ""),
    ],
)
def test_title_search_prefix_strips_edge_punctuation(title: str, prefix: str) -> None:
    """Test the search prefix drops punctuation around words."""
    assert title_search_prefix(title) == prefix


@pytest.mark.unit
def test_title_only_search_ignores_punctuation_in_prefix(
    make_record: Callable[..., MemoryRecord],
    make_store: Callable[..., MemoryRecordStore],
) -> None:
    """Test a colon in the new title does not hide a stored unpunctuated title."""
    new = make_record("NEW", title="Deep Learning: Basics")
    store = make_store(new, make_record("OLD", title="Deep Learning Basics"))

    candidates = TitleOnlyStrategy().search(extract_identifiers(new), "NEW", store)

    assert [(c.key, c.score) for c in candidates] == [("OLD", 95)]


# ============================================================================
# Runner
# ============================================================================


class ExplodingStrategy:
    """Strategy whose search always fails."""

    name = "exploding"

    def applies(self, identifiers: IdentifierSet) -> bool:
        return True

    def search(self, identifiers, exclude_key, store):  # type: ignore[no-untyped-def]
        raise RuntimeError("index corrupted")


@pytest.mark.unit
def test_run_strategy_captures_failure(
    make_store: Callable[..., MemoryRecordStore],
    audit_logger,
    read_events,
) -> None:
    """Test a failing strategy yields an empty outcome and an error event."""
    outcome = run_strategy(ExplodingStrategy(), IdentifierSet(doi="x"), "NEW", make_store(), audit_logger)

    assert outcome.candidates == ()
    assert not outcome.ok
    assert "index corrupted" in (outcome.error or "")

    errors = [e for e in read_events() if e["event"] == "error"]
    assert errors and errors[0]["rid"] == "NEW"


@pytest.mark.unit
def test_run_strategy_not_applicable(make_store: Callable[..., MemoryRecordStore]) -> None:
    """Test inapplicable strategies are reported as not applied."""
    outcome = run_strategy(DOIStrategy(), IdentifierSet(), "NEW", make_store())
    assert outcome.ok
    assert not outcome.applied
    assert outcome.candidates == ()
