"""Compiled regex patterns and lookup helpers for identifier extraction.

Free-text identifiers are found by trying each pattern of a family in
order; the first capture wins.
"""

import re
from collections.abc import Iterator, Sequence

from dupguard.models import Record

# Pre-compiled regex patterns
DOI_PREFIX_RE = re.compile(r"^https?://(dx\.)?doi\.org/", re.IGNORECASE)
ISBN_SEPARATORS_RE = re.compile(r"[-\s]")
YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
LEADING_YEAR_RE = re.compile(r"^(\d{4})(?:$|[-/])")

PMID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"PMID:\s*(\d+)", re.IGNORECASE),
    re.compile(r"PubMed ID:\s*(\d+)", re.IGNORECASE),
    re.compile(r"pubmed:\s*(\d+)", re.IGNORECASE),
    re.compile(r"pmid\s*(\d+)", re.IGNORECASE),
)

PMCID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"PMC:\s*(PMC\d+)", re.IGNORECASE),
    re.compile(r"PMCID:\s*(PMC\d+)", re.IGNORECASE),
    re.compile(r"PMC ID:\s*(PMC\d+)", re.IGNORECASE),
    re.compile(r"pmc\s*(PMC\d+)", re.IGNORECASE),
    re.compile(r"PMC:?\s*(\d+)", re.IGNORECASE),
)

# Pre-2007 archive names, used to anchor bare legacy IDs
LEGACY_ARXIV_ARCHIVES = "|".join(
    (
        "astro-ph",
        "cond-mat",
        "gr-qc",
        "hep-ex",
        "hep-lat",
        "hep-ph",
        "hep-th",
        "math-ph",
        "nlin",
        "nucl-ex",
        "nucl-th",
        "physics",
        "quant-ph",
        "math",
        "cs",
        "q-bio",
        "q-fin",
        "stat",
    )
)

ARXIV_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"arXiv:\s*(\d{4}\.\d{4,5}(?:v\d+)?)", re.IGNORECASE),
    re.compile(r"arxiv\.org/(?:abs|pdf)/(\d{4}\.\d{4,5}(?:v\d+)?)", re.IGNORECASE),
    # Legacy form: archive/YYMMNNN
    re.compile(r"arXiv:\s*([a-z-]+(?:\.[A-Z]{2})?/\d{7}(?:v\d+)?)", re.IGNORECASE),
    re.compile(
        r"arxiv\.org/(?:abs|pdf)/([a-z-]+(?:\.[A-Z]{2})?/\d{7}(?:v\d+)?)", re.IGNORECASE
    ),
    re.compile(
        rf"\b((?:{LEGACY_ARXIV_ARCHIVES})(?:\.[A-Z]{{2}})?/\d{{7}}(?:v\d+)?)\b", re.IGNORECASE
    ),
)


def field_text(record: Record, name: str) -> str:
    """Return a stripped field value, empty when unset."""
    return (record.get_field(name) or "").strip()


def first_pattern_value(patterns: Sequence[re.Pattern[str]], text: str) -> str | None:
    """Return the first group of the first pattern that matches *text*."""
    if not text:
        return None
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1):
            return match.group(1)
    return None


def iter_pattern_values(patterns: Sequence[re.Pattern[str]], text: str) -> Iterator[str]:
    """Yield every captured value of every pattern in *text*."""
    if not text:
        return
    for pattern in patterns:
        for match in pattern.finditer(text):
            if match.group(1):
                yield match.group(1)


def to_pmcid(value: str) -> str:
    """Upper-case a PMC ID and make sure it carries the ``PMC`` prefix."""
    value = value.strip().upper()
    return value if value.startswith("PMC") else f"PMC{value}"
