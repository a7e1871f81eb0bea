"""Identifier extraction from library records."""

from dupguard.extract._fields import (
    arxiv_search_text,
    clean_doi,
    first_author_name,
    parse_year,
)
from dupguard.extract._helpers import (
    ARXIV_PATTERNS,
    PMCID_PATTERNS,
    PMID_PATTERNS,
    iter_pattern_values,
    to_pmcid,
)
from dupguard.extract.extractor import extract_identifiers

__all__ = [
    "extract_identifiers",
    "clean_doi",
    "parse_year",
    "first_author_name",
    "arxiv_search_text",
    "iter_pattern_values",
    "to_pmcid",
    "PMID_PATTERNS",
    "PMCID_PATTERNS",
    "ARXIV_PATTERNS",
]
