"""PMID/PMCID extraction.

The structured ``PMID`` field wins; otherwise both identifiers are read
from the free-text ``extra`` annotation.
"""

from dupguard.models import Record

from .._helpers import PMCID_PATTERNS, PMID_PATTERNS, field_text, first_pattern_value, to_pmcid


def extract_pmid(record: Record) -> str | None:
    """Return the PubMed ID of *record*."""
    pmid = field_text(record, "PMID")
    if pmid:
        digits = "".join(c for c in pmid if c.isdigit())
        if digits:
            return digits
    return first_pattern_value(PMID_PATTERNS, field_text(record, "extra"))


def extract_pmcid(record: Record) -> str | None:
    """Return the ``PMC``-prefixed PubMed Central ID of *record*."""
    value = first_pattern_value(PMCID_PATTERNS, field_text(record, "extra"))
    return to_pmcid(value) if value else None
