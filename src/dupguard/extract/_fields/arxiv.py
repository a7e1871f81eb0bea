"""ArXiv ID extraction from the extra annotation and the URL."""

from dupguard.models import Record

from .._helpers import ARXIV_PATTERNS, field_text, first_pattern_value


def arxiv_search_text(record: Record) -> str:
    """Text scanned for ArXiv IDs: extra annotation then URL."""
    return f"{field_text(record, 'extra')} {field_text(record, 'url')}"


def extract_arxiv_id(record: Record) -> str | None:
    """Return the new-style or legacy ArXiv ID of *record*."""
    return first_pattern_value(ARXIV_PATTERNS, arxiv_search_text(record))
