"""DOI extraction."""

from dupguard.models import Record

from .._helpers import DOI_PREFIX_RE, field_text


def extract_doi(record: Record) -> str | None:
    """Return the record DOI without any doi.org resolver prefix."""
    return clean_doi(field_text(record, "DOI"))


def clean_doi(doi: str) -> str | None:
    """Strip a ``https://(dx.)doi.org/`` prefix; None for empty input."""
    doi = DOI_PREFIX_RE.sub("", doi.strip()).strip()
    return doi or None
