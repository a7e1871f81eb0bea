"""ISBN and ISSN extraction."""

from dupguard.models import Record

from .._helpers import ISBN_SEPARATORS_RE, field_text


def extract_isbn(record: Record) -> str | None:
    """Return the ISBN with hyphens and whitespace removed."""
    isbn = ISBN_SEPARATORS_RE.sub("", field_text(record, "ISBN"))
    return isbn or None


def extract_issn(record: Record) -> str | None:
    """Return the ISSN as entered."""
    return field_text(record, "ISSN") or None
