"""URL extraction."""

from dupguard.models import Record

from .._helpers import field_text


def extract_url(record: Record) -> str | None:
    """Return the trimmed URL field."""
    return field_text(record, "url") or None
