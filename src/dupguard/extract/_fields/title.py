"""Title extraction."""

from dupguard.models import Record

from .._helpers import field_text


def extract_title(record: Record) -> str | None:
    """Return the trimmed title."""
    return field_text(record, "title") or None
