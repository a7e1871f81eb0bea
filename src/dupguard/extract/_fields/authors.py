"""First-author extraction."""

from collections.abc import Sequence

from dupguard.models import Creator, Record


def extract_first_author(record: Record) -> str | None:
    """Return the first creator's surname, or full name."""
    return first_author_name(record.get_creators())


def first_author_name(creators: Sequence[Creator] | None) -> str | None:
    """Surname of the first creator, else its single-field name."""
    if not creators:
        return None
    return creators[0].sort_name.strip() or None
