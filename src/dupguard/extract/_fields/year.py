"""Year extraction."""

from datetime import date

from dupguard.models import Record
from dupguard.utils import current_year

from .._helpers import LEADING_YEAR_RE, YEAR_RE, field_text

# Parsed years further ahead than this are treated as garbage
MAX_FUTURE_YEARS = 10


def extract_year(record: Record) -> int | None:
    """Return the publication year from the ``date`` field."""
    return parse_year(field_text(record, "date"))


def parse_year(value: str | None) -> int | None:
    """Extract a year from a free-form date string.

    A direct parse (ISO date or leading ``YYYY``) is tried first and kept
    only when the year lies in ``1000 <= year <= current_year + 10``.
    Otherwise the first ``19xx``/``20xx`` token in the string is used.

    Parameters
    ----------
    value : str | None
        Raw date value.

    Returns
    -------
    int | None
        Year, or None when nothing plausible is found.
    """
    if not value:
        return None
    value = value.strip()

    year = _parse_direct(value)
    if year is not None and 1000 <= year <= current_year() + MAX_FUTURE_YEARS:
        return year

    match = YEAR_RE.search(value)
    return int(match.group(0)) if match else None


def _parse_direct(value: str) -> int | None:
    try:
        return date.fromisoformat(value[:10]).year
    except ValueError:
        pass
    match = LEADING_YEAR_RE.match(value)
    return int(match.group(1)) if match else None
