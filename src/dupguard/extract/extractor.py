"""Identifier extraction for duplicate detection.

This module orchestrates the per-field extractors. Extraction never
raises: a failing field is logged and left absent, and the remaining
fields are still extracted.
"""

from collections.abc import Callable
from typing import Any

from dupguard.audit.logger import AuditLogger
from dupguard.models import IdentifierSet, Record

from ._fields import (
    extract_arxiv_id,
    extract_doi,
    extract_first_author,
    extract_isbn,
    extract_issn,
    extract_pmcid,
    extract_pmid,
    extract_title,
    extract_url,
    extract_year,
)

__all__ = ["extract_identifiers"]

# IdentifierSet attribute -> extractor, in extraction order
_FIELD_EXTRACTORS: tuple[tuple[str, Callable[[Record], Any]], ...] = (
    ("doi", extract_doi),
    ("isbn", extract_isbn),
    ("issn", extract_issn),
    ("title", extract_title),
    ("first_author", extract_first_author),
    ("year", extract_year),
    ("item_type", lambda record: record.item_type or None),
    ("pmid", extract_pmid),
    ("pmcid", extract_pmcid),
    ("arxiv_id", extract_arxiv_id),
    ("original_url", extract_url),
)


def extract_identifiers(record: Record, logger: AuditLogger | None = None) -> IdentifierSet:
    """Extract identifiers and matching signals from *record*.

    Parameters
    ----------
    record : Record
        Record to inspect.
    logger : AuditLogger | None, optional
        Audit logger; field failures are logged as WARN events.

    Returns
    -------
    IdentifierSet
        Extracted identifiers. Normalized URL and title are derived from
        the extracted URL and title.
    """
    rid = getattr(record, "key", None)
    values: dict[str, Any] = {}

    for name, extractor in _FIELD_EXTRACTORS:
        try:
            value = extractor(record)
        except Exception as e:
            if logger:
                logger.warning(
                    "identifier_extraction_failed",
                    f"{name}: {type(e).__name__}: {e}",
                    rid=rid,
                )
            continue
        if value is not None:
            values[name] = value

    identifiers = IdentifierSet(**values)

    if logger:
        logger.event(
            "identifiers_extracted",
            data={
                "doi": identifiers.doi,
                "isbn": identifiers.isbn,
                "pmid": identifiers.pmid,
                "pmcid": identifiers.pmcid,
                "arxiv_id": identifiers.arxiv_id,
                "normalized_url": identifiers.normalized_url,
                "has_title": identifiers.title is not None,
                "has_first_author": identifiers.first_author is not None,
                "year": identifiers.year,
            },
            level="DEBUG",
            rid=rid,
        )

    return identifiers
