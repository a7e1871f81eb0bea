"""Direct record lookup and administrative deletion.

These operations reuse the candidate strategies and the merge executor
outside of batch processing: finding the records saved for a URL or an
identifier, and deleting a record by key.
"""

from __future__ import annotations

from dupguard.audit.logger import AuditLogger
from dupguard.candidates.strategies import (
    ArXivStrategy,
    DOIStrategy,
    ExtraIdentifierStrategy,
    FieldMatchStrategy,
    ISBNStrategy,
    PMCIDStrategy,
    PMIDStrategy,
)
from dupguard.extract import clean_doi, to_pmcid
from dupguard.merge.executor import ADMIN_DELETE_TIMEOUT, MergeExecutor
from dupguard.merge.models import DeletionCategory, DeletionResult
from dupguard.models import IdentifierSet, Record, RecordStore, SearchCondition
from dupguard.models.records import exclude_non_bibliographic
from dupguard.utils import extract_host, normalize_url

# identifier kind → (IdentifierSet field, strategy class)
IDENTIFIER_KINDS: dict[str, tuple[str, type[FieldMatchStrategy | ExtraIdentifierStrategy]]] = {
    "doi": ("doi", DOIStrategy),
    "isbn": ("isbn", ISBNStrategy),
    "pmid": ("pmid", PMIDStrategy),
    "pmcid": ("pmcid", PMCIDStrategy),
    "arxiv": ("arxiv_id", ArXivStrategy),
}


def find_record_by_url(
    store: RecordStore,
    url: str,
    logger: AuditLogger | None = None,
) -> list[Record]:
    """Find records saved for *url*.

    Exact URL matches win; otherwise same-host records are compared by
    normalized URL.

    Parameters
    ----------
    store : RecordStore
        Library store.
    url : str
        URL to look up.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    list[Record]
        Matching records, possibly empty.
    """
    url = url.strip()
    if not url:
        return []

    records = store.search(exclude_non_bibliographic(SearchCondition("url", "is", url)))
    match = "exact"
    if not records:
        wanted = normalize_url(url)
        same_host = store.search(
            exclude_non_bibliographic(SearchCondition("url", "contains", extract_host(wanted)))
        )
        records = [
            record
            for record in same_host
            if record.get_field("url") and normalize_url(record.get_field("url")) == wanted
        ]
        match = "normalized"

    if logger:
        logger.event(
            "url_lookup",
            data={"url": url, "match": match, "keys": [record.key for record in records]},
        )
    return records


def _identifier_set(kind: str, value: str) -> IdentifierSet:
    attribute = IDENTIFIER_KINDS[kind][0]
    value = value.strip()
    if not value:
        return IdentifierSet()
    if kind == "doi":
        value = clean_doi(value) or ""
    elif kind == "isbn":
        value = "".join(value.replace("-", "").split())
    elif kind == "pmcid":
        value = to_pmcid(value)
    return IdentifierSet(**{attribute: value})


def find_record_by_identifier(
    store: RecordStore,
    kind: str,
    value: str,
    logger: AuditLogger | None = None,
) -> list[Record]:
    """Find records carrying an identifier.

    Parameters
    ----------
    store : RecordStore
        Library store.
    kind : str
        One of ``doi``, ``isbn``, ``pmid``, ``pmcid``, ``arxiv``.
    value : str
        Identifier value (DOI URL prefixes and ISBN hyphens are accepted).
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    list[Record]
        Matching records, possibly empty.

    Raises
    ------
    ValueError
        If *kind* is unknown.
    """
    if kind not in IDENTIFIER_KINDS:
        valid = ", ".join(IDENTIFIER_KINDS)
        raise ValueError(f"Unknown identifier kind: {kind!r}. Valid kinds: {valid}")

    identifiers = _identifier_set(kind, value)
    strategy = IDENTIFIER_KINDS[kind][1]()
    if not strategy.applies(identifiers):
        return []

    records = [candidate.record for candidate in strategy.search(identifiers, "", store)]
    if logger:
        logger.event(
            "identifier_lookup",
            data={"kind": kind, "value": value, "keys": [record.key for record in records]},
        )
    return records


def delete_record_by_key(
    store: RecordStore,
    key: str,
    timeout: float = ADMIN_DELETE_TIMEOUT,
    logger: AuditLogger | None = None,
) -> DeletionResult:
    """Delete the record stored under *key*.

    Parameters
    ----------
    store : RecordStore
        Library store.
    key : str
        Record key.
    timeout : float, optional
        Time budget in seconds.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    DeletionResult
        Deletion outcome; ``not_found`` when no record has *key*.

    Raises
    ------
    ValueError
        If *key* is empty.
    """
    if not key or not key.strip():
        raise ValueError("Invalid record key: must be a non-empty string")

    record = store.get(key.strip())
    if record is None:
        result = DeletionResult(
            success=False,
            category=DeletionCategory.NOT_FOUND,
            message=f'Record with key "{key}" not found',
        )
        if logger:
            logger.warning("deletion_failed", message=f"[{result.category}] {result.message}", rid=key)
        return result

    return MergeExecutor(store, timeout=timeout, logger=logger).delete(record)
