"""Identifier set derived from a single record."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from dupguard.utils.text import normalize_title, normalize_url

__all__ = ["IdentifierSet"]


@dataclass(frozen=True)
class IdentifierSet:
    """Identifiers and matching signals extracted from one record.

    Every attribute is optional; an absent value disables the search
    strategies that need it. ``normalized_url`` and ``normalized_title``
    are derived from ``original_url`` and ``title`` at construction and
    cannot be passed in.

    Attributes
    ----------
    doi : str | None
        DOI without resolver prefix.
    isbn : str | None
        ISBN without hyphens or spaces.
    issn : str | None
        ISSN as entered.
    pmid : str | None
        PubMed ID (digits).
    pmcid : str | None
        PubMed Central ID, always ``PMC``-prefixed.
    arxiv_id : str | None
        ArXiv identifier (new-style or legacy).
    original_url : str | None
        Trimmed URL field.
    title : str | None
        Trimmed title.
    first_author : str | None
        First creator's surname, or full name.
    year : int | None
        Publication year.
    item_type : str | None
        Record type.
    normalized_url : str | None
        ``normalize_url(original_url)``.
    normalized_title : str | None
        ``normalize_title(title)``.
    """

    doi: str | None = None
    isbn: str | None = None
    issn: str | None = None
    pmid: str | None = None
    pmcid: str | None = None
    arxiv_id: str | None = None
    original_url: str | None = None
    title: str | None = None
    first_author: str | None = None
    year: int | None = None
    item_type: str | None = None
    normalized_url: str | None = field(init=False, default=None)
    normalized_title: str | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.original_url:
            object.__setattr__(self, "normalized_url", normalize_url(self.original_url))
        if self.title:
            object.__setattr__(self, "normalized_title", normalize_title(self.title) or None)

    @property
    def is_empty(self) -> bool:
        """True when no identifier and no title were found."""
        return not any(
            (
                self.doi,
                self.isbn,
                self.pmid,
                self.pmcid,
                self.arxiv_id,
                self.original_url,
                self.title,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping absent values."""
        return {name: value for name, value in asdict(self).items() if value is not None}
