"""Record and store interfaces consumed by the engine.

The engine never talks to a concrete library backend. It depends only on
the ``Record`` and ``RecordStore`` protocols below; ``dupguard.store``
ships an in-memory implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "Creator",
    "SearchCondition",
    "Record",
    "RecordStore",
    "EXCLUDED_ITEM_TYPES",
    "exclude_non_bibliographic",
]

# Child items that are never duplicate candidates
EXCLUDED_ITEM_TYPES = ("attachment", "note")


@dataclass(frozen=True)
class Creator:
    """A record creator (author, editor, ...).

    Attributes
    ----------
    last_name : str | None
        Family name for two-field names.
    first_name : str | None
        Given name(s) for two-field names.
    name : str | None
        Full name for single-field names (institutions, unparsed names).
    """

    last_name: str | None = None
    first_name: str | None = None
    name: str | None = None

    @property
    def sort_name(self) -> str:
        """Surname when present, otherwise the single-field name."""
        return self.last_name or self.name or ""

    def all_names(self) -> list[str]:
        """Return every non-empty name part."""
        return [part for part in (self.last_name, self.first_name, self.name) if part]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting empty parts."""
        data: dict[str, Any] = {}
        if self.last_name:
            data["last_name"] = self.last_name
        if self.first_name:
            data["first_name"] = self.first_name
        if self.name:
            data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Creator:
        """Build a creator from its dictionary form."""
        return cls(
            last_name=data.get("last_name"),
            first_name=data.get("first_name"),
            name=data.get("name"),
        )


@dataclass(frozen=True)
class SearchCondition:
    """One store search predicate.

    Attributes
    ----------
    field : str
        Field name (``DOI``, ``url``, ``extra``, ...) or one of the
        pseudo-fields ``itemType`` and ``creator``.
    operator : str
        ``is``, ``isNot``, ``contains`` or ``doesNotContain``.
    value : str
        Value compared case-insensitively.
    """

    field: str
    operator: str
    value: str


def exclude_non_bibliographic(*conditions: SearchCondition) -> list[SearchCondition]:
    """Append the attachment/note exclusions to *conditions*."""
    return [
        *conditions,
        *(SearchCondition("itemType", "isNot", item_type) for item_type in EXCLUDED_ITEM_TYPES),
    ]


@runtime_checkable
class Record(Protocol):
    """Read access to one library record.

    Attributes
    ----------
    key : str
        Stable record key.
    item_type : str
        Record type (``journalArticle``, ``book``, ...).
    deleted : bool
        Whether the record is already marked deleted.
    """

    key: str
    item_type: str
    deleted: bool

    def get_field(self, name: str) -> str:
        """Return the field value, or an empty string when unset."""
        ...

    def get_creators(self) -> list[Creator]:
        """Return creators in display order."""
        ...

    def is_editable(self) -> bool:
        """Whether the library owning the record accepts writes."""
        ...


@runtime_checkable
class RecordStore(Protocol):
    """Library backend queried and mutated by the engine.

    Implementations serialize their own mutating calls.
    """

    def search(
        self,
        conditions: Sequence[SearchCondition],
        limit: int | None = None,
    ) -> list[Record]:
        """Return records matching all *conditions*, at most *limit*."""
        ...

    def get(self, key: str) -> Record | None:
        """Return the record stored under *key*, if any."""
        ...

    def delete(self, record: Record) -> None:
        """Delete *record*; raises on failure."""
        ...
