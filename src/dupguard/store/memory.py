"""In-memory record store.

Implements the ``Record`` and ``RecordStore`` protocols over plain
dictionaries. Searches are case-insensitive and evaluated in insertion
order; mutations are serialized with a lock.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from dupguard.models import Creator, SearchCondition

OPERATORS = ("is", "isNot", "contains", "doesNotContain")


class StoreError(Exception):
    """Raised for store failures (missing records, malformed store files)."""


@dataclass
class MemoryRecord:
    """A library record held in memory.

    Attributes
    ----------
    key : str
        Stable record key.
    item_type : str
        Record type.
    fields : dict[str, str]
        Field values by name (``title``, ``DOI``, ``url``, ``extra``, ...).
    creators : list[Creator]
        Creators in display order.
    editable : bool
        Whether the owning library accepts writes.
    deleted : bool
        Whether the record was deleted.
    """

    key: str
    item_type: str = "journalArticle"
    fields: dict[str, str] = field(default_factory=dict)
    creators: list[Creator] = field(default_factory=list)
    editable: bool = True
    deleted: bool = False

    def get_field(self, name: str) -> str:
        """Return the field value, or an empty string when unset."""
        return self.fields.get(name, "")

    def get_creators(self) -> list[Creator]:
        """Return a copy of the creators."""
        return list(self.creators)

    def is_editable(self) -> bool:
        """Whether the owning library accepts writes."""
        return self.editable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "key": self.key,
            "item_type": self.item_type,
            "fields": dict(self.fields),
            "creators": [creator.to_dict() for creator in self.creators],
        }
        if not self.editable:
            data["editable"] = False
        if self.deleted:
            data["deleted"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryRecord:
        """Build a record from its dictionary form."""
        return cls(
            key=data["key"],
            item_type=data["item_type"],
            fields=dict(data.get("fields", {})),
            creators=[Creator.from_dict(c) for c in data.get("creators", [])],
            editable=data.get("editable", True),
            deleted=data.get("deleted", False),
        )


def _condition_values(record: MemoryRecord, condition: SearchCondition) -> list[str]:
    if condition.field == "itemType":
        return [record.item_type]
    if condition.field == "creator":
        values: list[str] = []
        for creator in record.creators:
            values.extend(creator.all_names())
            if creator.first_name and creator.last_name:
                values.append(f"{creator.first_name} {creator.last_name}")
        return values
    return [record.get_field(condition.field)]


def matches(record: MemoryRecord, condition: SearchCondition) -> bool:
    """Evaluate one search condition against *record*.

    Raises
    ------
    ValueError
        If the operator is unknown.
    """
    if condition.operator not in OPERATORS:
        raise ValueError(f"Unknown search operator: {condition.operator!r}")

    wanted = condition.value.casefold()
    values = [value.casefold() for value in _condition_values(record, condition)]

    if condition.operator in ("is", "isNot"):
        found = wanted in values
    else:
        found = any(wanted in value for value in values)

    return found if condition.operator in ("is", "contains") else not found


class MemoryRecordStore:
    """Dictionary-backed ``RecordStore``.

    Deleted records are marked ``deleted`` and removed from the store.
    """

    def __init__(self, records: Iterable[MemoryRecord] = ()) -> None:
        self._records: dict[str, MemoryRecord] = {}
        self._lock = threading.Lock()
        for record in records:
            self.add(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MemoryRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def add(self, record: MemoryRecord) -> MemoryRecord:
        """Add *record*, replacing any record with the same key."""
        with self._lock:
            self._records[record.key] = record
        return record

    def search(
        self,
        conditions: Sequence[SearchCondition],
        limit: int | None = None,
    ) -> list[MemoryRecord]:
        """Return records matching all *conditions*, at most *limit*."""
        results: list[MemoryRecord] = []
        for record in list(self._records.values()):
            if record.deleted:
                continue
            if all(matches(record, condition) for condition in conditions):
                results.append(record)
                if limit is not None and len(results) >= limit:
                    break
        return results

    def get(self, key: str) -> MemoryRecord | None:
        """Return the record stored under *key*, if any."""
        return self._records.get(key)

    def delete(self, record: Any) -> None:
        """Delete *record*.

        Raises
        ------
        StoreError
            If no record with that key is stored.
        """
        with self._lock:
            stored = self._records.pop(record.key, None)
            if stored is None:
                raise StoreError(f"Record {record.key} not found")
            stored.deleted = True
