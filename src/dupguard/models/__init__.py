"""Shared data types for dupguard.

Domain-specific types live closer to their consumers:
- Candidate types -> dupguard.candidates.models
- Decision and result types -> dupguard.decision.models
- Deletion types -> dupguard.merge.models
"""

from dupguard.models.identifiers import IdentifierSet
from dupguard.models.records import (
    EXCLUDED_ITEM_TYPES,
    Creator,
    Record,
    RecordStore,
    SearchCondition,
    exclude_non_bibliographic,
)

__all__ = [
    "Creator",
    "IdentifierSet",
    "Record",
    "RecordStore",
    "SearchCondition",
    "EXCLUDED_ITEM_TYPES",
    "exclude_non_bibliographic",
]
