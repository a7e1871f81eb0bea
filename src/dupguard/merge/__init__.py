"""Safe deletion of new records that duplicate existing ones."""

from dupguard.merge.executor import (
    ADMIN_DELETE_TIMEOUT,
    DEFAULT_DELETE_TIMEOUT,
    MergeExecutor,
    categorize_error,
)
from dupguard.merge.models import DeletionCategory, DeletionResult, MergeAction

__all__ = [
    "MergeExecutor",
    "categorize_error",
    "DEFAULT_DELETE_TIMEOUT",
    "ADMIN_DELETE_TIMEOUT",
    "DeletionCategory",
    "DeletionResult",
    "MergeAction",
]
