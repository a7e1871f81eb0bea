"""Deadline-bounded deletion of superseded records.

The store call runs on a daemon worker thread so the caller can stop
waiting after the time budget. A timed-out deletion may still complete in
the background; its store state is reported as unknown and never retried.
A hung store call never keeps the interpreter from exiting.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future

from dupguard.audit.logger import AuditLogger
from dupguard.merge.models import DeletionCategory, DeletionResult, MergeAction
from dupguard.models import Record, RecordStore

DEFAULT_DELETE_TIMEOUT = 5.0
ADMIN_DELETE_TIMEOUT = 10.0

# Store error messages containing these mark a transaction failure
TRANSACTION_MARKERS = ("transaction", "database")


def categorize_error(error: Exception) -> DeletionCategory:
    """Map a store exception to a deletion category."""
    message = str(error).lower()
    if any(marker in message for marker in TRANSACTION_MARKERS):
        return DeletionCategory.TRANSACTION
    return DeletionCategory.GENERAL


class MergeExecutor:
    """Deletes new records that duplicate existing ones.

    Attributes
    ----------
    store : RecordStore
        Store owning the records.
    timeout : float
        Per-deletion time budget in seconds.
    logger : AuditLogger | None
        Audit logger.
    """

    def __init__(
        self,
        store: RecordStore,
        timeout: float = DEFAULT_DELETE_TIMEOUT,
        logger: AuditLogger | None = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.store = store
        self.timeout = timeout
        self.logger = logger

    def check_preconditions(self, record: Record) -> DeletionResult | None:
        """Return a failed result if *record* cannot be deleted, else None."""
        if not record.is_editable():
            return DeletionResult(
                success=False,
                category=DeletionCategory.PRECONDITION,
                message="Cannot delete record: library is not editable",
            )
        if record.deleted:
            return DeletionResult(
                success=False,
                category=DeletionCategory.PRECONDITION,
                message="Record is already deleted",
            )
        return None

    def delete(self, record: Record) -> DeletionResult:
        """Delete *record* within the time budget.

        Parameters
        ----------
        record : Record
            Record to delete.

        Returns
        -------
        DeletionResult
            Success, or the failure category and message. Never raises for
            store failures.
        """
        refused = self.check_preconditions(record)
        if refused is not None:
            self._log_failure(record, refused)
            return refused

        future = self._start_delete(record)
        try:
            future.result(timeout=self.timeout)
        except TimeoutError:
            result = DeletionResult(
                success=False,
                category=DeletionCategory.TIMEOUT,
                message=(
                    f"Deletion timed out after {self.timeout:g}s; "
                    "record state is unknown"
                ),
            )
        except Exception as e:
            result = DeletionResult(success=False, category=categorize_error(e), message=str(e))
        else:
            result = DeletionResult(success=True, message=f"Deleted record {record.key}")

        if result.success:
            if self.logger:
                self.logger.event("record_deleted", data={"timeout": self.timeout}, rid=record.key)
        else:
            self._log_failure(record, result)
        return result

    def _start_delete(self, record: Record) -> Future[None]:
        future: Future[None] = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                self.store.delete(record)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(None)

        threading.Thread(target=run, name=f"dupguard-delete-{record.key}", daemon=True).start()
        return future

    def merge(
        self,
        new_record: Record,
        existing_record: Record,
        reason: str,
        score: int,
    ) -> tuple[MergeAction | None, DeletionResult]:
        """Keep *existing_record* by deleting *new_record*.

        Parameters
        ----------
        new_record : Record
            Freshly created duplicate; the only record ever deleted.
        existing_record : Record
            Record kept intact.
        reason : str
            Matching strategies.
        score : int
            Candidate score.

        Returns
        -------
        tuple[MergeAction | None, DeletionResult]
            The merge action (None on failure) and the deletion outcome.
        """
        if new_record.key == existing_record.key:
            return None, DeletionResult(
                success=False,
                category=DeletionCategory.PRECONDITION,
                message="Cannot merge a record with itself",
            )

        result = self.delete(new_record)
        if not result.success:
            return None, result

        action = MergeAction(
            kept_key=existing_record.key,
            deleted_key=new_record.key,
            reason=reason,
            score=score,
            message=f"Kept existing record {existing_record.key}, deleted duplicate {new_record.key}",
        )
        if self.logger:
            self.logger.record_merged(
                rid=new_record.key,
                kept_key=existing_record.key,
                score=score,
                reason=reason,
            )
        return action, result

    def _log_failure(self, record: Record, result: DeletionResult) -> None:
        if self.logger:
            self.logger.warning(
                "deletion_failed",
                message=f"[{result.category}] {result.message}",
                rid=record.key,
            )
