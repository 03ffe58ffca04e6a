"""
Batch service - row-level validation of uploaded metric tables.

Rows are visited strictly in input order with a simulated per-row delay.
A row is valid when it carries a non-empty ``employee_name`` and a non-empty
``adherence_pct``; this is a presence check, not a range check. Invalid rows
are counted and processing continues. Counts and progress only ever grow.

A run can be stopped cooperatively with an ``asyncio.Event`` that is checked
between rows.
"""

import asyncio
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any, Optional

from shiftsense.models.batch import BatchProgress, BatchResult, RowOutcome
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("employee_name", "adherence_pct")


class EmptyBatchError(Exception):
    """Raised when a batch run is started with no rows."""

    pass


def missing_required_fields(row: Mapping[str, Any]) -> list[str]:
    """Required fields that are absent or blank in a row."""
    missing = []
    for field in REQUIRED_FIELDS:
        value = row.get(field)
        # Whitespace-only counts as missing, unlike a plain truthiness check
        if value is None or not str(value).strip():
            missing.append(field)
    return missing


def is_valid_row(row: Mapping[str, Any]) -> bool:
    return not missing_required_fields(row)


class BatchService:
    """
    Validates uploaded rows one at a time.

    Attributes:
        row_delay: Simulated per-row processing latency (seconds)
    """

    def __init__(self, row_delay: float = 0.05):
        self.row_delay = row_delay

    async def iter_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[tuple[RowOutcome, BatchProgress]]:
        """
        Validate rows in order, yielding the outcome and running totals
        after each one.

        Raises:
            EmptyBatchError: If ``rows`` is empty
        """
        total = len(rows)
        if total == 0:
            raise EmptyBatchError("No data to process.")

        success = 0
        failed = 0
        for index, row in enumerate(rows):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("batch_cancelled", processed=index, total_rows=total)
                return

            await asyncio.sleep(self.row_delay)

            missing = missing_required_fields(row)
            if missing:
                failed += 1
                logger.debug("batch_row_invalid", row_index=index, missing_fields=missing)
            else:
                success += 1

            outcome = RowOutcome(
                row_index=index,
                valid=not missing,
                employee_name=str(row.get("employee_name") or ""),
                missing_fields=missing,
            )
            progress = BatchProgress(
                processed=index + 1,
                total_rows=total,
                success=success,
                failed=failed,
                progress=(index + 1) * 100 / total,
            )
            yield outcome, progress

    async def process(
        self,
        rows: Sequence[Mapping[str, Any]],
        on_progress: Optional[Callable[[BatchProgress], Any]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> BatchResult:
        """
        Run validation over every row and summarize the outcome.

        Args:
            rows: Parsed rows in upload order
            on_progress: Called with running totals after each row
            cancel_event: Stops the run before the next row once set

        Returns:
            BatchResult with counts, final progress and per-row outcomes

        Raises:
            EmptyBatchError: If ``rows`` is empty
        """
        logger.info("batch_started", total_rows=len(rows))

        result = BatchResult(total_rows=len(rows))
        async for outcome, progress in self.iter_rows(rows, cancel_event=cancel_event):
            result.row_outcomes.append(outcome)
            result.success = progress.success
            result.failed = progress.failed
            result.progress = progress.progress
            if on_progress is not None:
                on_progress(progress)

        processed = len(result.row_outcomes)
        result.completed = processed == result.total_rows
        result.cancelled = not result.completed

        logger.info(
            "batch_completed",
            total_rows=result.total_rows,
            success=result.success,
            failed=result.failed,
            cancelled=result.cancelled,
        )
        return result
