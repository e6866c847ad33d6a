"""
app/services/batch_executor.py

Best-effort execution of worker create/update operations in fixed-size batches.

Creates in a batch go through one ``bulk_create`` call, so a failing call is
recorded against every create of that batch. Updates are attempted one by
one so a failing update never blocks its siblings. Nothing raised by the
gateway escapes ``execute``.
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence, Union

from app.domain.worker import (
    BatchOutcome,
    CreateOperation,
    FailureEntry,
    SuccessEntry,
    UpdateOperation,
)
from app.logging_utils import log_event
from app.repositories.worker_gateway import WorkerGateway

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

Operation = Union[CreateOperation, UpdateOperation]


def chunked(operations: Sequence[Operation], size: int) -> Iterator[Sequence[Operation]]:
    """
    Yield consecutive chunks of at most ``size`` operations in input order.
    """

    step = max(1, size)
    for start in range(0, len(operations), step):
        yield operations[start : start + step]


def _error_message(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class BatchExecutor:
    """
    Runs create/update operations against a ``WorkerGateway``.
    """

    def __init__(self, gateway: WorkerGateway) -> None:
        self._gateway = gateway

    def execute(
        self,
        operations: Sequence[Operation],
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        organization_id: str | None = None,
    ) -> BatchOutcome:
        successful: list[SuccessEntry] = []
        failed: list[FailureEntry] = []

        for batch_number, batch in enumerate(chunked(list(operations), batch_size), start=1):
            creates = [op for op in batch if isinstance(op, CreateOperation)]
            updates = [op for op in batch if isinstance(op, UpdateOperation)]

            if creates:
                self._run_creates(
                    creates,
                    successful=successful,
                    failed=failed,
                    batch_number=batch_number,
                    organization_id=organization_id,
                )
            for operation in updates:
                self._run_update(
                    operation,
                    successful=successful,
                    failed=failed,
                    batch_number=batch_number,
                    organization_id=organization_id,
                )

        log_event(
            logger,
            logging.INFO,
            "worker_batch_execution_finished",
            organization_id=organization_id,
            operations=len(operations),
            successful=len(successful),
            failed=len(failed),
        )
        return BatchOutcome(successful=tuple(successful), failed=tuple(failed))

    def _run_creates(
        self,
        creates: Sequence[CreateOperation],
        *,
        successful: list[SuccessEntry],
        failed: list[FailureEntry],
        batch_number: int,
        organization_id: str | None,
    ) -> None:
        records = [operation.record for operation in creates]
        try:
            created_ids = self._gateway.bulk_create(records)
            if len(created_ids) != len(records):
                raise RuntimeError(
                    f"bulk_create returned {len(created_ids)} ids for {len(records)} records"
                )
        except Exception as exc:  # noqa: BLE001
            message = _error_message(exc)
            log_event(
                logger,
                logging.WARNING,
                "worker_batch_failed",
                organization_id=organization_id,
                batch_number=batch_number,
                operation="create",
                records=len(records),
                error=message,
            )
            failed.extend(
                FailureEntry(id=None, label=record.label, error_message=message)
                for record in records
            )
            return

        successful.extend(
            SuccessEntry(id=str(created_id), label=record.label)
            for created_id, record in zip(created_ids, records)
        )

    def _run_update(
        self,
        operation: UpdateOperation,
        *,
        successful: list[SuccessEntry],
        failed: list[FailureEntry],
        batch_number: int,
        organization_id: str | None,
    ) -> None:
        label = operation.record.label
        try:
            updated_id = self._gateway.update(operation.worker_id, operation.record)
        except Exception as exc:  # noqa: BLE001
            message = _error_message(exc)
            log_event(
                logger,
                logging.WARNING,
                "worker_update_failed",
                organization_id=organization_id,
                batch_number=batch_number,
                worker_id=operation.worker_id,
                error=message,
            )
            failed.append(FailureEntry(id=operation.worker_id, label=label, error_message=message))
            return

        successful.append(SuccessEntry(id=str(updated_id or operation.worker_id), label=label))
