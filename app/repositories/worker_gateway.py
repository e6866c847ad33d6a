"""
app/repositories/worker_gateway.py

Persistence contract consumed by reconciliation and batch execution.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Protocol

from app.domain.worker import ExistingWorker, WorkerRecord


class WorkerGateway(Protocol):
    """
    Lookup, bulk create and update operations for workers of one organization.

    Lookups return only workers of ``organization_id``. ``bulk_create``
    returns the new ids in input order and fails as a unit.
    """

    def find_by_external_ids(
        self,
        organization_id: str,
        external_ids: Collection[str],
    ) -> list[ExistingWorker]: ...

    def find_by_emails(
        self,
        organization_id: str,
        emails: Collection[str],
    ) -> list[ExistingWorker]: ...

    def find_by_phone_numbers(
        self,
        organization_id: str,
        phone_numbers: Collection[str],
    ) -> list[ExistingWorker]: ...

    def bulk_create(self, records: Sequence[WorkerRecord]) -> list[str]: ...

    def update(self, worker_id: str, record: WorkerRecord) -> str: ...
