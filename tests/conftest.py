"""
tests/conftest.py

Shared fixtures: an in-memory worker gateway and a fixed reference date.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import date
from typing import Callable

import pytest

from app.domain.worker import ExistingWorker, WorkerRecord

ORGANIZATION_ID = "6a0b7f0e-3c1d-4c55-9f60-8a1f5b2a9d11"
OTHER_ORGANIZATION_ID = "0d3c1f4e-9a8b-4b7c-8d6e-5f4a3b2c1d0e"
FIXED_TODAY = date(2026, 10, 17)


class InMemoryWorkerGateway:
    """
    Dict-backed ``WorkerGateway`` that records every call it receives.
    """

    def __init__(
        self,
        existing: Sequence[ExistingWorker] = (),
        *,
        fail_create_calls: Collection[int] = (),
        fail_update_ids: Collection[str] = (),
        ignore_organization: bool = False,
    ) -> None:
        self.workers: dict[str, ExistingWorker] = {worker.id: worker for worker in existing}
        self.created: list[WorkerRecord] = []
        self.updated: list[tuple[str, WorkerRecord]] = []
        self.calls: list[str] = []
        self.create_batches: list[int] = []
        self._fail_create_calls = set(fail_create_calls)
        self._fail_update_ids = set(fail_update_ids)
        self._ignore_organization = ignore_organization

    def find_by_external_ids(
        self,
        organization_id: str,
        external_ids: Collection[str],
    ) -> list[ExistingWorker]:
        self.calls.append("find_by_external_ids")
        wanted = set(external_ids)
        return self._select(organization_id, lambda worker: worker.external_id in wanted)

    def find_by_emails(
        self,
        organization_id: str,
        emails: Collection[str],
    ) -> list[ExistingWorker]:
        self.calls.append("find_by_emails")
        wanted = {email.lower() for email in emails}
        return self._select(
            organization_id,
            lambda worker: bool(worker.email_address) and worker.email_address.lower() in wanted,
        )

    def find_by_phone_numbers(
        self,
        organization_id: str,
        phone_numbers: Collection[str],
    ) -> list[ExistingWorker]:
        self.calls.append("find_by_phone_numbers")
        wanted = set(phone_numbers)
        return self._select(organization_id, lambda worker: worker.primary_phone_number in wanted)

    def bulk_create(self, records: Sequence[WorkerRecord]) -> list[str]:
        self.calls.append("bulk_create")
        self.create_batches.append(len(records))
        if len(self.create_batches) in self._fail_create_calls:
            raise RuntimeError("bulk insert failed")

        created_ids: list[str] = []
        for record in records:
            worker_id = f"worker-{len(self.workers) + 1}"
            self.workers[worker_id] = ExistingWorker(
                id=worker_id,
                organization_id=record.organization_id,
                first_name=record.first_name,
                last_name=record.last_name,
                external_id=record.external_id,
                email_address=record.email_address,
                primary_phone_number=record.primary_phone_number,
            )
            self.created.append(record)
            created_ids.append(worker_id)
        return created_ids

    def update(self, worker_id: str, record: WorkerRecord) -> str:
        self.calls.append("update")
        if worker_id in self._fail_update_ids:
            raise RuntimeError(f"update rejected for {worker_id}")
        self.updated.append((worker_id, record))
        return worker_id

    def _select(
        self,
        organization_id: str,
        predicate: Callable[[ExistingWorker], bool],
    ) -> list[ExistingWorker]:
        return [
            worker
            for worker in self.workers.values()
            if (self._ignore_organization or worker.organization_id == organization_id)
            and predicate(worker)
        ]


@pytest.fixture()
def make_gateway() -> type[InMemoryWorkerGateway]:
    return InMemoryWorkerGateway


@pytest.fixture()
def organization_id() -> str:
    return ORGANIZATION_ID


@pytest.fixture()
def other_organization_id() -> str:
    return OTHER_ORGANIZATION_ID


@pytest.fixture()
def fixed_today() -> date:
    return FIXED_TODAY
