"""
app/repositories/worker_repository.py

Persistence layer for workers, implementing ``WorkerGateway`` on SQLAlchemy.

Every write call commits on success and rolls back on failure, so batches
that already went through stay committed when a later batch fails.
"""

from __future__ import annotations

import uuid
from collections.abc import Collection, Sequence
from dataclasses import asdict
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import WorkerPersistenceError
from app.domain.worker import ExistingWorker, WorkerRecord
from db.models.worker import (
    Worker,
    WorkerContact,
    WorkerEmployment,
    WorkerEngagement,
    WorkerGamification,
    WorkerWellbeing,
)

_IDENTITY_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "middle_name",
    "display_name",
    "external_id",
    "date_of_birth",
    "gender",
    "avatar_url",
    "primary_tag",
    "is_active",
    "deactivation_reason",
)

# (relationship attribute on Worker, model class, attribute on WorkerRecord)
_DETAIL_SECTIONS: tuple[tuple[str, type, str], ...] = (
    ("contact", WorkerContact, "contact"),
    ("employment", WorkerEmployment, "employment"),
    ("engagement", WorkerEngagement, "engagement"),
    ("wellbeing", WorkerWellbeing, "wellbeing"),
    ("gamification", WorkerGamification, "gamification"),
)


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


class WorkerRepository:
    """
    Repository for organization-scoped worker lookups and writes.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_by_external_ids(
        self,
        organization_id: str,
        external_ids: Collection[str],
    ) -> list[ExistingWorker]:
        if not external_ids:
            return []
        return self._find(organization_id, Worker.external_id.in_(list(external_ids)))

    def find_by_emails(
        self,
        organization_id: str,
        emails: Collection[str],
    ) -> list[ExistingWorker]:
        if not emails:
            return []
        lowered = sorted({email.lower() for email in emails})
        return self._find(organization_id, func.lower(WorkerContact.email_address).in_(lowered))

    def find_by_phone_numbers(
        self,
        organization_id: str,
        phone_numbers: Collection[str],
    ) -> list[ExistingWorker]:
        if not phone_numbers:
            return []
        return self._find(
            organization_id,
            WorkerContact.primary_phone_number.in_(list(phone_numbers)),
        )

    def _find(self, organization_id: str, condition: Any) -> list[ExistingWorker]:
        stmt = (
            select(Worker, WorkerContact)
            .outerjoin(WorkerContact, WorkerContact.worker_id == Worker.id)
            .where(Worker.organization_id == _to_uuid(organization_id))
            .where(condition)
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise WorkerPersistenceError(f"Failed to look up workers: {exc}") from exc

        return [
            ExistingWorker(
                id=str(worker.id),
                organization_id=str(worker.organization_id),
                first_name=worker.first_name,
                last_name=worker.last_name,
                external_id=worker.external_id,
                email_address=contact.email_address if contact else None,
                primary_phone_number=contact.primary_phone_number if contact else None,
            )
            for worker, contact in rows
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def bulk_create(self, records: Sequence[WorkerRecord]) -> list[str]:
        """
        Insert all records in one transaction and return their ids in order.
        """

        if not records:
            return []

        workers = [self._build_worker(record) for record in records]
        try:
            self._session.add_all(workers)
            self._session.flush()
            created_ids = [str(worker.id) for worker in workers]
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise WorkerPersistenceError(
                f"Failed to create {len(records)} workers: {exc}"
            ) from exc
        return created_ids

    def update(self, worker_id: str, record: WorkerRecord) -> str:
        """
        Replace identity fields and every detail section of one worker.
        """

        try:
            worker = self._session.get(Worker, _to_uuid(worker_id))
            if worker is None or str(worker.organization_id) != str(record.organization_id):
                raise WorkerPersistenceError(f"Worker {worker_id} not found")

            for name in _IDENTITY_FIELDS:
                setattr(worker, name, getattr(record, name))
            worker.tags = list(record.tags)

            for attribute, model, section in _DETAIL_SECTIONS:
                values = asdict(getattr(record, section))
                detail = getattr(worker, attribute)
                if detail is None:
                    setattr(worker, attribute, model(**values))
                    continue
                for name, value in values.items():
                    setattr(detail, name, value)

            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise WorkerPersistenceError(f"Failed to update worker {worker_id}: {exc}") from exc
        return str(worker.id)

    @staticmethod
    def _build_worker(record: WorkerRecord) -> Worker:
        worker = Worker(
            organization_id=_to_uuid(record.organization_id),
            tags=list(record.tags),
            **{name: getattr(record, name) for name in _IDENTITY_FIELDS},
        )
        for attribute, model, section in _DETAIL_SECTIONS:
            setattr(worker, attribute, model(**asdict(getattr(record, section))))
        return worker
