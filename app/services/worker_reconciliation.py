"""
app/services/worker_reconciliation.py

Matches incoming worker records to persisted workers of one organization.

Identifier types are tried in the order declared by ``IDENTIFIER_PRIORITY``:
external id, then email, then primary phone number. The first identifier
type that resolves to an existing worker decides the match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from app.domain.worker import ExistingWorker, NotFoundEntry, WorkerRecord
from app.logging_utils import log_event
from app.repositories.worker_gateway import WorkerGateway

logger = logging.getLogger(__name__)


def _normalize_identifier(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _normalize_email(value: str | None) -> str | None:
    normalized = _normalize_identifier(value)
    return normalized.lower() if normalized else None


@dataclass(frozen=True)
class IdentifierExtractor:
    """
    One identifier type: how to read it from both sides of a match.
    """

    name: str
    from_record: Callable[[WorkerRecord], str | None]
    from_existing: Callable[[ExistingWorker], str | None]


IDENTIFIER_PRIORITY: tuple[IdentifierExtractor, ...] = (
    IdentifierExtractor(
        name="external_id",
        from_record=lambda record: _normalize_identifier(record.external_id),
        from_existing=lambda worker: _normalize_identifier(worker.external_id),
    ),
    IdentifierExtractor(
        name="email",
        from_record=lambda record: _normalize_email(record.email_address),
        from_existing=lambda worker: _normalize_email(worker.email_address),
    ),
    IdentifierExtractor(
        name="phone",
        from_record=lambda record: _normalize_identifier(record.primary_phone_number),
        from_existing=lambda worker: _normalize_identifier(worker.primary_phone_number),
    ),
)


@dataclass(frozen=True)
class MatchedRecord:
    worker_id: str
    record: WorkerRecord
    matched_by: str


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Partition of the incoming batch into matched and unmatched records.
    """

    matched: tuple[MatchedRecord, ...]
    unmatched: tuple[WorkerRecord, ...]

    def not_found_entries(self) -> tuple[NotFoundEntry, ...]:
        return tuple(
            NotFoundEntry(label=record.label, identifiers=record.identifiers())
            for record in self.unmatched
        )


def match_record(
    record: WorkerRecord,
    indexes: Sequence[tuple[IdentifierExtractor, dict[str, ExistingWorker]]],
) -> tuple[ExistingWorker, str] | None:
    """
    Return the first existing worker matched in priority order, if any.
    """

    for extractor, index in indexes:
        key = extractor.from_record(record)
        if key is None:
            continue
        existing = index.get(key)
        if existing is not None:
            return existing, extractor.name
    return None


class WorkerReconciler:
    """
    Resolves update-mode records against workers persisted for an organization.
    """

    def __init__(
        self,
        gateway: WorkerGateway,
        *,
        priority: Sequence[IdentifierExtractor] = IDENTIFIER_PRIORITY,
    ) -> None:
        self._gateway = gateway
        self._priority = tuple(priority)

    def reconcile(
        self,
        incoming: Sequence[WorkerRecord],
        organization_id: str,
    ) -> ReconciliationResult:
        """
        Fetch candidates once for the whole batch, then match each record.
        """

        candidates = self._fetch_candidates(incoming, organization_id)
        indexes = [
            (extractor, self._build_index(extractor, candidates))
            for extractor in self._priority
        ]

        matched: list[MatchedRecord] = []
        unmatched: list[WorkerRecord] = []
        for record in incoming:
            match = match_record(record, indexes)
            if match is None:
                unmatched.append(record)
                continue
            existing, matched_by = match
            matched.append(
                MatchedRecord(worker_id=existing.id, record=record, matched_by=matched_by)
            )

        log_event(
            logger,
            logging.INFO,
            "worker_reconciliation_finished",
            organization_id=organization_id,
            incoming=len(incoming),
            candidates=len(candidates),
            matched=len(matched),
            unmatched=len(unmatched),
        )
        return ReconciliationResult(matched=tuple(matched), unmatched=tuple(unmatched))

    def _fetch_candidates(
        self,
        incoming: Sequence[WorkerRecord],
        organization_id: str,
    ) -> list[ExistingWorker]:
        external_ids = self._collect(incoming, lambda record: record.external_id)
        emails = self._collect(incoming, lambda record: record.email_address)
        phone_numbers = self._collect(incoming, lambda record: record.primary_phone_number)

        fetched: list[ExistingWorker] = []
        if external_ids:
            fetched.extend(self._gateway.find_by_external_ids(organization_id, external_ids))
        if emails:
            fetched.extend(self._gateway.find_by_emails(organization_id, emails))
        if phone_numbers:
            fetched.extend(self._gateway.find_by_phone_numbers(organization_id, phone_numbers))

        candidates: dict[str, ExistingWorker] = {}
        for worker in fetched:
            if str(worker.organization_id) != str(organization_id):
                continue
            candidates.setdefault(worker.id, worker)
        return list(candidates.values())

    @staticmethod
    def _collect(
        incoming: Sequence[WorkerRecord],
        read: Callable[[WorkerRecord], str | None],
    ) -> set[str]:
        values: set[str] = set()
        for record in incoming:
            value = _normalize_identifier(read(record))
            if value is not None:
                values.add(value)
        return values

    @staticmethod
    def _build_index(
        extractor: IdentifierExtractor,
        candidates: Sequence[ExistingWorker],
    ) -> dict[str, ExistingWorker]:
        index: dict[str, ExistingWorker] = {}
        for worker in candidates:
            key = extractor.from_existing(worker)
            if key is not None:
                index.setdefault(key, worker)
        return index
