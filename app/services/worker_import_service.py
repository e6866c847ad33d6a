"""
app/services/worker_import_service.py

Service layer for the worker CSV import workflow.

Pipeline per request:

    1. Parse the CSV bytes and resolve headers onto worker columns.
    2. Validate every row against the worker rule set.
    3. Map accepted rows into ``WorkerRecord`` values.
    4. Create mode: hand records to the batch executor as creates.
       Update mode: reconcile against persisted workers first; matched
       records become updates and unmatched ones are reported as not found.

Validation findings are returned as data. Nothing is persisted for
validate-only or dry-run requests.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from typing import Any, Sequence

from app.config import WorkerImportSettings, get_worker_import_settings
from app.domain.errors import InvalidImportModeError
from app.domain.tabular import (
    HEADER_ROW_NUMBER,
    FindingCode,
    RowValidationError,
    RuleSet,
    Severity,
    ValidationResult,
)
from app.domain.worker import BatchOutcome, CreateOperation, UpdateOperation, WorkerRecord
from app.logging_utils import log_event
from app.mappers.header_mapper import HeaderMapper
from app.mappers.worker_mapper import WorkerMapper
from app.repositories.worker_gateway import WorkerGateway
from app.services.batch_executor import BatchExecutor
from app.services.worker_reconciliation import WorkerReconciler
from app.validators.tabular_validator import TabularValidator
from app.validators.worker_rules import build_worker_rule_set

logger = logging.getLogger(__name__)


class ImportMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


IMPORT_MODES: tuple[str, ...] = tuple(mode.value for mode in ImportMode)


def parse_import_mode(raw_mode: str | ImportMode) -> ImportMode:
    """
    Resolve a request mode string; unknown modes raise ``InvalidImportModeError``.
    """

    if isinstance(raw_mode, ImportMode):
        return raw_mode
    normalized = (raw_mode or "").strip().lower()
    try:
        return ImportMode(normalized)
    except ValueError as exc:
        raise InvalidImportModeError(str(raw_mode), IMPORT_MODES) from exc


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class CSVParseError(ValueError):
    """
    Raised when the uploaded bytes cannot be read as a CSV with a header row.
    """


@dataclass(frozen=True)
class ParsedCSV:
    headers: tuple[str, ...]
    rows: list[dict[str, Any]]


def parse_csv(content: bytes) -> ParsedCSV:
    """
    Decode UTF-8 (BOM tolerated) CSV bytes into a header tuple and raw rows.
    """

    text_stream: io.TextIOWrapper | None = None
    try:
        text_stream = io.TextIOWrapper(io.BytesIO(content), encoding="utf-8-sig", newline="")
        reader = csv.DictReader(text_stream)
        headers = tuple(header for header in (reader.fieldnames or []))
        if not any(header and header.strip() for header in headers):
            raise CSVParseError("CSV header row is missing.")
        rows = [dict(row) for row in reader]
    except UnicodeDecodeError as exc:
        raise CSVParseError("CSV must be UTF-8 encoded.") from exc
    except csv.Error as exc:
        raise CSVParseError(f"Invalid CSV format: {exc}") from exc
    finally:
        if text_stream is not None:
            try:
                text_stream.detach()
            except ValueError:
                pass

    return ParsedCSV(headers=headers, rows=rows)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkerImportResult:
    """
    Outcome of one import request.

    ``outcome`` is ``None`` whenever nothing was sent to persistence
    (validation failure or dry run).
    """

    mode: ImportMode
    dry_run: bool
    validation: ValidationResult
    records_ready: int = 0
    outcome: BatchOutcome | None = None
    rejected: bool = False

    @property
    def validation_failed(self) -> bool:
        return self.rejected

    @property
    def processed(self) -> int:
        return len(self.outcome.successful) if self.outcome else 0

    @property
    def failed(self) -> int:
        return len(self.outcome.failed) if self.outcome else 0

    @property
    def not_found(self) -> int:
        return len(self.outcome.not_found) if self.outcome else 0

    @property
    def message(self) -> str:
        if self.validation_failed:
            return "CSV validation failed"
        if self.dry_run:
            return "CSV validation successful (dry run)"
        if self.mode is ImportMode.CREATE:
            message = f"Imported {self.processed} workers successfully"
            if self.failed:
                message += f", failed to import {self.failed} workers"
            return message
        message = f"Updated {self.processed} workers successfully"
        if self.failed:
            message += f", {self.failed} failed"
        if self.not_found:
            message += f", {self.not_found} workers not found"
        return message


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class WorkerImportService:
    """
    Coordinates CSV parsing, validation, mapping, reconciliation and persistence.
    """

    def __init__(
        self,
        *,
        batch_size: int,
        log_validation_errors: bool,
        allow_partial: bool = False,
        rule_set: RuleSet | None = None,
        validator: TabularValidator | None = None,
        mapper: WorkerMapper | None = None,
    ) -> None:
        self._batch_size = max(1, batch_size)
        self._log_validation_errors = log_validation_errors
        self._allow_partial = allow_partial
        self._rule_set = rule_set or build_worker_rule_set()
        self._header_mapper = HeaderMapper(self._rule_set)
        self._validator = validator or TabularValidator()
        self._mapper = mapper or WorkerMapper()

    @classmethod
    def from_settings(cls, settings: WorkerImportSettings) -> WorkerImportService:
        return cls(
            batch_size=settings.batch_size,
            log_validation_errors=settings.log_validation_errors,
            allow_partial=settings.allow_partial,
            rule_set=build_worker_rule_set(typo_threshold=settings.typo_threshold),
        )

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def validate_file(self, content: bytes) -> ValidationResult:
        """
        Parse and validate CSV bytes without any persistence call.
        """

        try:
            parsed = parse_csv(content)
        except CSVParseError as exc:
            result = ValidationResult.structural_failure(
                [
                    RowValidationError(
                        row_number=HEADER_ROW_NUMBER,
                        column="",
                        message=str(exc),
                        severity=Severity.ERROR,
                        code=FindingCode.PARSE_ERROR,
                    )
                ]
            )
            self._log_validation(result)
            return result

        resolution = self._header_mapper.resolve(parsed.headers)
        rows = [self._header_mapper.map_row(raw_row, resolution) for raw_row in parsed.rows]
        result = self._validator.validate(rows, self._rule_set, headers=resolution.columns)

        unknown_findings = resolution.unknown_header_findings()
        if unknown_findings:
            result = replace(result, errors=[*unknown_findings, *result.errors])

        self._log_validation(result)
        return result

    def import_file(
        self,
        content: bytes,
        organization_id: str,
        mode: str | ImportMode,
        dry_run: bool = False,
        *,
        gateway: WorkerGateway,
    ) -> WorkerImportResult:
        """
        Validate the file and, unless dry-running, persist accepted workers.

        Raises ``InvalidImportModeError`` before reading the file when the
        mode is unknown.
        """

        import_mode = parse_import_mode(mode)
        validation = self.validate_file(content)

        if not validation.success and not (self._allow_partial and validation.accepted_rows):
            log_event(
                logger,
                logging.INFO,
                "worker_import_rejected",
                organization_id=organization_id,
                mode=import_mode.value,
                error_rows=validation.summary.error_rows,
            )
            return WorkerImportResult(
                mode=import_mode,
                dry_run=dry_run,
                validation=validation,
                rejected=True,
            )

        records = self._mapper.to_domain_records(validation.accepted_rows, organization_id)
        if dry_run:
            return WorkerImportResult(
                mode=import_mode,
                dry_run=True,
                validation=validation,
                records_ready=len(records),
            )

        if import_mode is ImportMode.CREATE:
            outcome = self._create(records, organization_id, gateway)
        else:
            outcome = self._update(records, organization_id, gateway)

        result = WorkerImportResult(
            mode=import_mode,
            dry_run=False,
            validation=validation,
            records_ready=len(records),
            outcome=outcome,
        )
        log_event(
            logger,
            logging.INFO,
            "worker_import_finished",
            organization_id=organization_id,
            mode=import_mode.value,
            processed=result.processed,
            failed=result.failed,
            not_found=result.not_found,
        )
        return result

    # ------------------------------------------------------------------
    # Import internals
    # ------------------------------------------------------------------

    def _create(
        self,
        records: Sequence[WorkerRecord],
        organization_id: str,
        gateway: WorkerGateway,
    ) -> BatchOutcome:
        operations = [CreateOperation(record=record) for record in records]
        return BatchExecutor(gateway).execute(
            operations,
            batch_size=self._batch_size,
            organization_id=organization_id,
        )

    def _update(
        self,
        records: Sequence[WorkerRecord],
        organization_id: str,
        gateway: WorkerGateway,
    ) -> BatchOutcome:
        reconciliation = WorkerReconciler(gateway).reconcile(records, organization_id)
        operations = [
            UpdateOperation(worker_id=matched.worker_id, record=matched.record)
            for matched in reconciliation.matched
        ]
        outcome = BatchExecutor(gateway).execute(
            operations,
            batch_size=self._batch_size,
            organization_id=organization_id,
        )
        return outcome.with_not_found(reconciliation.not_found_entries())

    def _log_validation(self, result: ValidationResult) -> None:
        if self._log_validation_errors:
            for finding in result.errors:
                level = logging.WARNING if finding.blocks_acceptance else logging.INFO
                logger.log(
                    level,
                    "Worker CSV finding row=%s column=%r code=%s severity=%s: %s",
                    finding.row_number,
                    finding.column,
                    finding.code,
                    finding.severity.value,
                    finding.message,
                )

        log_event(
            logger,
            logging.INFO,
            "worker_validation_finished",
            success=result.success,
            **result.summary.to_dict(),
            codes=result.code_counts(),
        )


@lru_cache(maxsize=1)
def get_worker_import_service() -> WorkerImportService:
    """
    Return a cached service instance for API dependency injection.
    """

    return WorkerImportService.from_settings(get_worker_import_settings())
