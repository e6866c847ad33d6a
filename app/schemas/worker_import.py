"""
app/schemas/worker_import.py

Response schemas for worker CSV import endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.domain.tabular import ValidationResult
from app.domain.worker import BatchOutcome
from app.services.worker_import_service import WorkerImportResult


class WorkerValidationErrorResponse(BaseModel):
    """
    API response model for one validation finding.
    """

    row: int = Field(..., ge=1)
    column: str
    message: str
    value: Any = None
    severity: str
    code: str
    suggested_fix: str | None = None


class WorkerValidationSummaryResponse(BaseModel):
    total_rows: int = Field(..., ge=0)
    valid_rows: int = Field(..., ge=0)
    error_rows: int = Field(..., ge=0)
    warning_rows: int = Field(..., ge=0)


class WorkerValidationReportResponse(BaseModel):
    """
    Full validation report: every finding plus per-row, severity and code views.
    """

    success: bool
    summary: WorkerValidationSummaryResponse
    errors: list[WorkerValidationErrorResponse] = Field(default_factory=list)
    errors_by_row: dict[int, list[WorkerValidationErrorResponse]] = Field(default_factory=dict)
    severity_counts: dict[str, int] = Field(default_factory=dict)
    code_counts: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ValidationResult) -> WorkerValidationReportResponse:
        return cls(
            success=result.success,
            summary=WorkerValidationSummaryResponse(**result.summary.to_dict()),
            errors=[WorkerValidationErrorResponse(**error.to_dict()) for error in result.errors],
            errors_by_row={
                row: [WorkerValidationErrorResponse(**error.to_dict()) for error in errors]
                for row, errors in result.errors_by_row().items()
            },
            severity_counts=result.severity_counts(),
            code_counts=result.code_counts(),
        )


class WorkerSuccessResponse(BaseModel):
    id: str
    label: str


class WorkerFailureResponse(BaseModel):
    id: str | None = None
    label: str
    error: str


class WorkerNotFoundResponse(BaseModel):
    label: str
    identifiers: dict[str, Any]


class WorkerImportOutcomeResponse(BaseModel):
    successful: list[WorkerSuccessResponse] = Field(default_factory=list)
    failed: list[WorkerFailureResponse] = Field(default_factory=list)
    not_found: list[WorkerNotFoundResponse] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: BatchOutcome) -> WorkerImportOutcomeResponse:
        return cls(
            successful=[
                WorkerSuccessResponse(id=entry.id, label=entry.label)
                for entry in outcome.successful
            ],
            failed=[
                WorkerFailureResponse(id=entry.id, label=entry.label, error=entry.error_message)
                for entry in outcome.failed
            ],
            not_found=[
                WorkerNotFoundResponse(label=entry.label, identifiers=entry.identifiers)
                for entry in outcome.not_found
            ],
        )


class WorkerImportResponse(BaseModel):
    """
    API response model for one import request.
    """

    success: bool
    message: str
    mode: str
    dry_run: bool
    records_ready: int = Field(..., ge=0)
    processed: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    not_found: int = Field(..., ge=0)
    validation: WorkerValidationReportResponse
    results: WorkerImportOutcomeResponse | None = None

    @classmethod
    def from_result(cls, result: WorkerImportResult) -> WorkerImportResponse:
        return cls(
            success=not result.validation_failed,
            message=result.message,
            mode=result.mode.value,
            dry_run=result.dry_run,
            records_ready=result.records_ready,
            processed=result.processed,
            failed=result.failed,
            not_found=result.not_found,
            validation=WorkerValidationReportResponse.from_result(result.validation),
            results=(
                WorkerImportOutcomeResponse.from_outcome(result.outcome)
                if result.outcome is not None
                else None
            ),
        )
