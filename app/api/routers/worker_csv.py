"""
app/api/routers/worker_csv.py

Worker CSV import HTTP endpoints.

POST /organizations/{organization_id}/workers/csv/upload?mode=create|update&dry_run=
POST /organizations/{organization_id}/workers/csv/validate
GET  /workers/csv/template
GET  /workers/csv/sample

All pipeline logic lives in WorkerImportService; the router only handles
HTTP plumbing (upload guard, status codes, error mapping).
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import read_csv_upload
from app.domain.errors import InvalidImportModeError
from app.repositories.worker_gateway import WorkerGateway
from app.repositories.worker_repository import WorkerRepository
from app.schemas.worker_import import WorkerImportResponse, WorkerValidationReportResponse
from app.services.worker_csv_export import WorkerCSVExporter, get_worker_csv_exporter
from app.services.worker_import_service import (
    ImportMode,
    WorkerImportService,
    get_worker_import_service,
)
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workers"])

_CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def get_worker_gateway(db: Session = Depends(get_db)) -> WorkerGateway:
    """
    Request-scoped persistence gateway bound to the request's DB session.
    """

    return WorkerRepository(db)


def _csv_download(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=_CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/organizations/{organization_id}/workers/csv/upload",
    response_model=WorkerImportResponse,
    summary="Import workers from a CSV file",
)
def upload_workers_csv(
    organization_id: uuid.UUID,
    response: Response,
    mode: str = Query(
        default=ImportMode.CREATE.value,
        description='Import mode: "create" or "update".',
    ),
    dry_run: bool = Query(
        default=False,
        description="Validate and transform only; nothing is persisted.",
    ),
    content: bytes = Depends(read_csv_upload),
    gateway: WorkerGateway = Depends(get_worker_gateway),
    service: WorkerImportService = Depends(get_worker_import_service),
) -> WorkerImportResponse:
    """
    Validate a worker CSV and create or update the workers it describes.

    Validation failures return 400 with the full report. Create imports
    answer 201; update imports and dry runs answer 200.
    """

    try:
        result = service.import_file(
            content,
            str(organization_id),
            mode,
            dry_run,
            gateway=gateway,
        )
    except InvalidImportModeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    payload = WorkerImportResponse.from_result(result)
    if result.validation_failed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=payload.model_dump(mode="json"),
        )

    logger.info(
        "Worker CSV import organization=%s mode=%s dry_run=%s processed=%d failed=%d not_found=%d",
        organization_id,
        result.mode.value,
        dry_run,
        result.processed,
        result.failed,
        result.not_found,
    )

    if result.mode is ImportMode.CREATE and not dry_run:
        response.status_code = status.HTTP_201_CREATED
    return payload


@router.post(
    "/organizations/{organization_id}/workers/csv/validate",
    response_model=WorkerValidationReportResponse,
    summary="Validate a worker CSV file without importing it",
)
def validate_workers_csv(
    organization_id: uuid.UUID,
    content: bytes = Depends(read_csv_upload),
    service: WorkerImportService = Depends(get_worker_import_service),
) -> WorkerValidationReportResponse:
    """
    Return every validation finding for the file; nothing is persisted.
    """

    result = service.validate_file(content)
    logger.info(
        "Worker CSV validated organization=%s success=%s total_rows=%d error_rows=%d",
        organization_id,
        result.success,
        result.summary.total_rows,
        result.summary.error_rows,
    )
    return WorkerValidationReportResponse.from_result(result)


@router.get("/workers/csv/template", summary="Download a blank worker CSV template")
def download_workers_csv_template(
    exporter: WorkerCSVExporter = Depends(get_worker_csv_exporter),
) -> Response:
    return _csv_download(exporter.generate_template(), "workers_template.csv")


@router.get("/workers/csv/sample", summary="Download a sample worker CSV file")
def download_workers_csv_sample(
    exporter: WorkerCSVExporter = Depends(get_worker_csv_exporter),
) -> Response:
    return _csv_download(exporter.generate_sample(), "workers_sample.csv")
