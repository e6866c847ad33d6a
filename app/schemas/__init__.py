"""
app/schemas package marker.
"""

from app.schemas.worker_import import (
    WorkerImportOutcomeResponse,
    WorkerImportResponse,
    WorkerValidationErrorResponse,
    WorkerValidationReportResponse,
)

__all__ = [
    "WorkerImportOutcomeResponse",
    "WorkerImportResponse",
    "WorkerValidationErrorResponse",
    "WorkerValidationReportResponse",
]
