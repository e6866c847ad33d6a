"""
app/services package marker.
"""

from app.services.batch_executor import BatchExecutor
from app.services.worker_csv_export import WorkerCSVExporter, get_worker_csv_exporter
from app.services.worker_import_service import (
    ImportMode,
    WorkerImportResult,
    WorkerImportService,
    get_worker_import_service,
)
from app.services.worker_reconciliation import WorkerReconciler

__all__ = [
    "BatchExecutor",
    "ImportMode",
    "WorkerCSVExporter",
    "WorkerImportResult",
    "WorkerImportService",
    "WorkerReconciler",
    "get_worker_csv_exporter",
    "get_worker_import_service",
]
