"""
app/domain package marker.
"""

from app.domain.errors import InvalidImportModeError, WorkerImportError, WorkerPersistenceError
from app.domain.tabular import (
    ColumnRule,
    RowValidationError,
    RuleSet,
    Severity,
    ValidationResult,
    ValidationSummary,
)
from app.domain.worker import BatchOutcome, ExistingWorker, WorkerRecord

__all__ = [
    "BatchOutcome",
    "ColumnRule",
    "ExistingWorker",
    "InvalidImportModeError",
    "RowValidationError",
    "RuleSet",
    "Severity",
    "ValidationResult",
    "ValidationSummary",
    "WorkerImportError",
    "WorkerPersistenceError",
    "WorkerRecord",
]
