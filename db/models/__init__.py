"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.organization import Organization
from db.models.worker import (
    Worker,
    WorkerContact,
    WorkerEmployment,
    WorkerEngagement,
    WorkerGamification,
    WorkerWellbeing,
)

__all__ = [
    "Organization",
    "Worker",
    "WorkerContact",
    "WorkerEmployment",
    "WorkerEngagement",
    "WorkerGamification",
    "WorkerWellbeing",
]
