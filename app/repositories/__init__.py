"""
app/repositories package marker.
"""

from app.repositories.worker_gateway import WorkerGateway
from app.repositories.worker_repository import WorkerRepository

__all__ = [
    "WorkerGateway",
    "WorkerRepository",
]
