"""
app/api/routers package marker.
"""

from app.api.routers.worker_csv import router as worker_csv_router

__all__ = [
    "worker_csv_router",
]
