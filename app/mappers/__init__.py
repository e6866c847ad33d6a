"""
app/mappers package marker.
"""

from app.mappers.header_mapper import HeaderMapper, HeaderResolution, normalize_header
from app.mappers.worker_mapper import WorkerMapper

__all__ = [
    "HeaderMapper",
    "HeaderResolution",
    "WorkerMapper",
    "normalize_header",
]
