"""
app/validators package marker.
"""

from app.validators.tabular_validator import TabularValidator
from app.validators.worker_rules import (
    WORKER_CSV_COLUMNS,
    WORKER_HEADER_DISPLAY_NAMES,
    WORKER_REQUIRED_COLUMNS,
    build_worker_rule_set,
)

__all__ = [
    "TabularValidator",
    "WORKER_CSV_COLUMNS",
    "WORKER_HEADER_DISPLAY_NAMES",
    "WORKER_REQUIRED_COLUMNS",
    "build_worker_rule_set",
]
