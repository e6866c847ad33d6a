"""
app/services/worker_csv_export.py

Template and sample CSV generation for worker import.

Both outputs use the template labels of the worker rule set as the header
row, so anything produced here resolves back onto the same columns when
uploaded.
"""

from __future__ import annotations

import csv
import io
from functools import lru_cache
from typing import Any, Mapping, Sequence

from app.validators.worker_rules import WORKER_CSV_COLUMNS, WorkerColumn

SAMPLE_WORKERS: tuple[dict[str, Any], ...] = (
    {
        "first_name": "John",
        "last_name": "Doe",
        "middle_name": "Robert",
        "external_id": "EMP001",
        "date_of_birth": "1990-01-15",
        "gender": "male",
        "tags": ["tech", "engineering"],
        "is_active": True,
        "primary_phone_number": "+919876543210",
        "email_address": "john.doe@example.com",
        "whatsapp_opt_in_status": "opted_in",
        "preferred_language": "en-IN",
        "communication_consent": True,
        "location_city": "Mumbai",
        "location_state_province": "Maharashtra",
        "location_country": "India",
        "job_title": "Software Engineer",
        "department": "Engineering",
        "team": "Backend",
        "employment_status": "active",
        "employment_type": "full_time",
        "hire_date": "2022-03-15",
        "wellbeing_score": 85,
        "points_balance": 450,
    },
    {
        "first_name": "Jane",
        "last_name": "Smith",
        "external_id": "EMP002",
        "date_of_birth": "1988-06-22",
        "gender": "female",
        "tags": ["marketing", "creative"],
        "is_active": True,
        "primary_phone_number": "+919876543211",
        "email_address": "jane.smith@example.com",
        "whatsapp_opt_in_status": "pending",
        "preferred_language": "hi",
        "communication_consent": True,
        "location_city": "Delhi",
        "location_state_province": "Delhi",
        "location_country": "India",
        "job_title": "Marketing Specialist",
        "department": "Marketing",
        "employment_status": "active",
        "employment_type": "part_time",
        "hire_date": "2021-11-10",
        "wellbeing_score": 78,
        "points_balance": 320,
    },
)


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


class WorkerCSVExporter:
    """
    Renders worker CSV files that the importer accepts as-is.
    """

    def __init__(
        self,
        *,
        columns: Sequence[WorkerColumn] = WORKER_CSV_COLUMNS,
        sample_rows: Sequence[Mapping[str, Any]] = SAMPLE_WORKERS,
    ) -> None:
        self._columns = tuple(columns)
        self._sample_rows = tuple(sample_rows)

    @property
    def header(self) -> list[str]:
        return [column.label for column in self._columns]

    def generate_template(self) -> bytes:
        return self._render([])

    def generate_sample(self) -> bytes:
        return self._render(self._sample_rows)

    def _render(self, rows: Sequence[Mapping[str, Any]]) -> bytes:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\r\n")
        writer.writerow(self.header)
        for row in rows:
            writer.writerow([_format_cell(row.get(column.key)) for column in self._columns])
        return buf.getvalue().encode("utf-8")


@lru_cache(maxsize=1)
def get_worker_csv_exporter() -> WorkerCSVExporter:
    """
    Return a cached exporter instance for API dependency injection.
    """

    return WorkerCSVExporter()
