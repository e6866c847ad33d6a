"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status

from app.config import WorkerImportSettings, get_worker_import_settings

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type.split(";", 1)[0].strip() in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def read_csv_upload(
    file: UploadFile = Depends(get_csv_upload),
    settings: WorkerImportSettings = Depends(get_worker_import_settings),
) -> bytes:
    """
    Read the uploaded CSV into memory, rejecting files above the size limit.
    """

    try:
        content = file.file.read(settings.max_upload_bytes + 1)
    finally:
        file.file.close()

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"CSV file exceeds the {settings.max_upload_bytes} byte upload limit.",
        )
    return content
