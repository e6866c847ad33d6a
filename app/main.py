from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not database_url and not cloud_database_url and not local_database_url:
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    # --- Worker import limits -------------------------------------------
    for name in ("WORKER_IMPORT_BATCH_SIZE", "WORKER_IMPORT_MAX_UPLOAD_BYTES"):
        raw = os.getenv(name, "").strip()
        if raw and not raw.isdigit():
            errors.append(f"{name}='{raw}' is not a positive integer.")

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    from app.config import get_logging_settings

    log_level = get_logging_settings().level
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Compare Base.metadata table names against the live DB schema.

    Every table registered on Base.metadata must exist in the database.
    Startup aborts when any are missing. Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        log = logging.getLogger(__name__)
        log.critical(
            "Schema mismatch: %d table(s) defined in ORM metadata are absent from "
            "the database: %s. Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Worker Import API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import worker_csv_router

    application.include_router(worker_csv_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
