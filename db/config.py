"""
db/config.py

Environment-driven database configuration for the worker import service.
"""

from __future__ import annotations

import os
from pathlib import Path

ENV_FILES: tuple[str, ...] = (".env", ".env.local")
CLOUD_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_files() -> None:
    """
    Load KEY=VALUE pairs from `.env` and `.env.local` at the project root.
    Variables already present in the process environment win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in ENV_FILES:
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is None:
                continue
            key, value = parsed
            os.environ.setdefault(key, value)


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite postgres URLs to the psycopg 3 driver form SQLAlchemy expects.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix) :]
    return url


def resolve_database_url() -> str:
    """
    Resolve the worker database URL.

    Priority:
    1) DATABASE_URL
    2) CLOUD_DATABASE_URL when ENVIRONMENT is cloud-like
    3) LOCAL_DATABASE_URL
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url:
        return normalize_postgres_url(direct_url)

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    cloud_url = os.getenv("CLOUD_DATABASE_URL")
    if environment in CLOUD_ENVIRONMENTS and cloud_url:
        return normalize_postgres_url(cloud_url)

    local_url = os.getenv("LOCAL_DATABASE_URL")
    if local_url:
        return normalize_postgres_url(local_url)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )
