from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

import db.models  # noqa: F401  registers worker tables on Base.metadata
from db.base import Base
from db.config import normalize_postgres_url, resolve_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _migration_url() -> str:
    """
    Resolve the database URL migrations run against.

    `-x db_url=...` wins, then ALEMBIC_DATABASE_URL, then the application's
    own DATABASE_URL / LOCAL_DATABASE_URL / CLOUD_DATABASE_URL resolution.
    """

    x_args = context.get_x_argument(as_dictionary=True)
    override = x_args.get("db_url") or os.getenv("ALEMBIC_DATABASE_URL")
    url = normalize_postgres_url(override) if override else resolve_database_url()

    if not url.startswith("postgresql"):
        raise RuntimeError("Worker migrations support PostgreSQL URLs only.")
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _migration_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
