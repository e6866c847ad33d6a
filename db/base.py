"""
db/base.py

Declarative base and shared mixins for all SQLAlchemy models.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All models must inherit from this class.
    """

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at to any model.
    updated_at is automatically refreshed on every UPDATE via onupdate.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class WorkerDetailMixin(TimestampMixin):
    """
    Mixin for one-to-one worker detail tables keyed by the owning worker.
    Detail rows are removed together with their worker.
    """

    @declared_attr
    def worker_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            UUID(as_uuid=True),
            ForeignKey("workers.id", ondelete="CASCADE"),
            primary_key=True,
        )
