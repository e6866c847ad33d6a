"""
db/models/organization.py

Organization model: tenant root entity.
Every worker is scoped to exactly one organization.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.worker import Worker


class Organization(Base, TimestampMixin):
    """
    Represents one tenant. Deleting an organization removes its workers.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Soft-disable an organization without deletion",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    workers: Mapped[list["Worker"]] = relationship(
        "Worker",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (Index("ix_organizations_is_active", "is_active"),)

    def __repr__(self) -> str:
        return f"<Organization id={self.id} name={self.name!r}>"
