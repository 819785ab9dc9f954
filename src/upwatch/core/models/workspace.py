"""Workspace model (tenant root)."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, text
from sqlmodel import Field, SQLModel

from upwatch.core.models.base import generate_ulid, utc_now


class Workspace(SQLModel, table=True):
    """Workspace model.

    ``slug`` is unique among active workspaces (global namespace). The quota
    fields are stored but not enforced.
    """

    __tablename__ = "workspaces"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    owner_id: str = Field(foreign_key="users.id", index=True)

    name: str = Field(max_length=100)
    slug: str = Field(max_length=60)
    plan: str = Field(default="free", max_length=20)
    max_services: int = Field(default=5)
    max_check_interval_seconds: int = Field(default=300)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    deleted_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    __table_args__ = (
        # Slug uniqueness is enforced here; the service-level check only fails fast
        Index(
            "uq_workspaces_slug_active",
            "slug",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "idx_workspaces_owner_active",
            "owner_id",
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
