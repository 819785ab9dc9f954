"""Service model (a monitored upstream API)."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, text
from sqlmodel import Field, SQLModel

from upwatch.core.models.base import generate_ulid, json_column, utc_now


class Service(SQLModel, table=True):
    """Service model.

    ``workspace_id`` is fixed at creation; services never move between
    workspaces.
    """

    __tablename__ = "services"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    workspace_id: str = Field(foreign_key="workspaces.id")

    name: str = Field(max_length=100)
    base_url: str = Field(max_length=2048)
    default_headers: dict[str, str] | None = Field(
        default=None, sa_column=json_column()
    )
    default_timeout_seconds: int = Field(default=30)

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
        Index(
            "idx_services_workspace_active",
            "workspace_id",
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
