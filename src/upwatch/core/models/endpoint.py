"""Endpoint model (one HTTP check configuration)."""

from datetime import datetime
from typing import Any

from sqlalchemy import Column, DateTime, Index, text
from sqlmodel import Field, SQLModel

from upwatch.core.models.base import generate_ulid, json_column, utc_now


class Endpoint(SQLModel, table=True):
    """Endpoint model.

    ``workspace_id`` is denormalized from the parent service so a workspace
    cascade can reach endpoints without a join.
    """

    __tablename__ = "endpoints"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    workspace_id: str = Field(foreign_key="workspaces.id")
    service_id: str = Field(foreign_key="services.id")

    name: str = Field(max_length=100)
    route: str = Field(max_length=2048)
    http_method: str = Field(default="GET", max_length=10)
    headers: dict[str, str] | None = Field(default=None, sa_column=json_column())
    body: Any = Field(default=None, sa_column=json_column())
    expected_status_code: int = Field(default=200)
    expected_body: Any = Field(default=None, sa_column=json_column())
    check_interval_seconds: int = Field(default=300)
    is_active: bool = Field(default=True)

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
            "idx_endpoints_workspace_active",
            "workspace_id",
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "idx_endpoints_service_active",
            "service_id",
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "idx_endpoints_active_check",
            "is_active",
            "check_interval_seconds",
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
