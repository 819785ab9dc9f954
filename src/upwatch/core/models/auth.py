"""Authentication models (User, Session)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, DateTime, Index, text
from sqlmodel import Field, SQLModel

from upwatch.core.models.base import generate_ulid, utc_now


class User(SQLModel, table=True):
    """User account model.

    ``email`` is unique among active users only, so a soft-deleted
    account's address can be registered again.
    """

    __tablename__ = "users"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    email: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)
    full_name: str = Field(max_length=100)
    avatar_url: str | None = Field(default=None, max_length=2048)

    # Login rate limiting fields
    failed_login_attempts: int = Field(default=0)
    locked_until: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )
    last_failed_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    deleted_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), index=True)
    )

    __table_args__ = (
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )


class UserRecord(BaseModel):
    """Public shape of a user, without credential material."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime


class Session(SQLModel, table=True):
    """Login session model."""

    __tablename__ = "sessions"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True))
    )
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))
    revoked_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )
