"""Shared column helpers."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column
from sqlalchemy.dialects.postgresql import JSONB
from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def json_column() -> Column:
    """Nullable JSON column (JSONB on PostgreSQL).

    Python ``None`` is stored as SQL NULL, not as the JSON literal ``null``.
    """
    return Column(
        JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql"),
        nullable=True,
    )
