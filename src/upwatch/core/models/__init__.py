"""Database models for upwatch.

Models are defined using SQLModel (SQLAlchemy + Pydantic).
Users, workspaces, services and endpoints carry a nullable ``deleted_at``;
a row is active iff it is NULL.
"""

from upwatch.core.models.auth import Session, User, UserRecord
from upwatch.core.models.base import generate_ulid, json_column, utc_now
from upwatch.core.models.endpoint import Endpoint
from upwatch.core.models.service import Service
from upwatch.core.models.workspace import Workspace

__all__ = [
    "User",
    "UserRecord",
    "Session",
    "Workspace",
    "Service",
    "Endpoint",
    "generate_ulid",
    "json_column",
    "utc_now",
]
