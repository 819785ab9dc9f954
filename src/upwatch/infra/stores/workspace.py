"""Workspace store."""

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from upwatch.app.metrics.collector import CASCADE_DELETED_ROWS
from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Endpoint, Service, Workspace, utc_now
from upwatch.infra.postgresql import transaction
from upwatch.infra.stores.base import active

logger = logging.getLogger(__name__)


class WorkspaceStore:
    """Persistence for workspaces, scoped to active rows."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create(self, workspace: Workspace) -> Workspace:
        """Insert a workspace. Raises IntegrityError if the slug is taken."""
        self._db.add(workspace)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise
        await self._db.refresh(workspace)
        return workspace

    async def find_by_id(self, workspace_id: str) -> Workspace | None:
        result = await self._db.execute(
            select(Workspace).where(active(Workspace, col(Workspace.id) == workspace_id))
        )
        return result.scalar_one_or_none()

    async def find_by_slug(self, slug: str) -> Workspace | None:
        result = await self._db.execute(
            select(Workspace).where(active(Workspace, col(Workspace.slug) == slug))
        )
        return result.scalar_one_or_none()

    async def find_all_by_owner_id(self, owner_id: str) -> list[Workspace]:
        result = await self._db.execute(
            select(Workspace)
            .where(active(Workspace, col(Workspace.owner_id) == owner_id))
            .order_by(col(Workspace.created_at).desc())
        )
        return list(result.scalars().all())

    async def update(
        self, workspace_id: str, fields: dict[str, Any]
    ) -> Workspace | None:
        """Apply ``fields`` (name, slug) to an active workspace.

        Raises IntegrityError if the new slug collides with another active
        workspace.
        """
        workspace = await self.find_by_id(workspace_id)
        if workspace is None:
            return None

        for key, value in fields.items():
            setattr(workspace, key, value)
        workspace.updated_at = utc_now()

        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise
        await self._db.refresh(workspace)
        return workspace

    async def soft_delete_cascade(self, workspace_id: str) -> None:
        """Soft delete a workspace with all of its services and endpoints.

        All three updates run in one transaction and share one timestamp.
        """
        now = utc_now()
        stamp = {"deleted_at": now, "updated_at": now}

        async with transaction(self._db):
            endpoints = await self._db.execute(
                update(Endpoint)
                .where(active(Endpoint, col(Endpoint.workspace_id) == workspace_id))
                .values(**stamp)
            )
            services = await self._db.execute(
                update(Service)
                .where(active(Service, col(Service.workspace_id) == workspace_id))
                .values(**stamp)
            )
            await self._db.execute(
                update(Workspace)
                .where(active(Workspace, col(Workspace.id) == workspace_id))
                .values(**stamp)
            )

        endpoint_count = endpoints.rowcount  # type: ignore[attr-defined]
        service_count = services.rowcount  # type: ignore[attr-defined]
        CASCADE_DELETED_ROWS.labels(entity="endpoint").inc(endpoint_count)
        CASCADE_DELETED_ROWS.labels(entity="service").inc(service_count)
        CASCADE_DELETED_ROWS.labels(entity="workspace").inc()
        logger.info(
            "Workspace soft-deleted",
            extra={
                "event": LogEvent.WORKSPACE_DELETED,
                "workspace_id": workspace_id,
                "services": service_count,
                "endpoints": endpoint_count,
            },
        )
