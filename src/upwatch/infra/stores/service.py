"""Service store."""

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from upwatch.app.metrics.collector import CASCADE_DELETED_ROWS
from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Endpoint, Service, utc_now
from upwatch.infra.postgresql import transaction
from upwatch.infra.stores.base import active

logger = logging.getLogger(__name__)


class ServiceStore:
    """Persistence for services.

    Lookups are scoped to ``(service_id, workspace_id)`` so a service id
    from another workspace behaves exactly like a missing one.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create(self, service: Service) -> Service:
        self._db.add(service)
        await self._db.commit()
        await self._db.refresh(service)
        return service

    async def find_by_id(self, service_id: str, workspace_id: str) -> Service | None:
        result = await self._db.execute(
            select(Service).where(
                active(
                    Service,
                    col(Service.id) == service_id,
                    col(Service.workspace_id) == workspace_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def find_all_by_workspace_id(self, workspace_id: str) -> list[Service]:
        result = await self._db.execute(
            select(Service)
            .where(active(Service, col(Service.workspace_id) == workspace_id))
            .order_by(col(Service.created_at))
        )
        return list(result.scalars().all())

    async def update(
        self, service_id: str, workspace_id: str, fields: dict[str, Any]
    ) -> Service | None:
        service = await self.find_by_id(service_id, workspace_id)
        if service is None:
            return None

        for key, value in fields.items():
            setattr(service, key, value)
        service.updated_at = utc_now()

        await self._db.commit()
        await self._db.refresh(service)
        return service

    async def soft_delete_cascade(self, service_id: str, workspace_id: str) -> None:
        """Soft delete a service and its endpoints in one transaction."""
        now = utc_now()
        stamp = {"deleted_at": now, "updated_at": now}

        async with transaction(self._db):
            endpoints = await self._db.execute(
                update(Endpoint)
                .where(active(Endpoint, col(Endpoint.service_id) == service_id))
                .values(**stamp)
            )
            await self._db.execute(
                update(Service)
                .where(
                    active(
                        Service,
                        col(Service.id) == service_id,
                        col(Service.workspace_id) == workspace_id,
                    )
                )
                .values(**stamp)
            )

        endpoint_count = endpoints.rowcount  # type: ignore[attr-defined]
        CASCADE_DELETED_ROWS.labels(entity="endpoint").inc(endpoint_count)
        CASCADE_DELETED_ROWS.labels(entity="service").inc()
        logger.info(
            "Service soft-deleted",
            extra={
                "event": LogEvent.SERVICE_DELETED,
                "workspace_id": workspace_id,
                "service_id": service_id,
                "endpoints": endpoint_count,
            },
        )
