"""Endpoint store."""

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from upwatch.core.models import Endpoint, utc_now
from upwatch.infra.stores.base import active


class EndpointStore:
    """Persistence for endpoints, scoped to ``(endpoint_id, service_id)``."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create(self, endpoint: Endpoint) -> Endpoint:
        self._db.add(endpoint)
        await self._db.commit()
        await self._db.refresh(endpoint)
        return endpoint

    async def find_by_id(self, endpoint_id: str, service_id: str) -> Endpoint | None:
        result = await self._db.execute(
            select(Endpoint).where(
                active(
                    Endpoint,
                    col(Endpoint.id) == endpoint_id,
                    col(Endpoint.service_id) == service_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def find_all_by_service_id(self, service_id: str) -> list[Endpoint]:
        result = await self._db.execute(
            select(Endpoint)
            .where(active(Endpoint, col(Endpoint.service_id) == service_id))
            .order_by(col(Endpoint.created_at))
        )
        return list(result.scalars().all())

    async def update(
        self, endpoint_id: str, service_id: str, fields: dict[str, Any]
    ) -> Endpoint | None:
        endpoint = await self.find_by_id(endpoint_id, service_id)
        if endpoint is None:
            return None

        for key, value in fields.items():
            setattr(endpoint, key, value)
        endpoint.updated_at = utc_now()

        await self._db.commit()
        await self._db.refresh(endpoint)
        return endpoint

    async def soft_delete(self, endpoint_id: str, service_id: str) -> None:
        """Soft delete a single endpoint (leaf, no cascade)."""
        now = utc_now()
        await self._db.execute(
            update(Endpoint)
            .where(
                active(
                    Endpoint,
                    col(Endpoint.id) == endpoint_id,
                    col(Endpoint.service_id) == service_id,
                )
            )
            .values(deleted_at=now, updated_at=now)
        )
        await self._db.commit()
