"""Service CRUD under a workspace."""

import logging
from typing import Any

from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Service
from upwatch.infra.stores import ServiceStore
from upwatch.services.access import AccessGuard

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class ServiceService:
    """Operations on the services of a workspace owned by the caller."""

    def __init__(self, services: ServiceStore, guard: AccessGuard) -> None:
        self._services = services
        self._guard = guard

    async def create(
        self,
        workspace_id: str,
        user_id: str,
        name: str,
        base_url: str,
        default_headers: dict[str, str] | None = None,
        default_timeout_seconds: int | None = None,
    ) -> Service:
        workspace = await self._guard.assert_workspace_access(workspace_id, user_id)

        service = await self._services.create(
            Service(
                workspace_id=workspace.id,
                name=name,
                base_url=base_url,
                default_headers=default_headers,
                default_timeout_seconds=(
                    default_timeout_seconds
                    if default_timeout_seconds is not None
                    else DEFAULT_TIMEOUT_SECONDS
                ),
            )
        )
        logger.info(
            "Service created",
            extra={
                "event": LogEvent.SERVICE_CREATED,
                "workspace_id": workspace.id,
                "service_id": service.id,
            },
        )
        return service

    async def list(self, workspace_id: str, user_id: str) -> list[Service]:
        workspace = await self._guard.assert_workspace_access(workspace_id, user_id)
        return await self._services.find_all_by_workspace_id(workspace.id)

    async def get(self, service_id: str, workspace_id: str, user_id: str) -> Service:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        return await self._guard.assert_service_access(service_id, workspace_id)

    async def update(
        self,
        service_id: str,
        workspace_id: str,
        user_id: str,
        fields: dict[str, Any],
    ) -> Service:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        await self._guard.assert_service_access(service_id, workspace_id)

        updated = await self._services.update(service_id, workspace_id, fields)
        if updated is None:
            return await self._guard.assert_service_access(service_id, workspace_id)
        return updated

    async def delete(self, service_id: str, workspace_id: str, user_id: str) -> None:
        """Soft delete the service and all of its endpoints."""
        await self._guard.assert_workspace_access(workspace_id, user_id)
        await self._guard.assert_service_access(service_id, workspace_id)
        await self._services.soft_delete_cascade(service_id, workspace_id)
