"""Endpoint CRUD under a service."""

import logging
from typing import Any

from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Endpoint
from upwatch.infra.stores import EndpointStore
from upwatch.services.access import AccessGuard

logger = logging.getLogger(__name__)

DEFAULT_EXPECTED_STATUS_CODE = 200
DEFAULT_CHECK_INTERVAL_SECONDS = 300


class EndpointService:
    """Operations on the endpoints of a service.

    Every call checks workspace ownership, then the service, then (for
    targeted operations) the endpoint.
    """

    def __init__(self, endpoints: EndpointStore, guard: AccessGuard) -> None:
        self._endpoints = endpoints
        self._guard = guard

    async def create(
        self,
        workspace_id: str,
        service_id: str,
        user_id: str,
        name: str,
        route: str,
        http_method: str,
        headers: dict[str, str] | None = None,
        body: Any = None,
        expected_status_code: int | None = None,
        expected_body: Any = None,
        check_interval_seconds: int | None = None,
        is_active: bool | None = None,
    ) -> Endpoint:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        service = await self._guard.assert_service_access(service_id, workspace_id)

        endpoint = await self._endpoints.create(
            Endpoint(
                workspace_id=service.workspace_id,
                service_id=service.id,
                name=name,
                route=route,
                http_method=http_method,
                headers=headers,
                body=body,
                expected_status_code=(
                    expected_status_code
                    if expected_status_code is not None
                    else DEFAULT_EXPECTED_STATUS_CODE
                ),
                expected_body=expected_body,
                check_interval_seconds=(
                    check_interval_seconds
                    if check_interval_seconds is not None
                    else DEFAULT_CHECK_INTERVAL_SECONDS
                ),
                is_active=is_active if is_active is not None else True,
            )
        )
        logger.info(
            "Endpoint created",
            extra={
                "event": LogEvent.ENDPOINT_CREATED,
                "workspace_id": workspace_id,
                "service_id": service.id,
                "endpoint_id": endpoint.id,
            },
        )
        return endpoint

    async def list(
        self, workspace_id: str, service_id: str, user_id: str
    ) -> list[Endpoint]:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        service = await self._guard.assert_service_access(service_id, workspace_id)
        return await self._endpoints.find_all_by_service_id(service.id)

    async def get(
        self, endpoint_id: str, service_id: str, workspace_id: str, user_id: str
    ) -> Endpoint:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        await self._guard.assert_service_access(service_id, workspace_id)
        return await self._guard.assert_endpoint_access(endpoint_id, service_id)

    async def update(
        self,
        endpoint_id: str,
        service_id: str,
        workspace_id: str,
        user_id: str,
        fields: dict[str, Any],
    ) -> Endpoint:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        await self._guard.assert_service_access(service_id, workspace_id)
        await self._guard.assert_endpoint_access(endpoint_id, service_id)

        updated = await self._endpoints.update(endpoint_id, service_id, fields)
        if updated is None:
            return await self._guard.assert_endpoint_access(endpoint_id, service_id)
        return updated

    async def delete(
        self, endpoint_id: str, service_id: str, workspace_id: str, user_id: str
    ) -> None:
        await self._guard.assert_workspace_access(workspace_id, user_id)
        await self._guard.assert_service_access(service_id, workspace_id)
        await self._guard.assert_endpoint_access(endpoint_id, service_id)
        await self._endpoints.soft_delete(endpoint_id, service_id)
        logger.info(
            "Endpoint soft-deleted",
            extra={
                "event": LogEvent.ENDPOINT_DELETED,
                "service_id": service_id,
                "endpoint_id": endpoint_id,
            },
        )
