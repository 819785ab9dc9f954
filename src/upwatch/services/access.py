"""Ownership-chain authorization.

Every targeted read or mutation on a workspace, service or endpoint first
walks the ownership chain top-down:

1. workspace exists and is active  -> else WorkspaceNotFoundError
2. caller owns the workspace        -> else ForbiddenError
3. service is active in workspace   -> else ServiceNotFoundError
4. endpoint is active in service    -> else EndpointNotFoundError

Checks short-circuit on the first failure. A non-owner therefore always
gets FORBIDDEN, whether or not the nested resource exists, and ids that
belong to another tenant look exactly like missing ones.
"""

import logging

from upwatch.core.errors import (
    EndpointNotFoundError,
    ForbiddenError,
    ServiceNotFoundError,
    WorkspaceNotFoundError,
)
from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Endpoint, Service, Workspace
from upwatch.infra.stores import EndpointStore, ServiceStore, WorkspaceStore

logger = logging.getLogger(__name__)


class AccessGuard:
    """Read-only ownership checks over the workspace hierarchy."""

    def __init__(
        self,
        workspaces: WorkspaceStore,
        services: ServiceStore,
        endpoints: EndpointStore,
    ) -> None:
        self._workspaces = workspaces
        self._services = services
        self._endpoints = endpoints

    async def assert_workspace_access(
        self, workspace_id: str, user_id: str
    ) -> Workspace:
        """Return the active workspace if ``user_id`` owns it.

        Raises:
            WorkspaceNotFoundError: Workspace missing or soft-deleted
            ForbiddenError: Workspace owned by someone else
        """
        workspace = await self._workspaces.find_by_id(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError()

        if workspace.owner_id != user_id:
            logger.info(
                "Workspace access denied",
                extra={
                    "event": LogEvent.ACCESS_DENIED,
                    "workspace_id": workspace_id,
                    "user_id": user_id,
                },
            )
            raise ForbiddenError()

        return workspace

    async def assert_service_access(
        self, service_id: str, workspace_id: str
    ) -> Service:
        """Return the active service within ``workspace_id``.

        Raises:
            ServiceNotFoundError: Missing, soft-deleted, or in another workspace
        """
        service = await self._services.find_by_id(service_id, workspace_id)
        if service is None:
            raise ServiceNotFoundError()
        return service

    async def assert_endpoint_access(
        self, endpoint_id: str, service_id: str
    ) -> Endpoint:
        """Return the active endpoint within ``service_id``.

        Raises:
            EndpointNotFoundError: Missing, soft-deleted, or in another service
        """
        endpoint = await self._endpoints.find_by_id(endpoint_id, service_id)
        if endpoint is None:
            raise EndpointNotFoundError()
        return endpoint
