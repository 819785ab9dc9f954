"""Workspace service for CRUD with slug uniqueness and cascading delete."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from upwatch.core.errors import SlugTakenError, ValidationFailedError
from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Workspace
from upwatch.core.slug import generate_slug
from upwatch.infra.stores import WorkspaceStore
from upwatch.services.access import AccessGuard

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Workspace operations for a requesting user."""

    def __init__(self, workspaces: WorkspaceStore, guard: AccessGuard) -> None:
        self._workspaces = workspaces
        self._guard = guard

    async def _assert_slug_available(
        self, slug: str, exclude_id: str | None = None
    ) -> None:
        """Fail fast if an active workspace other than ``exclude_id`` has ``slug``.

        The partial unique index on ``workspaces.slug`` remains the real
        guarantee under concurrent requests.
        """
        existing = await self._workspaces.find_by_slug(slug)
        if existing is not None and existing.id != exclude_id:
            raise SlugTakenError()

    async def create(
        self, owner_id: str, name: str, slug: str | None = None
    ) -> Workspace:
        """Create a workspace, deriving the slug from the name if not given.

        Raises:
            SlugTakenError: Slug used by another active workspace
            ValidationFailedError: Name yields an empty slug and none was given
        """
        final_slug = slug if slug is not None else generate_slug(name)
        if not final_slug:
            raise ValidationFailedError("Cannot derive a slug from this name")
        await self._assert_slug_available(final_slug)

        try:
            workspace = await self._workspaces.create(
                Workspace(owner_id=owner_id, name=name, slug=final_slug)
            )
        except IntegrityError:
            logger.warning(
                "Slug claimed concurrently",
                extra={"event": LogEvent.UNIQUENESS_RACE, "slug": final_slug},
            )
            raise SlugTakenError() from None

        logger.info(
            "Workspace created",
            extra={
                "event": LogEvent.WORKSPACE_CREATED,
                "workspace_id": workspace.id,
                "user_id": owner_id,
            },
        )
        return workspace

    async def list(self, owner_id: str) -> list[Workspace]:
        return await self._workspaces.find_all_by_owner_id(owner_id)

    async def get(self, workspace_id: str, user_id: str) -> Workspace:
        return await self._guard.assert_workspace_access(workspace_id, user_id)

    async def update(
        self, workspace_id: str, user_id: str, fields: dict[str, Any]
    ) -> Workspace:
        """Update name and/or slug.

        Re-submitting the workspace's current slug is not a conflict.

        Raises:
            WorkspaceNotFoundError, ForbiddenError, SlugTakenError
        """
        workspace = await self._guard.assert_workspace_access(workspace_id, user_id)

        if fields.get("slug"):
            await self._assert_slug_available(fields["slug"], exclude_id=workspace.id)

        try:
            updated = await self._workspaces.update(workspace.id, fields)
        except IntegrityError:
            logger.warning(
                "Slug claimed concurrently",
                extra={"event": LogEvent.UNIQUENESS_RACE, "slug": fields.get("slug")},
            )
            raise SlugTakenError() from None

        # Deleted between the access check and the update
        if updated is None:
            return await self._guard.assert_workspace_access(workspace_id, user_id)

        logger.info(
            "Workspace updated",
            extra={"event": LogEvent.WORKSPACE_UPDATED, "workspace_id": workspace.id},
        )
        return updated

    async def delete(self, workspace_id: str, user_id: str) -> None:
        """Soft delete the workspace, its services and their endpoints."""
        workspace = await self._guard.assert_workspace_access(workspace_id, user_id)
        await self._workspaces.soft_delete_cascade(workspace.id)
