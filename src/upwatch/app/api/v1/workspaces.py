"""Workspace API endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from upwatch.app.api.v1.dependencies import CurrentUserId, get_workspace_service
from upwatch.app.api.v1.schemas import Envelope, changed_fields, ok
from upwatch.core.models import Workspace
from upwatch.core.slug import MAX_SLUG_LENGTH, SLUG_PATTERN
from upwatch.services import WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])

Workspaces = Annotated[WorkspaceService, Depends(get_workspace_service)]


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateWorkspaceRequest(BaseModel):
    """Create workspace request. Slug is derived from the name when omitted."""

    name: str = Field(min_length=1, max_length=100)
    slug: str | None = Field(
        default=None, max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN
    )


class UpdateWorkspaceRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(
        default=None, max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN
    )


class WorkspaceResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    slug: str
    plan: str
    max_services: int
    max_check_interval_seconds: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def _to_response(ws: Workspace) -> WorkspaceResponse:
    return WorkspaceResponse.model_validate(ws)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", status_code=201)
async def create_workspace(
    request: CreateWorkspaceRequest,
    user_id: CurrentUserId,
    workspaces: Workspaces,
) -> Envelope[WorkspaceResponse]:
    """Create a workspace owned by the caller. Returns 409 SLUG_TAKEN on conflict."""
    workspace = await workspaces.create(user_id, request.name, request.slug)
    return ok(_to_response(workspace))


@router.get("")
async def list_workspaces(
    user_id: CurrentUserId,
    workspaces: Workspaces,
) -> Envelope[list[WorkspaceResponse]]:
    """List the caller's active workspaces, newest first."""
    return ok([_to_response(ws) for ws in await workspaces.list(user_id)])


@router.get("/{workspace_id}")
async def get_workspace(
    workspace_id: str,
    user_id: CurrentUserId,
    workspaces: Workspaces,
) -> Envelope[WorkspaceResponse]:
    return ok(_to_response(await workspaces.get(workspace_id, user_id)))


@router.patch("/{workspace_id}")
async def update_workspace(
    workspace_id: str,
    request: UpdateWorkspaceRequest,
    user_id: CurrentUserId,
    workspaces: Workspaces,
) -> Envelope[WorkspaceResponse]:
    workspace = await workspaces.update(
        workspace_id, user_id, changed_fields(request)
    )
    return ok(_to_response(workspace))


@router.delete("/{workspace_id}")
async def delete_workspace(
    workspace_id: str,
    user_id: CurrentUserId,
    workspaces: Workspaces,
) -> Envelope[None]:
    """Soft delete the workspace together with its services and endpoints."""
    await workspaces.delete(workspace_id, user_id)
    return ok(None)
