"""Service API endpoints (nested under a workspace)."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from upwatch.app.api.v1.dependencies import CurrentUserId, get_service_service
from upwatch.app.api.v1.schemas import Envelope, changed_fields, ok
from upwatch.core.models import Service
from upwatch.services import ServiceService

router = APIRouter(prefix="/workspaces/{workspace_id}/services", tags=["services"])

Services = Annotated[ServiceService, Depends(get_service_service)]

_NULLABLE = frozenset({"default_headers"})


class CreateServiceRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    base_url: str = Field(min_length=1, max_length=2048)
    default_headers: dict[str, str] | None = None
    default_timeout_seconds: int | None = Field(default=None, ge=1, le=300)


class UpdateServiceRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    base_url: str | None = Field(default=None, min_length=1, max_length=2048)
    default_headers: dict[str, str] | None = None
    default_timeout_seconds: int | None = Field(default=None, ge=1, le=300)


class ServiceResponse(BaseModel):
    id: str
    workspace_id: str
    name: str
    base_url: str
    default_headers: dict[str, str] | None
    default_timeout_seconds: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def _to_response(service: Service) -> ServiceResponse:
    return ServiceResponse.model_validate(service)


@router.post("", status_code=201)
async def create_service(
    workspace_id: str,
    request: CreateServiceRequest,
    user_id: CurrentUserId,
    services: Services,
) -> Envelope[ServiceResponse]:
    service = await services.create(
        workspace_id,
        user_id,
        name=request.name,
        base_url=request.base_url,
        default_headers=request.default_headers,
        default_timeout_seconds=request.default_timeout_seconds,
    )
    return ok(_to_response(service))


@router.get("")
async def list_services(
    workspace_id: str,
    user_id: CurrentUserId,
    services: Services,
) -> Envelope[list[ServiceResponse]]:
    return ok([_to_response(s) for s in await services.list(workspace_id, user_id)])


@router.get("/{service_id}")
async def get_service(
    workspace_id: str,
    service_id: str,
    user_id: CurrentUserId,
    services: Services,
) -> Envelope[ServiceResponse]:
    return ok(_to_response(await services.get(service_id, workspace_id, user_id)))


@router.patch("/{service_id}")
async def update_service(
    workspace_id: str,
    service_id: str,
    request: UpdateServiceRequest,
    user_id: CurrentUserId,
    services: Services,
) -> Envelope[ServiceResponse]:
    service = await services.update(
        service_id, workspace_id, user_id, changed_fields(request, _NULLABLE)
    )
    return ok(_to_response(service))


@router.delete("/{service_id}")
async def delete_service(
    workspace_id: str,
    service_id: str,
    user_id: CurrentUserId,
    services: Services,
) -> Envelope[None]:
    """Soft delete the service and its endpoints."""
    await services.delete(service_id, workspace_id, user_id)
    return ok(None)
