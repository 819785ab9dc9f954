"""Endpoint API endpoints (nested under a service)."""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from upwatch.app.api.v1.dependencies import CurrentUserId, get_endpoint_service
from upwatch.app.api.v1.schemas import Envelope, changed_fields, ok
from upwatch.core.models import Endpoint
from upwatch.services import EndpointService

router = APIRouter(
    prefix="/workspaces/{workspace_id}/services/{service_id}/endpoints",
    tags=["endpoints"],
)

Endpoints = Annotated[EndpointService, Depends(get_endpoint_service)]

_NULLABLE = frozenset({"headers", "body", "expected_body"})


class CreateEndpointRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    route: str = Field(min_length=1, max_length=2048)
    http_method: str = Field(min_length=1, max_length=10)
    headers: dict[str, str] | None = None
    body: Any = None
    expected_status_code: int | None = Field(default=None, ge=100, le=599)
    expected_body: Any = None
    check_interval_seconds: int | None = Field(default=None, ge=10, le=86400)
    is_active: bool | None = None


class UpdateEndpointRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    route: str | None = Field(default=None, min_length=1, max_length=2048)
    http_method: str | None = Field(default=None, min_length=1, max_length=10)
    headers: dict[str, str] | None = None
    body: Any = None
    expected_status_code: int | None = Field(default=None, ge=100, le=599)
    expected_body: Any = None
    check_interval_seconds: int | None = Field(default=None, ge=10, le=86400)
    is_active: bool | None = None


class EndpointResponse(BaseModel):
    id: str
    workspace_id: str
    service_id: str
    name: str
    route: str
    http_method: str
    headers: dict[str, str] | None
    body: Any
    expected_status_code: int
    expected_body: Any
    check_interval_seconds: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def _to_response(endpoint: Endpoint) -> EndpointResponse:
    return EndpointResponse.model_validate(endpoint)


@router.post("", status_code=201)
async def create_endpoint(
    workspace_id: str,
    service_id: str,
    request: CreateEndpointRequest,
    user_id: CurrentUserId,
    endpoints: Endpoints,
) -> Envelope[EndpointResponse]:
    endpoint = await endpoints.create(
        workspace_id,
        service_id,
        user_id,
        **request.model_dump(),
    )
    return ok(_to_response(endpoint))


@router.get("")
async def list_endpoints(
    workspace_id: str,
    service_id: str,
    user_id: CurrentUserId,
    endpoints: Endpoints,
) -> Envelope[list[EndpointResponse]]:
    items = await endpoints.list(workspace_id, service_id, user_id)
    return ok([_to_response(ep) for ep in items])


@router.get("/{endpoint_id}")
async def get_endpoint(
    workspace_id: str,
    service_id: str,
    endpoint_id: str,
    user_id: CurrentUserId,
    endpoints: Endpoints,
) -> Envelope[EndpointResponse]:
    endpoint = await endpoints.get(endpoint_id, service_id, workspace_id, user_id)
    return ok(_to_response(endpoint))


@router.patch("/{endpoint_id}")
async def update_endpoint(
    workspace_id: str,
    service_id: str,
    endpoint_id: str,
    request: UpdateEndpointRequest,
    user_id: CurrentUserId,
    endpoints: Endpoints,
) -> Envelope[EndpointResponse]:
    endpoint = await endpoints.update(
        endpoint_id,
        service_id,
        workspace_id,
        user_id,
        changed_fields(request, _NULLABLE),
    )
    return ok(_to_response(endpoint))


@router.delete("/{endpoint_id}")
async def delete_endpoint(
    workspace_id: str,
    service_id: str,
    endpoint_id: str,
    user_id: CurrentUserId,
    endpoints: Endpoints,
) -> Envelope[None]:
    await endpoints.delete(endpoint_id, service_id, workspace_id, user_id)
    return ok(None)
