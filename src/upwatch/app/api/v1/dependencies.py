"""FastAPI dependencies: request session, caller identity, service wiring."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from upwatch.app.config import get_settings
from upwatch.app.logging import bind_user_id
from upwatch.core.errors import UnauthorizedError
from upwatch.infra import get_session
from upwatch.infra.stores import EndpointStore, ServiceStore, UserStore, WorkspaceStore
from upwatch.services import (
    AccessGuard,
    AuthService,
    EndpointService,
    ServiceService,
    SessionService,
    WorkspaceService,
)

DbSession = Annotated[AsyncSession, Depends(get_session)]


def get_session_service(db: DbSession) -> SessionService:
    return SessionService(db, ttl_seconds=get_settings().security.session_ttl)


Sessions = Annotated[SessionService, Depends(get_session_service)]


async def get_current_user_id(request: Request, sessions: Sessions) -> str:
    """Resolve the caller from the session cookie.

    Raises:
        UnauthorizedError: Cookie missing, or session revoked/expired/unknown
    """
    session_id = request.cookies.get(get_settings().cookie.name)
    if not session_id:
        raise UnauthorizedError()

    result = await sessions.get_valid_with_user(session_id)
    if result is None:
        raise UnauthorizedError()

    _, user = result
    bind_user_id(user.id)
    return user.id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_access_guard(db: DbSession) -> AccessGuard:
    return AccessGuard(
        workspaces=WorkspaceStore(db),
        services=ServiceStore(db),
        endpoints=EndpointStore(db),
    )


Guard = Annotated[AccessGuard, Depends(get_access_guard)]


def get_auth_service(db: DbSession, sessions: Sessions) -> AuthService:
    return AuthService(
        users=UserStore(db),
        sessions=sessions,
        security=get_settings().security,
    )


def get_workspace_service(db: DbSession, guard: Guard) -> WorkspaceService:
    return WorkspaceService(workspaces=WorkspaceStore(db), guard=guard)


def get_service_service(db: DbSession, guard: Guard) -> ServiceService:
    return ServiceService(services=ServiceStore(db), guard=guard)


def get_endpoint_service(db: DbSession, guard: Guard) -> EndpointService:
    return EndpointService(endpoints=EndpointStore(db), guard=guard)
