"""Application services for upwatch."""

from upwatch.services.access import AccessGuard
from upwatch.services.auth_service import AuthService
from upwatch.services.endpoint_service import EndpointService
from upwatch.services.service_service import ServiceService
from upwatch.services.session_service import SessionService
from upwatch.services.workspace_service import WorkspaceService

__all__ = [
    "AccessGuard",
    "AuthService",
    "EndpointService",
    "ServiceService",
    "SessionService",
    "WorkspaceService",
]
