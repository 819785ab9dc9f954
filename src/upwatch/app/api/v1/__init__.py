"""API v1 module."""

from upwatch.app.api.v1.auth import router as auth_router
from upwatch.app.api.v1.endpoints import router as endpoints_router
from upwatch.app.api.v1.services import router as services_router
from upwatch.app.api.v1.workspaces import router as workspaces_router

__all__ = ["auth_router", "endpoints_router", "services_router", "workspaces_router"]
