"""Entity stores.

Each store wraps a request-scoped ``AsyncSession`` and only ever sees
active rows.
"""

from upwatch.infra.stores.base import active
from upwatch.infra.stores.endpoint import EndpointStore
from upwatch.infra.stores.service import ServiceStore
from upwatch.infra.stores.user import UserStore
from upwatch.infra.stores.workspace import WorkspaceStore

__all__ = [
    "active",
    "UserStore",
    "WorkspaceStore",
    "ServiceStore",
    "EndpointStore",
]
