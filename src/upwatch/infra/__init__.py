"""Infrastructure (database connection and stores)."""

from upwatch.infra.postgresql import (
    close_db,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
    transaction,
)

__all__ = [
    "init_db",
    "close_db",
    "get_engine",
    "get_session",
    "get_session_factory",
    "transaction",
]
