"""Logging field schema - v1.0

Standard fields (added to all logs):
- schema_version: Log schema version
- service: Service name (upwatch-api)
- event: Event type (workspace_deleted, login_failed, etc.)
- trace_id: Request trace ID (X-Trace-ID)
- duration_ms: Duration in milliseconds

High cardinality fields (OK in logs, NOT in metric labels):
- workspace_id, service_id, endpoint_id
- user_id
"""

from enum import StrEnum


class LogEvent(StrEnum):
    """Standard log event types.

    Use these event types in the 'event' extra field for consistent
    log filtering and analysis.
    """

    # Lifecycle events
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"
    DB_CONNECTED = "db_connected"
    DB_ERROR = "db_error"

    # API events
    REQUEST_COMPLETE = "request_complete"
    REQUEST_FAILED = "request_failed"
    REQUEST_SLOW = "request_slow"

    # Auth events
    USER_REGISTERED = "user_registered"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGIN_LOCKED = "login_locked"

    # Resource events
    WORKSPACE_CREATED = "workspace_created"
    WORKSPACE_UPDATED = "workspace_updated"
    WORKSPACE_DELETED = "workspace_deleted"
    SERVICE_CREATED = "service_created"
    SERVICE_DELETED = "service_deleted"
    ENDPOINT_CREATED = "endpoint_created"
    ENDPOINT_DELETED = "endpoint_deleted"
    ACCESS_DENIED = "access_denied"
    UNIQUENESS_RACE = "uniqueness_race"
