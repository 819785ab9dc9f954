"""Request logging middleware.

Provides canonical log line per request with trace ID propagation.
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from upwatch.app.config import get_settings
from upwatch.app.logging import clear_request_context, set_trace_id
from upwatch.app.metrics.collector import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL
from upwatch.core.logging_schema import LogEvent

logger = logging.getLogger(__name__)

TRACE_ID_HEADER = "X-Trace-ID"

# Replace ULIDs with placeholders (metric label cardinality)
_ID_PATTERN = re.compile(r"/[0-9A-HJKMNP-TV-Z]{26}(?=/|$)")

_KNOWN_ENDPOINTS = frozenset({
    "/api/v1/auth/register",
    "/api/v1/auth/login",
    "/api/v1/auth/logout",
    "/api/v1/auth/me",
    "/api/v1/workspaces",
    "/api/v1/workspaces/:id",
    "/api/v1/workspaces/:id/services",
    "/api/v1/workspaces/:id/services/:id",
    "/api/v1/workspaces/:id/services/:id/endpoints",
    "/api/v1/workspaces/:id/services/:id/endpoints/:id",
})

_SKIP_PATHS = ("/health", "/metrics")


def _normalize_path(path: str) -> str:
    """Normalize path and apply whitelist for cardinality control."""
    path = _ID_PATTERN.sub("/:id", path.rstrip("/") or "/")
    return path if path in _KNOWN_ENDPOINTS else "other"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging with trace ID propagation.

    - Sets trace_id from X-Trace-ID header or generates new one
    - Logs canonical request log line (one per request)
    - Records request count and latency metrics
    - Adds X-Trace-ID header to response
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        clear_request_context()
        trace_id = set_trace_id(request.headers.get(TRACE_ID_HEADER))
        threshold_ms = get_settings().logging.slow_threshold_ms

        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.monotonic() - start) * 1000
            logger.error(
                "Request failed",
                extra={
                    "event": LogEvent.REQUEST_FAILED,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                },
            )
            clear_request_context()
            raise

        duration_seconds = time.monotonic() - start
        duration_ms = duration_seconds * 1000

        if request.url.path not in _SKIP_PATHS:
            endpoint = _normalize_path(request.url.path)
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=endpoint,
                status=str(response.status_code),
            ).inc()
            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(duration_seconds)

            logger.info(
                "Request completed",
                extra={
                    "event": LogEvent.REQUEST_COMPLETE,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

            if duration_ms > threshold_ms:
                logger.warning(
                    "Slow request detected",
                    extra={
                        "event": LogEvent.REQUEST_SLOW,
                        "method": request.method,
                        "path": request.url.path,
                        "status": response.status_code,
                        "duration_ms": duration_ms,
                        "threshold_ms": threshold_ms,
                    },
                )

        clear_request_context()
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
