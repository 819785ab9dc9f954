"""Prometheus metrics definitions."""

from prometheus_client import Counter, Histogram

# API latency: DB round trips plus serialization (5ms ~ 10s)
_BUCKETS_API = (
    0.005, 0.01, 0.025, 0.05, 0.1,
    0.25, 0.5, 1, 2.5, 5,
    10,
)

HTTP_REQUESTS_TOTAL = Counter(
    "upwatch_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "upwatch_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=_BUCKETS_API,
)

CASCADE_DELETED_ROWS = Counter(
    "upwatch_cascade_deleted_rows_total",
    "Rows soft-deleted by cascading deletes",
    ["entity"],
)
