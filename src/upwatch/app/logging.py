"""Logging setup for upwatch.

Every line carries the request context it was emitted under: the trace id
assigned by ``LoggingMiddleware`` and, once the session cookie has been
resolved, the id of the calling user. Tenant-scoped events (workspace
created, access denied, cascade counts) can therefore be attributed to a
caller without each call site passing ``user_id`` in ``extra``.
"""

import logging
import sys
import time
from collections import deque
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from upwatch.app.config import get_settings

_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)
_user_id: ContextVar[str | None] = ContextVar("user_id", default=None)

# Libraries whose INFO output duplicates our own request/DB logging
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")


def get_trace_id() -> str | None:
    return _trace_id.get()


def set_trace_id(trace_id: str | None = None) -> str:
    """Bind a trace id to the current request, generating one if absent."""
    tid = trace_id or str(uuid4())
    _trace_id.set(tid)
    return tid


def get_user_id() -> str | None:
    return _user_id.get()


def bind_user_id(user_id: str) -> None:
    """Attribute subsequent log lines in this request to ``user_id``."""
    _user_id.set(user_id)


def clear_request_context() -> None:
    _trace_id.set(None)
    _user_id.set(None)


def request_context() -> dict[str, str]:
    """Context fields that are currently bound (unset ones are omitted)."""
    fields = {"trace_id": _trace_id.get(), "user_id": _user_id.get()}
    return {key: value for key, value in fields.items() if value is not None}


class RateLimitFilter(logging.Filter):
    """Drop repeats of the same log call beyond ``rate_per_minute``.

    The first suppressed record is let through once, tagged, so the gap in
    the log is visible. ERROR and above are never dropped.
    """

    WINDOW_SECONDS = 60.0

    def __init__(self, rate_per_minute: int = 100) -> None:
        super().__init__()
        self.rate_per_minute = rate_per_minute
        self._seen: dict[tuple[str, int], deque[float]] = {}
        self._suppressing: set[tuple[str, int]] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True

        key = (record.name, record.lineno)
        now = time.monotonic()
        seen = self._seen.setdefault(key, deque())
        while seen and now - seen[0] >= self.WINDOW_SECONDS:
            seen.popleft()

        if len(seen) < self.rate_per_minute:
            if len(seen) < self.rate_per_minute // 2:
                self._suppressing.discard(key)
            seen.append(now)
            return True

        if key in self._suppressing:
            return False

        self._suppressing.add(key)
        seen.append(now)
        record.msg = f"[RATE LIMITED] {record.msg} (max {self.rate_per_minute}/min)"
        return True


class UpwatchJsonFormatter(JsonFormatter):
    """One JSON object per line with service metadata and request context."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        config = get_settings().logging
        self._static = {
            "service": config.service_name,
            "schema_version": config.schema_version,
        }

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record.update(self._static)
        # Explicit extra= values win over the bound context
        for key, value in request_context().items():
            log_record.setdefault(key, value)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class UpwatchTextFormatter(logging.Formatter):
    """Human-readable lines for local development, context appended."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = request_context()
        if not context:
            return line
        return line + " | " + " ".join(f"{k}={v}" for k, v in context.items())


def setup_logging(level: int | None = None) -> None:
    """Install the upwatch handler on the root and uvicorn loggers.

    Args:
        level: Log level. If None, uses LOGGING_LEVEL from settings.
    """
    config = get_settings().logging
    if level is None:
        level = getattr(logging, config.level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        UpwatchJsonFormatter() if config.json_format else UpwatchTextFormatter()
    )
    handler.addFilter(RateLimitFilter(config.rate_limit_per_minute))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = False
        uv_logger.addHandler(handler)

    # Replaced by LoggingMiddleware's canonical request line
    logging.getLogger("uvicorn.access").disabled = True

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
