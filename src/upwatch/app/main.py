"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text

from upwatch import __version__
from upwatch.app.api.v1 import (
    auth_router,
    endpoints_router,
    services_router,
    workspaces_router,
)
from upwatch.app.config import get_settings
from upwatch.app.logging import setup_logging
from upwatch.app.metrics import get_metrics_response
from upwatch.app.middleware import LoggingMiddleware
from upwatch.core.errors import (
    ErrorCode,
    ErrorDetail,
    ErrorResponse,
    TooManyRequestsError,
    UpwatchError,
)
from upwatch.core.logging_schema import LogEvent
from upwatch.infra import close_db, get_engine, init_db

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    await init_db()
    logger.info("Starting application", extra={"event": LogEvent.APP_STARTED})

    yield

    logger.info("Shutting down application", extra={"event": LogEvent.APP_STOPPED})
    await close_db()


app = FastAPI(title="Upwatch", version=__version__, lifespan=lifespan)
app.add_middleware(LoggingMiddleware)


def _error_json(code: ErrorCode, message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code.value, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(UpwatchError)
async def upwatch_error_handler(request: Request, exc: UpwatchError) -> JSONResponse:
    """Render domain errors as the error envelope."""
    response = JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )
    if isinstance(exc, TooManyRequestsError):
        response.headers["Retry-After"] = str(exc.retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Validation failed"
    return _error_json(ErrorCode.VALIDATION_ERROR, message, 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={"error_type": type(exc).__name__, "path": request.url.path},
    )
    return _error_json(ErrorCode.INTERNAL_ERROR, "Internal server error", 500)


app.include_router(auth_router, prefix="/api/v1")
app.include_router(workspaces_router, prefix="/api/v1")
app.include_router(services_router, prefix="/api/v1")
app.include_router(endpoints_router, prefix="/api/v1")


async def _check_postgres() -> str:
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return "connected"
    except RuntimeError:
        return "not initialized"
    except Exception as e:
        return f"error: {e}"


@app.get("/health")
async def health() -> JSONResponse:
    database = await _check_postgres()
    ok = database == "connected"
    return JSONResponse(
        status_code=200 if ok else 503,
        content={
            "status": "ok" if ok else "degraded",
            "version": __version__,
            "services": {"database": database},
        },
    )


@app.get("/metrics")
async def metrics() -> Response:
    if not get_settings().metrics.enabled:
        return Response(status_code=404)
    return get_metrics_response()
