"""Error handling module for upwatch.

This module defines error codes, exception classes, and response models.

Error Response Format:
{
    "success": false,
    "error": {
        "code": "WORKSPACE_NOT_FOUND",
        "message": "Workspace not found"
    }
}

Usage:
    from upwatch.core.errors import WorkspaceNotFoundError, ForbiddenError

    # Raise with default message
    raise WorkspaceNotFoundError()

    # Raise with custom message
    raise ForbiddenError("Cannot access this workspace")
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes.

    Clients match on these values, never on the message text.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    FORBIDDEN = "FORBIDDEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
    ENDPOINT_NOT_FOUND = "ENDPOINT_NOT_FOUND"
    SLUG_TAKEN = "SLUG_TAKEN"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Error detail containing code and message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response envelope."""

    success: Literal[False] = False
    error: ErrorDetail


class UpwatchError(Exception):
    """Base exception for upwatch.

    All upwatch specific exceptions should inherit from this class.
    This enables centralized exception handling in FastAPI.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code to return
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(
            error=ErrorDetail(code=self.code.value, message=self.message)
        )


class ValidationFailedError(UpwatchError):
    """400 Bad Request - Request validation failed."""

    def __init__(self, message: str = "Validation failed") -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, 400)


class UnauthorizedError(UpwatchError):
    """401 Unauthorized - Authentication required."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(ErrorCode.UNAUTHORIZED, message, 401)


class InvalidCredentialsError(UpwatchError):
    """401 Unauthorized - Email or password does not match."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(ErrorCode.INVALID_CREDENTIALS, message, 401)


class ForbiddenError(UpwatchError):
    """403 Forbidden - Permission denied."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(ErrorCode.FORBIDDEN, message, 403)


class UserNotFoundError(UpwatchError):
    """404 Not Found - User not found."""

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(ErrorCode.USER_NOT_FOUND, message, 404)


class WorkspaceNotFoundError(UpwatchError):
    """404 Not Found - Workspace not found."""

    def __init__(self, message: str = "Workspace not found") -> None:
        super().__init__(ErrorCode.WORKSPACE_NOT_FOUND, message, 404)


class ServiceNotFoundError(UpwatchError):
    """404 Not Found - Service not found."""

    def __init__(self, message: str = "Service not found") -> None:
        super().__init__(ErrorCode.SERVICE_NOT_FOUND, message, 404)


class EndpointNotFoundError(UpwatchError):
    """404 Not Found - Endpoint not found."""

    def __init__(self, message: str = "Endpoint not found") -> None:
        super().__init__(ErrorCode.ENDPOINT_NOT_FOUND, message, 404)


class SlugTakenError(UpwatchError):
    """409 Conflict - Workspace slug already in use."""

    def __init__(self, message: str = "Workspace slug is already in use") -> None:
        super().__init__(ErrorCode.SLUG_TAKEN, message, 409)


class EmailTakenError(UpwatchError):
    """409 Conflict - Email address already registered."""

    def __init__(self, message: str = "Email address is already in use") -> None:
        super().__init__(ErrorCode.EMAIL_TAKEN, message, 409)


class TooManyRequestsError(UpwatchError):
    """429 Too Many Requests - Rate limit exceeded."""

    def __init__(
        self, retry_after: int, message: str = "Too many failed attempts"
    ) -> None:
        self.retry_after = retry_after
        super().__init__(ErrorCode.TOO_MANY_REQUESTS, message, 429)


class InternalError(UpwatchError):
    """500 Internal Server Error - Unexpected error."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(ErrorCode.INTERNAL_ERROR, message, 500)
