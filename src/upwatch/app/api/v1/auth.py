"""Authentication API endpoints.

Endpoints:
- POST /api/v1/auth/register - Create account and log in
- POST /api/v1/auth/login - Login with email/password
- POST /api/v1/auth/logout - Logout (revoke session)
- GET /api/v1/auth/me - Current user
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, EmailStr, Field, field_validator

from upwatch.app.api.v1.dependencies import (
    CurrentUserId,
    Sessions,
    get_auth_service,
)
from upwatch.app.api.v1.schemas import Envelope, ok
from upwatch.app.config import get_settings
from upwatch.core.models import Session, UserRecord
from upwatch.services import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

Auth = Annotated[AuthService, Depends(get_auth_service)]


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    full_name: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str) -> str:
        if len(v) > 255:
            raise ValueError("email must be at most 255 characters")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    avatar_url: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserResponse


def _set_session_cookie(response: Response, session: Session, max_age: int) -> None:
    cookie = get_settings().cookie
    response.set_cookie(
        key=cookie.name,
        value=session.id,
        httponly=True,
        samesite="lax",
        secure=cookie.secure,
        path="/",
        max_age=max_age,
    )


def _auth_response(user: UserRecord) -> Envelope[AuthResponse]:
    return ok(AuthResponse(user=UserResponse.model_validate(user)))


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    auth: Auth,
    sessions: Sessions,
) -> Envelope[AuthResponse]:
    """Create an account. Returns 409 EMAIL_TAKEN if the email is in use."""
    user, session = await auth.register(body.email, body.password, body.full_name)
    _set_session_cookie(response, session, sessions.ttl_seconds)
    return _auth_response(user)


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    auth: Auth,
    sessions: Sessions,
) -> Envelope[AuthResponse]:
    """Login with email and password.

    On success, sets a session cookie and returns user info.
    On failure, returns 401 INVALID_CREDENTIALS.
    On too many failures, returns 429 with Retry-After.
    """
    user, session = await auth.login(body.email, body.password)
    _set_session_cookie(response, session, sessions.ttl_seconds)
    return _auth_response(user)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    sessions: Sessions,
) -> Envelope[None]:
    """Logout by revoking session and clearing cookie.

    Always succeeds (even if no session cookie present).
    """
    cookie_name = get_settings().cookie.name
    session_id = request.cookies.get(cookie_name)
    if session_id:
        await sessions.revoke(session_id)

    response.delete_cookie(key=cookie_name, path="/")
    return ok(None)


@router.get("/me")
async def me(user_id: CurrentUserId, auth: Auth) -> Envelope[AuthResponse]:
    return _auth_response(await auth.me(user_id))
