"""Registration, login and identity lookup."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError

from upwatch.app.config import SecurityConfig
from upwatch.core.errors import (
    EmailTakenError,
    InvalidCredentialsError,
    TooManyRequestsError,
    UserNotFoundError,
)
from upwatch.core.logging_schema import LogEvent
from upwatch.core.models import Session, User, UserRecord
from upwatch.core.security import (
    calculate_lockout_duration,
    hash_password,
    verify_password,
)
from upwatch.infra.stores import UserStore
from upwatch.services.session_service import SessionService

logger = logging.getLogger(__name__)


class AuthService:
    """Account operations on top of the user store and session service."""

    def __init__(
        self,
        users: UserStore,
        sessions: SessionService,
        security: SecurityConfig,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._security = security

    async def register(
        self, email: str, password: str, full_name: str
    ) -> tuple[UserRecord, Session]:
        """Create an account and log it in.

        Raises:
            EmailTakenError: An active user already has this email
        """
        if await self._users.find_by_email(email) is not None:
            raise EmailTakenError()

        try:
            user = await self._users.create(
                User(
                    email=email,
                    password_hash=hash_password(password),
                    full_name=full_name,
                )
            )
        except IntegrityError:
            logger.warning(
                "Email claimed concurrently",
                extra={"event": LogEvent.UNIQUENESS_RACE},
            )
            raise EmailTakenError() from None

        session = await self._sessions.create(user.id)
        logger.info(
            "User registered",
            extra={"event": LogEvent.USER_REGISTERED, "user_id": user.id},
        )
        return user, session

    async def login(self, email: str, password: str) -> tuple[UserRecord, Session]:
        """Verify credentials and open a new session.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            TooManyRequestsError: Account is temporarily locked
        """
        user = await self._users.find_by_email_with_password(email)
        if user is None:
            raise InvalidCredentialsError()

        now = datetime.now(UTC)
        if user.locked_until:
            locked_until = (
                user.locked_until.replace(tzinfo=UTC)
                if user.locked_until.tzinfo is None
                else user.locked_until
            )
            if locked_until > now:
                retry_after = max(int((locked_until - now).total_seconds()), 1)
                logger.warning(
                    "Login rejected for locked account",
                    extra={"event": LogEvent.LOGIN_LOCKED, "user_id": user.id},
                )
                raise TooManyRequestsError(
                    retry_after=retry_after,
                    message=f"Too many failed attempts. Try again in {retry_after} seconds.",
                )

        if not verify_password(password, user.password_hash):
            attempts = user.failed_login_attempts + 1
            lockout_seconds = calculate_lockout_duration(
                attempts,
                threshold=self._security.lockout_threshold,
                base_seconds=self._security.lockout_base,
                max_seconds=self._security.lockout_max,
            )
            locked_until = (
                now + timedelta(seconds=lockout_seconds) if lockout_seconds > 0 else None
            )
            await self._users.record_failed_login(user.id, attempts, locked_until)
            logger.info(
                "Login failed",
                extra={
                    "event": LogEvent.LOGIN_FAILED,
                    "user_id": user.id,
                    "failed_attempts": attempts,
                },
            )
            raise InvalidCredentialsError()

        await self._users.reset_failed_logins(user.id)
        record = UserRecord.model_validate(user)
        session = await self._sessions.create(user.id)
        logger.info(
            "Login succeeded",
            extra={"event": LogEvent.LOGIN_SUCCEEDED, "user_id": user.id},
        )
        return record, session

    async def me(self, user_id: str) -> UserRecord:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user
