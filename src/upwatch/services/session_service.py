"""Session management service for upwatch.

Provides session lifecycle management:
- Create: Generate new session with TTL (one live session per user)
- Get valid: Retrieve and validate session
- Revoke: Invalidate session
- Is valid: Check session validity

TTL comes from SecurityConfig (SECURITY_ env prefix).
"""

from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from upwatch.core.models import Session, User
from upwatch.infra.stores import active


class SessionService:
    """Service for managing user sessions."""

    def __init__(self, db: AsyncSession, ttl_seconds: int) -> None:
        self._db = db
        self.ttl_seconds = ttl_seconds

    async def create(self, user_id: str) -> Session:
        """Create a new session for a user.

        Enforces single-session policy: deletes all existing sessions
        for the user before creating a new one.
        """
        await self._db.execute(delete(Session).where(col(Session.user_id) == user_id))

        session = Session(
            user_id=user_id,
            expires_at=datetime.now(UTC) + timedelta(seconds=self.ttl_seconds),
        )
        self._db.add(session)
        await self._db.commit()
        await self._db.refresh(session)
        return session

    async def get_valid(self, session_id: str) -> Session | None:
        """Get a session by ID, or None if missing, revoked or expired."""
        result = await self._db.execute(
            select(Session).where(col(Session.id) == session_id)
        )
        session = result.scalar_one_or_none()

        if session is None or not self.is_valid(session):
            return None

        return session

    async def get_valid_with_user(
        self, session_id: str
    ) -> tuple[Session, User] | None:
        """Get a valid session together with its (active) user."""
        result = await self._db.execute(
            select(Session, User)
            .join(User, col(Session.user_id) == col(User.id))
            .where(active(User, col(Session.id) == session_id))
        )
        row = result.one_or_none()

        if row is None:
            return None

        session, user = row
        if not self.is_valid(session):
            return None

        return session, user

    async def revoke(self, session_id: str) -> bool:
        """Revoke a session by setting revoked_at.

        Returns:
            True if session was revoked, False if not found
        """
        result = await self._db.execute(
            select(Session).where(col(Session.id) == session_id)
        )
        session = result.scalar_one_or_none()

        if session is None:
            return False

        session.revoked_at = datetime.now(UTC)
        await self._db.commit()
        return True

    @staticmethod
    def is_valid(session: Session) -> bool:
        """Check if a session is not expired and not revoked."""
        if session.revoked_at is not None:
            return False

        # SQLite hands back naive datetimes, asyncpg aware ones
        now = datetime.now(UTC).replace(tzinfo=None)
        expires_at = session.expires_at
        if expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)

        return expires_at > now
