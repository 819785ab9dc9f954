"""User store."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from upwatch.core.models import User, UserRecord, utc_now
from upwatch.infra.stores.base import active


class UserStore:
    """Persistence for users.

    Ordinary lookups return ``UserRecord`` (no password hash). Only
    ``find_by_email_with_password`` returns the credential-bearing row.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create(self, user: User) -> UserRecord:
        """Insert a user. Raises IntegrityError if the email is taken."""
        self._db.add(user)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise
        await self._db.refresh(user)
        return UserRecord.model_validate(user)

    async def _find(self, *conditions) -> User | None:
        result = await self._db.execute(select(User).where(active(User, *conditions)))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        user = await self._find(col(User.id) == user_id)
        return UserRecord.model_validate(user) if user else None

    async def find_by_email(self, email: str) -> UserRecord | None:
        user = await self._find(col(User.email) == email)
        return UserRecord.model_validate(user) if user else None

    async def find_by_email_with_password(self, email: str) -> User | None:
        """Credential-bearing lookup, for login only."""
        return await self._find(col(User.email) == email)

    async def update_password(
        self, user_id: str, password_hash: str
    ) -> UserRecord | None:
        user = await self._find(col(User.id) == user_id)
        if user is None:
            return None

        user.password_hash = password_hash
        user.updated_at = utc_now()
        await self._db.commit()
        await self._db.refresh(user)
        return UserRecord.model_validate(user)

    async def record_failed_login(
        self, user_id: str, attempts: int, locked_until: datetime | None
    ) -> None:
        now = utc_now()
        values: dict = {"failed_login_attempts": attempts, "last_failed_at": now}
        if locked_until is not None:
            values["locked_until"] = locked_until

        await self._db.execute(
            update(User).where(active(User, col(User.id) == user_id)).values(**values)
        )
        await self._db.commit()

    async def reset_failed_logins(self, user_id: str) -> None:
        await self._db.execute(
            update(User)
            .where(active(User, col(User.id) == user_id))
            .values(failed_login_attempts=0, locked_until=None, last_failed_at=None)
        )
        await self._db.commit()
