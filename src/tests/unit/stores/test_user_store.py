"""Tests for UserStore against SQLite."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from upwatch.core.models import User, UserRecord
from upwatch.infra.stores import UserStore


class TestUserStore:
    """User persistence and credential isolation."""

    async def test_create_returns_record_without_hash(self, alice: UserRecord) -> None:
        assert isinstance(alice, UserRecord)
        assert not hasattr(alice, "password_hash")

    async def test_find_by_email(self, user_store: UserStore, alice: UserRecord) -> None:
        found = await user_store.find_by_email("alice@example.com")
        assert found.id == alice.id
        assert await user_store.find_by_email("nobody@example.com") is None

    async def test_find_with_password_returns_row(
        self, user_store: UserStore, alice: UserRecord
    ) -> None:
        user = await user_store.find_by_email_with_password("alice@example.com")
        assert isinstance(user, User)
        assert user.password_hash.startswith("$argon2")

    async def test_duplicate_active_email_rejected(
        self, user_store: UserStore, alice: UserRecord
    ) -> None:
        with pytest.raises(IntegrityError):
            await user_store.create(
                User(email="alice@example.com", password_hash="x", full_name="Other")
            )

    async def test_soft_deleted_email_can_be_reused(
        self, user_store: UserStore, db_session: AsyncSession, alice: UserRecord
    ) -> None:
        row = await db_session.get(User, alice.id)
        row.deleted_at = datetime.now(UTC)
        await db_session.commit()

        again = await user_store.create(
            User(email="alice@example.com", password_hash="x", full_name="Alice 2")
        )

        assert again.id != alice.id
        assert await user_store.find_by_id(alice.id) is None

    async def test_failed_login_bookkeeping(
        self, user_store: UserStore, alice: UserRecord
    ) -> None:
        until = datetime.now(UTC) + timedelta(seconds=30)
        await user_store.record_failed_login(alice.id, 5, until)

        user = await user_store.find_by_email_with_password(alice.email)
        assert user.failed_login_attempts == 5
        assert user.locked_until is not None

        await user_store.reset_failed_logins(alice.id)

        user = await user_store.find_by_email_with_password(alice.email)
        assert user.failed_login_attempts == 0
        assert user.locked_until is None

    async def test_update_password(self, user_store: UserStore, alice: UserRecord) -> None:
        record = await user_store.update_password(alice.id, "new-hash")
        assert record.id == alice.id

        user = await user_store.find_by_email_with_password(alice.email)
        assert user.password_hash == "new-hash"
