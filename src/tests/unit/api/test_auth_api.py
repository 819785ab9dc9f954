"""Tests for authentication API endpoints."""

from httpx import AsyncClient


class TestRegisterApi:
    """POST /api/v1/auth/register"""

    async def test_register_sets_cookie(self, client: AsyncClient, password: str) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "new@example.com", "password": password, "full_name": "New"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "new@example.com"
        assert "password_hash" not in body["data"]["user"]
        assert "session" in response.cookies

    async def test_duplicate_email(self, client: AsyncClient, login_as, password: str) -> None:
        await login_as("dup@example.com")

        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "dup@example.com", "password": password, "full_name": "Dup"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "EMAIL_TAKEN"

    async def test_short_password_is_validation_error(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "a@example.com", "password": "short", "full_name": "A"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"


class TestLoginApi:
    """POST /api/v1/auth/login"""

    async def test_login(self, client: AsyncClient, login_as, password: str) -> None:
        await login_as("user@example.com")

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "user@example.com", "password": password},
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "user@example.com"
        assert "session" in response.cookies

    async def test_wrong_password(self, client: AsyncClient, login_as) -> None:
        await login_as("user@example.com")

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "user@example.com", "password": "not-the-password"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    async def test_lockout_returns_retry_after(
        self, client: AsyncClient, login_as, password: str
    ) -> None:
        await login_as("user@example.com")
        for _ in range(5):
            await client.post(
                "/api/v1/auth/login",
                json={"email": "user@example.com", "password": "not-the-password"},
            )

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "user@example.com", "password": password},
        )

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "TOO_MANY_REQUESTS"
        assert int(response.headers["Retry-After"]) > 0


class TestSessionApi:
    """GET /api/v1/auth/me and POST /api/v1/auth/logout"""

    async def test_me_requires_session(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": {"code": "UNAUTHORIZED", "message": "Authentication required"},
        }

    async def test_me(self, login_as) -> None:
        ac = await login_as("me@example.com", "Me Myself")

        response = await ac.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["data"]["user"]["full_name"] == "Me Myself"

    async def test_logout_revokes_session(self, login_as) -> None:
        ac = await login_as("bye@example.com")
        session_id = ac.cookies.get("session")

        response = await ac.post("/api/v1/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": None}

        ac.cookies.set("session", session_id)
        assert (await ac.get("/api/v1/auth/me")).status_code == 401

    async def test_bogus_cookie(self, client: AsyncClient) -> None:
        client.cookies.set("session", "not-a-session")
        assert (await client.get("/api/v1/auth/me")).status_code == 401
