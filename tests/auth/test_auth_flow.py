"""Email registration, login, anonymous sign-in and token refresh."""

from httpx import AsyncClient


class TestRegister:
    async def test_register_returns_tokens(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json={
            "email": "New.User@Example.com",
            "password": "SecureP@ss1",
            "display_name": "Newbie",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["email"] == "new.user@example.com"
        assert data["user"]["display_name"] == "Newbie"
        assert data["user"]["auth_method"] == "email"
        assert data["user"]["is_anonymous"] is False

    async def test_duplicate_email_conflicts(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/v1/auth/register", json={
            "email": registered_user["email"],
            "password": "AnotherP@ss2",
        })
        assert response.status_code == 409

    async def test_weak_password_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json={
            "email": "weak@example.com",
            "password": "alllowercase",
        })
        assert response.status_code == 400
        assert "uppercase" in response.json()["detail"]

    async def test_invalid_email_is_validation_error(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json={
            "email": "not-an-email",
            "password": "SecureP@ss1",
        })
        assert response.status_code == 422


class TestLogin:
    async def test_login_success(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/v1/auth/login", json={
            "email": registered_user["email"].upper(),
            "password": registered_user["password"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == registered_user["user_id"]
        assert data["user"]["login_count"] >= 1

    async def test_wrong_password(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/v1/auth/login", json={
            "email": registered_user["email"],
            "password": "WrongP@ss9",
        })
        assert response.status_code == 401

    async def test_unknown_email(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={
            "email": "nobody@example.com",
            "password": "SecureP@ss1",
        })
        assert response.status_code == 401


class TestAnonymous:
    async def test_anonymous_account(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/anonymous")
        assert response.status_code == 201
        user = response.json()["user"]
        assert user["is_anonymous"] is True
        assert user["auth_method"] == "anonymous"
        assert user["display_name"] == "Anonymous"
        assert user["email"] is None

    async def test_anonymous_token_works(self, client: AsyncClient):
        tokens = (await client.post("/api/v1/auth/anonymous")).json()
        response = await client.get(
            "/api/v1/users/me",
            headers={"Authorization": f"Bearer {tokens['access_token']}"},
        )
        assert response.status_code == 200
        assert response.json()["is_anonymous"] is True


class TestRefresh:
    async def test_refresh_issues_new_pair(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/v1/auth/refresh", json={
            "refresh_token": registered_user["refresh_token"],
        })
        assert response.status_code == 200
        assert response.json()["user"]["id"] == registered_user["user_id"]

    async def test_access_token_cannot_refresh(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/v1/auth/refresh", json={
            "refresh_token": registered_user["access_token"],
        })
        assert response.status_code == 401

    async def test_refresh_token_cannot_authenticate(self, client: AsyncClient, registered_user: dict):
        response = await client.get(
            "/api/v1/users/me",
            headers={"Authorization": f"Bearer {registered_user['refresh_token']}"},
        )
        assert response.status_code == 401

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401
