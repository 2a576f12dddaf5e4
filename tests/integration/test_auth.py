import pytest
from httpx import AsyncClient
from fastapi import status

from hrms.models.shared.enums import Role

class TestAuth:
    """Test authentication endpoints"""

    async def test_login_with_username(self, client: AsyncClient, make_user):
        user = await make_user(password="pass1234")

        response = await client.post("/api/v1/auth/login", json={"username": user.username, "password": "pass1234"})
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["success"] is True
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["username"] == user.username
        assert "hashed_password" not in data["user"]

    async def test_login_with_email(self, client: AsyncClient, make_user):
        user = await make_user(password="pass1234")

        response = await client.post("/api/v1/auth/login", json={"username": user.email.upper(), "password": "pass1234"})
        assert response.status_code == status.HTTP_200_OK

    async def test_login_invalid_credentials(self, client: AsyncClient, make_user):
        user = await make_user(password="pass1234")

        response = await client.post("/api/v1/auth/login", json={"username": user.username, "password": "wrong"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    async def test_login_deactivated_account(self, client: AsyncClient, make_user):
        user = await make_user(password="pass1234", is_active=False)

        response = await client.post("/api/v1/auth/login", json={"username": user.username, "password": "pass1234"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Account is deactivated"

    async def test_login_missing_password_is_bad_request(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={"username": "someone"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False

    async def test_login_is_rate_limited(self, client: AsyncClient):
        for _ in range(10):
            await client.post("/api/v1/auth/login", json={"username": "ghost", "password": "x"})

        response = await client.post("/api/v1/auth/login", json={"username": "ghost", "password": "x"})
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Not authorized, no token"

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Not authorized, token failed"

    async def test_token_of_deactivated_user_is_refused(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user(is_active=False)

        response = await client.get("/api/v1/auth/me", headers=auth_headers(user))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Account is deactivated"

    async def test_get_current_user(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user(role=Role.CEO)

        response = await client.get("/api/v1/auth/me", headers=auth_headers(user))
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["user"]["id"] == user.id
        assert data["capabilities"]["role"] == "CEO"
        assert "holiday:manage" in data["capabilities"]["permissions"]
        assert "admin" not in data["capabilities"]["components"]

    async def test_change_password(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user(password="oldpass1")
        headers = auth_headers(user)

        bad = await client.put(
            "/api/v1/auth/change-password",
            json={"current_password": "nope", "new_password": "newpass1"},
            headers=headers,
        )
        assert bad.status_code == status.HTTP_400_BAD_REQUEST
        assert bad.json()["message"] == "Current password is incorrect"

        ok = await client.put(
            "/api/v1/auth/change-password",
            json={"current_password": "oldpass1", "new_password": "newpass1"},
            headers=headers,
        )
        assert ok.status_code == status.HTTP_200_OK

        login = await client.post("/api/v1/auth/login", json={"username": user.username, "password": "newpass1"})
        assert login.status_code == status.HTTP_200_OK

    async def test_update_own_profile(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user()

        response = await client.put(
            "/api/v1/auth/profile",
            json={
                "profile": {"phone": "9999999999", "address": {"city": "Raipur"}},
                "bank_details": {"bank_name": "SBI"},
            },
            headers=auth_headers(user),
        )
        assert response.status_code == status.HTTP_200_OK

        data = response.json()["user"]
        assert data["phone"] == "9999999999"
        assert data["address"]["city"] == "Raipur"
        assert data["bank_details"]["bank_name"] == "SBI"

async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
