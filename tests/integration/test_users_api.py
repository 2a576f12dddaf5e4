from io import BytesIO
from httpx import AsyncClient
from fastapi import status
from PIL import Image

from hrms.models.shared.enums import Role

def png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color="red").save(buffer, format="PNG")
    return buffer.getvalue()

def new_user_payload(**overrides) -> dict:
    payload = {
        "employee_id": "NITR-EMP-100",
        "username": "newhire",
        "email": "NewHire@Example.com",
        "password": "welcome1",
        "profile": {"first_name": "New", "last_name": "Hire"},
        "employment": {"designation": "Associate", "joining_date": "2025-03-15", "gross_remuneration": 30000},
    }
    payload.update(overrides)
    return payload

class TestUserManagement:
    async def test_create_user(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)

        response = await client.post("/api/v1/users/", json=new_user_payload(), headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_201_CREATED
        user = response.json()["user"]
        assert user["email"] == "newhire@example.com"
        assert user["role"] == "EMPLOYEE"
        assert user["designation"] == "Associate"
        assert user["casual_leave"] == 12

        login = await client.post("/api/v1/auth/login", json={"username": "newhire", "password": "welcome1"})
        assert login.status_code == status.HTTP_200_OK

    async def test_duplicate_user(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        headers = auth_headers(ceo)

        await client.post("/api/v1/users/", json=new_user_payload(), headers=headers)
        response = await client.post(
            "/api/v1/users/", json=new_user_payload(employee_id="NITR-EMP-101"), headers=headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "User already exists with this email, username or employee ID"

    async def test_short_password(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)

        response = await client.post("/api/v1/users/", json=new_user_payload(password="123"), headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "password: Password must be at least 6 characters"

    async def test_employee_cannot_list_users(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.get("/api/v1/users/", headers=auth_headers(employee))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_list_and_search(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        await make_user(first_name="Asha")
        await make_user(first_name="Ravi")

        response = await client.get("/api/v1/users/", params={"search": "asha"}, headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["count"] == 1
        assert data["data"][0]["first_name"] == "Asha"

    async def test_update_user_entitlement(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        employee = await make_user()

        response = await client.put(
            f"/api/v1/users/{employee.id}",
            json={"leave_balance": {"casual_leave": 15}, "employment": {"designation": "Lead"}},
            headers=auth_headers(ceo),
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["casual_leave"] == 15
        assert response.json()["user"]["designation"] == "Lead"

    async def test_deactivate_user(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        employee = await make_user(password="pass1234")

        response = await client.delete(f"/api/v1/users/{employee.id}", headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_200_OK

        login = await client.post("/api/v1/auth/login", json={"username": employee.username, "password": "pass1234"})
        assert login.status_code == status.HTTP_401_UNAUTHORIZED
        assert login.json()["message"] == "Account is deactivated"

        itself = await client.delete(f"/api/v1/users/{ceo.id}", headers=auth_headers(ceo))
        assert itself.status_code == status.HTTP_400_BAD_REQUEST

    async def test_stats_overview(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        await make_user()

        response = await client.get("/api/v1/users/stats/overview", headers=auth_headers(ceo))
        assert response.json()["role_wise"] == {"CEO": 1, "EMPLOYEE": 1}

class TestProfilePhoto:
    async def test_upload_own_photo(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.post(
            f"/api/v1/users/{employee.id}/upload-photo",
            files={"photo": ("me.png", png_bytes(), "image/png")},
            headers=auth_headers(employee),
        )
        assert response.status_code == status.HTTP_200_OK
        photo = response.json()["user"]["profile_photo"]
        assert photo.startswith(f"/uploads/images/profile-photos/profile-{employee.id}-")
        assert photo.endswith(".png")

    async def test_rejects_non_image(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.post(
            f"/api/v1/users/{employee.id}/upload-photo",
            files={"photo": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(employee),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Only image files (JPEG, PNG, GIF) are allowed"

    async def test_rejects_corrupt_image(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.post(
            f"/api/v1/users/{employee.id}/upload-photo",
            files={"photo": ("fake.png", b"not really a png", "image/png")},
            headers=auth_headers(employee),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Uploaded file is not a valid image"

    async def test_cannot_change_colleague_photo(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()
        colleague = await make_user()

        response = await client.post(
            f"/api/v1/users/{colleague.id}/upload-photo",
            files={"photo": ("me.png", png_bytes(), "image/png")},
            headers=auth_headers(employee),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
