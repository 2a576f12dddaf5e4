from httpx import AsyncClient
from fastapi import status

from hrms.models.shared.enums import Role

class TestAdminPanel:
    async def test_roles_are_admin_only(self, client: AsyncClient, make_user, auth_headers):
        admin = await make_user(role=Role.ADMIN)
        ceo = await make_user(role=Role.CEO)

        denied = await client.get("/api/v1/admin/roles", headers=auth_headers(ceo))
        assert denied.status_code == status.HTTP_403_FORBIDDEN

        response = await client.get("/api/v1/admin/roles", headers=auth_headers(admin))
        assert response.status_code == status.HTTP_200_OK
        roles = response.json()["roles"]
        assert roles[0]["role_id"] == "ADMIN"
        assert len(roles) == len(Role)

    async def test_single_role(self, client: AsyncClient, make_user, auth_headers):
        admin = await make_user(role=Role.ADMIN)
        ceo = await make_user(role=Role.CEO)

        response = await client.get("/api/v1/admin/roles/ceo", headers=auth_headers(admin))
        assert response.status_code == status.HTTP_200_OK
        role = response.json()["role"]
        assert role["role_id"] == "CEO"
        assert role["hierarchy_level"] == 1
        assert "holiday:manage" in role["feature_access"]

        missing = await client.get("/api/v1/admin/roles/janitor", headers=auth_headers(admin))
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert missing.json() == {"success": False, "message": "Role not found"}

        denied = await client.get("/api/v1/admin/roles/ceo", headers=auth_headers(ceo))
        assert denied.status_code == status.HTTP_403_FORBIDDEN

    async def test_components(self, client: AsyncClient, make_user, auth_headers):
        admin = await make_user(role=Role.ADMIN)

        response = await client.get("/api/v1/admin/components", headers=auth_headers(admin))
        assert response.status_code == status.HTTP_200_OK
        assert "dashboard" in [c["id"] for c in response.json()["components"]]

    async def test_stats(self, client: AsyncClient, make_user, auth_headers):
        admin = await make_user(role=Role.ADMIN)
        await make_user()
        await make_user()
        await make_user(is_active=False)

        response = await client.get("/api/v1/admin/stats", headers=auth_headers(admin))
        data = response.json()
        assert data["total_users"] == 3
        assert data["users_by_role"] == {"ADMIN": 1, "EMPLOYEE": 2}
        assert data["total_roles"] == len(Role)

class TestRoleLookups:
    async def test_valid_roles(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.get("/api/v1/admin/valid-roles", headers=auth_headers(employee))
        assert response.status_code == status.HTTP_200_OK
        assert "FACULTY_IN_CHARGE" in response.json()["roles"]

    async def test_permissions_for_role(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.get("/api/v1/admin/user-permissions/ceo", headers=auth_headers(employee))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["role"] == "CEO"
        assert data["is_management"] is True

    async def test_unknown_role(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()

        response = await client.get("/api/v1/admin/user-permissions/janitor", headers=auth_headers(employee))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Role not found"
