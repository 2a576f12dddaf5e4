from httpx import AsyncClient
from fastapi import status

from hrms.models.shared.enums import Role

class TestHolidays:
    async def test_ceo_creates_and_lists(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        headers = auth_headers(ceo)

        response = await client.post(
            "/api/v1/holidays/",
            json={"date": "2025-11-01", "name": "Foundation Day", "type": "company_specific"},
            headers=headers,
        )
        assert response.status_code == status.HTTP_201_CREATED
        holiday = response.json()["holiday"]
        assert holiday["year"] == 2025
        assert holiday["added_by_id"] == ceo.id

        await client.post("/api/v1/holidays/", json={"date": "2025-02-01", "name": "Retreat"}, headers=headers)
        await client.post("/api/v1/holidays/", json={"date": "2026-01-01", "name": "New Year"}, headers=headers)

        listed = await client.get("/api/v1/holidays/", params={"year": 2025}, headers=headers)
        assert listed.status_code == status.HTTP_200_OK
        assert [h["name"] for h in listed.json()["holidays"]] == ["Retreat", "Foundation Day"]

    async def test_duplicate_date_rejected(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        headers = auth_headers(ceo)

        await client.post("/api/v1/holidays/", json={"date": "2025-11-01", "name": "Foundation Day"}, headers=headers)
        response = await client.post("/api/v1/holidays/", json={"date": "2025-11-01", "name": "Other"}, headers=headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "A holiday already exists on this date"

    async def test_missing_name(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)

        response = await client.post("/api/v1/holidays/", json={"date": "2025-11-01"}, headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Please provide date and name"

    async def test_update_moves_year(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        headers = auth_headers(ceo)

        created = await client.post("/api/v1/holidays/", json={"date": "2025-12-31", "name": "Year End"}, headers=headers)
        holiday_id = created.json()["holiday"]["id"]

        response = await client.put(
            f"/api/v1/holidays/{holiday_id}",
            json={"date": "2026-01-02", "description": "Moved"},
            headers=headers,
        )
        assert response.status_code == status.HTTP_200_OK
        holiday = response.json()["holiday"]
        assert holiday["year"] == 2026
        assert holiday["name"] == "Year End"
        assert holiday["description"] == "Moved"

    async def test_delete_by_date_and_id(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        headers = auth_headers(ceo)

        await client.post("/api/v1/holidays/", json={"date": "2025-11-01", "name": "Foundation Day"}, headers=headers)
        created = await client.post("/api/v1/holidays/", json={"date": "2025-11-02", "name": "Extra"}, headers=headers)

        by_date = await client.delete("/api/v1/holidays/date/2025-11-01", headers=headers)
        assert by_date.status_code == status.HTTP_200_OK

        missing = await client.delete("/api/v1/holidays/date/2025-11-01", headers=headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert missing.json()["message"] == "Holiday not found for this date"

        by_id = await client.delete(f"/api/v1/holidays/{created.json()['holiday']['id']}", headers=headers)
        assert by_id.status_code == status.HTTP_200_OK

        listed = await client.get("/api/v1/holidays/", params={"year": 2025}, headers=headers)
        assert listed.json()["holidays"] == []

    async def test_employee_cannot_manage(self, client: AsyncClient, make_user, auth_headers):
        employee = await make_user()
        headers = auth_headers(employee)

        response = await client.post("/api/v1/holidays/", json={"date": "2025-11-01", "name": "Mine"}, headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

        listed = await client.get("/api/v1/holidays/", headers=headers)
        assert listed.status_code == status.HTTP_200_OK
