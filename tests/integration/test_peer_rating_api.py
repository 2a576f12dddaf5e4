from httpx import AsyncClient
from fastapi import status

from hrms.models.shared.enums import Role

class TestPeerRating:
    async def test_submit_and_resubmit_upserts(self, client: AsyncClient, make_user, auth_headers):
        rater = await make_user()
        colleague = await make_user()
        headers = auth_headers(rater)

        payload = {
            "month": "march",
            "year": 2025,
            "ratings": [{"employee_id": colleague.id, "responsiveness": 7, "team_spirit": 8}],
        }
        response = await client.post("/api/v1/peer-rating/", json=payload, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "1 ratings saved successfully"

        payload["ratings"][0]["responsiveness"] = 9
        await client.post("/api/v1/peer-rating/", json=payload, headers=headers)

        mine = await client.get("/api/v1/peer-rating/my-ratings", params={"month": "March", "year": 2025}, headers=headers)
        ratings = mine.json()["ratings"]
        assert len(ratings) == 1
        assert ratings[0]["month"] == "March"
        assert ratings[0]["responsiveness"] == 9

    async def test_out_of_range_score(self, client: AsyncClient, make_user, auth_headers):
        rater = await make_user()
        colleague = await make_user()

        response = await client.post(
            "/api/v1/peer-rating/",
            json={"month": "March", "year": 2025, "ratings": [{"employee_id": colleague.id, "responsiveness": 11, "team_spirit": 5}]},
            headers=auth_headers(rater),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Ratings must be between 0 and 10"

    async def test_empty_batch(self, client: AsyncClient, make_user, auth_headers):
        rater = await make_user()

        response = await client.post(
            "/api/v1/peer-rating/", json={"month": "March", "year": 2025, "ratings": []}, headers=auth_headers(rater)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "No ratings provided"

    async def test_invalid_month_name(self, client: AsyncClient, make_user, auth_headers):
        rater = await make_user()

        response = await client.get("/api/v1/peer-rating/my-ratings", params={"month": "Smarch"}, headers=auth_headers(rater))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_candidates_exclude_self(self, client: AsyncClient, make_user, auth_headers):
        rater = await make_user()
        colleague = await make_user()
        await make_user(role=Role.ADMIN)

        response = await client.get("/api/v1/users/peer-rating/employees", headers=auth_headers(rater))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 1
        assert [u["id"] for u in data["users"]] == [colleague.id]

    async def test_summary(self, client: AsyncClient, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        first = await make_user()
        second = await make_user()
        target = await make_user(designation="Analyst")

        for rater, score in ((first, 6), (second, 9)):
            await client.post(
                "/api/v1/peer-rating/",
                json={"month": "March", "year": 2025, "ratings": [{"employee_id": target.id, "responsiveness": score, "team_spirit": 10}]},
                headers=auth_headers(rater),
            )

        denied = await client.get("/api/v1/peer-rating/summary", params={"month": "March", "year": 2025}, headers=auth_headers(first))
        assert denied.status_code == status.HTTP_403_FORBIDDEN

        response = await client.get("/api/v1/peer-rating/summary", params={"month": "March", "year": 2025}, headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_200_OK
        summary = response.json()["summary"]
        assert len(summary) == 1
        assert summary[0]["employee_id"] == target.id
        assert summary[0]["designation"] == "Analyst"
        assert summary[0]["rating_count"] == 2
        assert summary[0]["avg_responsiveness"] == 7.5
        assert summary[0]["avg_team_spirit"] == 10
