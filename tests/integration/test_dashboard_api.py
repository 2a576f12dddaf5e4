from httpx import AsyncClient
from fastapi import status

from hrms.models.hr.attendance import Attendance
from hrms.models.shared.enums import AttendanceStatus, Role
from hrms.utils.date_utils import local_now

class TestDashboard:
    async def _seed_today(self, session, user):
        now = local_now()
        session.add(Attendance(
            user_id=user.id,
            attendance_date=now.date(),
            check_in_time=now,
            status=AttendanceStatus.PRESENT,
        ))
        await session.commit()

    async def test_management_view(self, client: AsyncClient, session, make_user, auth_headers):
        ceo = await make_user(role=Role.CEO)
        employee = await make_user(designation="Engineer")
        await make_user(role=Role.ADMIN)
        await self._seed_today(session, employee)

        response = await client.get("/api/v1/dashboard/", headers=auth_headers(ceo))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["stats"] == {"total_employees": 2, "present_today": 1, "on_leave": 0, "pending_leaves": 0}
        assert data["employee_attendance"][0]["user_id"] == employee.id
        assert data["employee_attendance"][0]["role"] == "Engineer"
        assert data["activities"][0]["text"] == f"{employee.full_name} marked attendance"
        assert data["activities"][0]["time_ago"].endswith("ago")

    async def test_employee_sees_stats_only(self, client: AsyncClient, session, make_user, auth_headers):
        employee = await make_user()
        await self._seed_today(session, employee)

        response = await client.get("/api/v1/dashboard/", headers=auth_headers(employee))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["stats"]["present_today"] == 1
        assert data["employee_attendance"] == []
        assert data["activities"] == []
