import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from hrms.auth.permissions import HEADCOUNT_EXCLUDED_ROLES, PermissionChecker
from hrms.models.auth.user import User
from hrms.models.hr.attendance import Attendance
from hrms.models.hr.leave import Leave
from hrms.models.shared.enums import AttendanceStatus, LeaveStatus
from hrms.services.hr.leave_service import LeaveService
from hrms.utils.date_utils import local_now

logger = logging.getLogger(__name__)

MAX_ACTIVITIES = 5
RECENT_CHECK_INS = 3

def time_ago(moment: Optional[datetime], now: datetime) -> str:
    if not moment:
        return "recently"
    minutes = max(int((now - moment).total_seconds() // 60), 0)
    if minutes < 60:
        return f"{minutes} mins ago"
    if minutes < 1440:
        return f"{minutes // 60} hours ago"
    if minutes < 10080:
        return f"{minutes // 1440} days ago"
    return f"{minutes // 10080} weeks ago"

class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count_today(self, today: date, attendance_status: AttendanceStatus) -> int:
        return await self.session.scalar(
            select(func.count(Attendance.id)).where(
                Attendance.attendance_date == today,
                Attendance.status == attendance_status
            )
        ) or 0

    async def get_stats(self, today: date) -> Dict[str, int]:
        total_employees = await self.session.scalar(
            select(func.count(User.id)).where(
                User.role.notin_(HEADCOUNT_EXCLUDED_ROLES),
                User.is_deleted == False
            )
        ) or 0
        return {
            "total_employees": total_employees,
            "present_today": await self._count_today(today, AttendanceStatus.PRESENT),
            "on_leave": await self._count_today(today, AttendanceStatus.ON_LEAVE),
            "pending_leaves": await LeaveService(self.session).count_pending(),
        }

    async def _today_records(self, today: date) -> List[Attendance]:
        result = await self.session.execute(
            select(Attendance)
            .options(selectinload(Attendance.user))
            .where(Attendance.attendance_date == today)
            .order_by(Attendance.check_in_time.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    def _attendance_rows(records: List[Attendance]) -> List[Dict[str, Any]]:
        return [
            {
                "user_id": record.user_id,
                "name": record.user.full_name or record.user.username,
                "role": record.user.designation or record.user.role.value,
                "status": record.status.value,
                "check_in": record.check_in_time,
            }
            for record in records
        ]

    async def _activities(self, records: List[Attendance], now: datetime) -> List[Dict[str, Any]]:
        activities = []
        for record in [r for r in records if r.check_in_time][:RECENT_CHECK_INS]:
            activities.append({
                "text": f"{record.user.full_name or record.user.username} marked attendance",
                "type": "attendance",
                "occurred_at": record.check_in_time,
            })

        result = await self.session.execute(
            select(Leave)
            .options(selectinload(Leave.user))
            .where(Leave.is_deleted == False)
            .order_by(func.coalesce(Leave.updated_at, Leave.created_at).desc(), Leave.id.desc())
            .limit(MAX_ACTIVITIES)
        )
        for leave in result.scalars().all():
            name = leave.user.full_name or leave.user.username
            if leave.status == LeaveStatus.APPROVED:
                activities.append({"text": f"Leave approved for {name}", "type": "approve", "occurred_at": leave.reviewed_on})
            elif leave.status == LeaveStatus.PENDING:
                activities.append({"text": f"{name} applied for leave", "type": "leave", "occurred_at": leave.applied_on})

        activities.sort(key=lambda a: a["occurred_at"] or datetime.min, reverse=True)
        for activity in activities:
            activity["time_ago"] = time_ago(activity["occurred_at"], now)
        return activities[:MAX_ACTIVITIES]

    async def get_dashboard(self, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Headline stats for everyone; the attendance board and activity feed for management"""
        now = now or local_now()
        today = now.date()

        dashboard = {
            "stats": await self.get_stats(today),
            "employee_attendance": [],
            "activities": [],
        }

        if PermissionChecker(user.role).can("dashboard", "management"):
            records = await self._today_records(today)
            dashboard["employee_attendance"] = self._attendance_rows(records)
            dashboard["activities"] = await self._activities(records, now)

        logger.debug(f"Dashboard built for user {user.id}")
        return dashboard
