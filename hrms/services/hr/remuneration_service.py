import logging
from collections import defaultdict
from datetime import date, datetime
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Tuple
from fastapi import HTTPException, status
from openpyxl import Workbook
from openpyxl.styles import Font
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from hrms.auth.permissions import NON_PAYROLL_ROLES
from hrms.core.exceptions import ValidationError
from hrms.models.auth.user import User
from hrms.models.hr.attendance import Attendance
from hrms.models.shared.enums import AttendanceStatus
from hrms.services.hr.holiday_service import national_holidays_for_month
from hrms.utils.date_utils import MONTH_NAMES, days_in_month, is_weekend, iter_days, local_today, month_bounds

logger = logging.getLogger(__name__)

CURRENT_MONTH_MESSAGE = "Current month data not available yet"
HALF_DAY_LEAVE_WEIGHT = 0.5

SUMMARY_COLUMNS = [
    ("employee_code", "Employee ID"),
    ("name", "Name"),
    ("designation", "Designation"),
    ("joining_date", "Date of Joining"),
    ("gross_remuneration", "Gross Remuneration"),
    ("days_worked", "Days Worked"),
    ("casual_leave", "Casual Leave"),
    ("days_absent", "Days Absent"),
    ("weekly_offs", "Weekly Offs"),
    ("holidays", "Holidays"),
    ("lwp_days", "LWP Days"),
    ("total_days", "Total Days"),
    ("payable_days", "Payable Days"),
]

def _effective_start_day(joining_date: Optional[date], month: int, year: int) -> Optional[int]:
    """First day of the month the employee counts from, None if they joined later"""
    if not joining_date:
        return 1
    first, last = month_bounds(month, year)
    if joining_date > last:
        return None
    if joining_date >= first:
        return joining_date.day
    return 1

def summarize_employee(user: User, records: Iterable[Attendance], month: int, year: int) -> Dict[str, Any]:
    row = {
        "employee_id": user.id,
        "employee_code": user.employee_id,
        "name": user.full_name or user.username,
        "designation": user.designation or user.role.value,
        "joining_date": user.joining_date,
        "gross_remuneration": float(user.gross_remuneration or 0),
        "days_worked": 0,
        "casual_leave": 0.0,
        "days_absent": 0,
        "weekly_offs": 0,
        "holidays": 0,
        "lwp_days": 0,
        "total_days": 0,
        "payable_days": 0,
    }

    start_day = _effective_start_day(user.joining_date, month, year)
    if start_day is None:
        return row

    counts = defaultdict(int)
    for record in records:
        counts[record.status] += 1

    month_days = days_in_month(month, year)
    start = date(year, month, start_day)
    end = date(year, month, month_days)

    days_absent = counts[AttendanceStatus.ABSENT]
    total_days = month_days - start_day + 1

    row.update(
        days_worked=counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE],
        casual_leave=counts[AttendanceStatus.ON_LEAVE] + counts[AttendanceStatus.HALF_DAY] * HALF_DAY_LEAVE_WEIGHT,
        days_absent=days_absent,
        weekly_offs=sum(1 for day in iter_days(start, end) if is_weekend(day)),
        holidays=sum(
            1 for day in national_holidays_for_month(month, year)
            if day >= start and not is_weekend(day)
        ),
        # Only explicit absences are unpaid
        lwp_days=days_absent,
        total_days=total_days,
        payable_days=total_days - days_absent,
    )
    return row

def build_attendance_summary(
    users: List[User],
    records: List[Attendance],
    month: int,
    year: int,
) -> List[Dict[str, Any]]:
    by_user: Dict[int, List[Attendance]] = defaultdict(list)
    for record in records:
        by_user[record.user_id].append(record)
    return [summarize_employee(user, by_user.get(user.id, []), month, year) for user in users]

class RemunerationService:
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _validate_period(month: Optional[int], year: Optional[int]) -> Tuple[int, int]:
        if not month or not year:
            raise ValidationError("Month and year are required")
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        return month, year

    async def _payroll_roster(self) -> List[User]:
        result = await self.session.execute(
            select(User)
            .where(User.is_active == True, User.role.notin_(NON_PAYROLL_ROLES))
            .order_by(User.employee_id)
        )
        return list(result.scalars().all())

    async def get_attendance_summary(self, month: Optional[int], year: Optional[int], today: Optional[date] = None) -> Dict[str, Any]:
        """Per-employee payable-day breakdown for a closed month"""
        month, year = self._validate_period(month, year)
        today = today or local_today()

        if today.year == year and today.month == month:
            return {
                "month": month,
                "year": year,
                "is_current_month": True,
                "message": CURRENT_MONTH_MESSAGE,
                "employees": [],
            }

        try:
            users = await self._payroll_roster()
            start, end = month_bounds(month, year)
            result = await self.session.execute(
                select(Attendance).where(Attendance.attendance_date.between(start, end))
            )
            records = list(result.scalars().all())

            employees = build_attendance_summary(users, records, month, year)
            logger.info(f"Attendance summary built for {month}/{year}: {len(employees)} employees")
            return {
                "month": month,
                "year": year,
                "is_current_month": False,
                "days_in_month": days_in_month(month, year),
                "employees": employees,
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error building attendance summary for {month}/{year}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error building attendance summary")

    # ---------- Excel export ----------
    @staticmethod
    def _write_summary_sheet(ws, employees: List[Dict[str, Any]]):
        ws.append([title for _, title in SUMMARY_COLUMNS])
        for cell in ws[1]:
            cell.font = Font(bold=True)
        for row in employees:
            values = []
            for key, _ in SUMMARY_COLUMNS:
                value = row.get(key)
                if isinstance(value, date):
                    value = value.strftime("%Y-%m-%d")
                values.append(value)
            ws.append(values)

    async def export_attendance_summary_excel(self, month: Optional[int], year: Optional[int], today: Optional[date] = None) -> Tuple[BytesIO, str]:
        """
        Build an Excel workbook of the monthly summary.
        Returns: (file_bytes, filename)
        """
        summary = await self.get_attendance_summary(month, year, today)
        if summary["is_current_month"]:
            raise ValidationError(CURRENT_MONTH_MESSAGE)

        wb = Workbook()
        ws = wb.active
        ws.title = f"{MONTH_NAMES[summary['month'] - 1]} {summary['year']}"
        self._write_summary_sheet(ws, summary["employees"])

        file_bytes = BytesIO()
        wb.save(file_bytes)
        file_bytes.seek(0)

        filename = f"attendance_summary_{summary['year']}_{summary['month']:02d}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
        return file_bytes, filename
