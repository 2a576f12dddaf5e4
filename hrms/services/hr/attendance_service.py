import logging
from typing import Any, Optional, List, Dict
from datetime import date, datetime
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from hrms.auth.permissions import PermissionChecker, is_top_management
from hrms.core.config import settings
from hrms.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    ForbiddenError,
    NoCheckInFoundError,
    NotFoundError,
    ValidationError,
)
from hrms.core.logging_config import log_user_action
from hrms.models.auth.user import User
from hrms.models.hr.attendance import Attendance
from hrms.models.shared.enums import AttendanceStatus
from hrms.services.auth.user_service import UserService
from hrms.utils.date_utils import at_hour, hours_between, local_now, month_bounds, resolve_month_year

logger = logging.getLogger(__name__)

AUTO_CHECKOUT_IP = "auto-system"
MANUAL_MARK_IP = "manual"

def append_remark(existing: Optional[str], remark: Optional[str]) -> Optional[str]:
    if not remark:
        return existing
    return f"{existing} | {remark}" if existing else remark

def format_hour(hour: int) -> str:
    """20 -> '8 PM'"""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"

def status_after_checkout(record: Attendance) -> AttendanceStatus:
    """Short days become half-days; otherwise a late arrival stays late"""
    if (record.working_hours or 0) < settings.HALF_DAY_THRESHOLD_HOURS:
        return AttendanceStatus.HALF_DAY
    if record.is_late or record.status == AttendanceStatus.LATE:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT

def summarize_records(records: List[Attendance]) -> Dict[str, Any]:
    return {
        "present": sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
        "late": sum(1 for r in records if r.status == AttendanceStatus.LATE),
        "absent": sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
        "half_day": sum(1 for r in records if r.status == AttendanceStatus.HALF_DAY),
        "on_leave": sum(1 for r in records if r.status == AttendanceStatus.ON_LEAVE),
        "total_working_hours": round(sum(r.working_hours or 0 for r in records), 2),
    }

class AttendanceService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_service = UserService(session)

    async def get_record(self, user_id: int, attendance_date: date) -> Optional[Attendance]:
        result = await self.session.execute(
            select(Attendance).where(
                Attendance.user_id == user_id,
                Attendance.attendance_date == attendance_date
            )
        )
        return result.scalar_one_or_none()

    # ---------- Check-in / Check-out ----------
    async def check_in(self, user: User, ip_address: Optional[str] = None, now: Optional[datetime] = None) -> Attendance:
        """Open today's record; late when at or after the cutoff hour"""
        now = now or local_now()
        today = now.date()
        user_id = user.id
        try:
            record = await self.get_record(user_id, today)
            if record and record.check_in_time:
                raise AlreadyCheckedInError()
            if record and record.status == AttendanceStatus.ON_LEAVE:
                raise ValidationError("You are on approved leave today")

            is_late = now.hour >= settings.LATE_CUTOFF_HOUR
            if record is None:
                record = Attendance(user_id=user_id, attendance_date=today)
                self.session.add(record)

            record.check_in_time = now
            record.check_in_ip = ip_address
            record.is_late = is_late
            record.status = AttendanceStatus.LATE if is_late else AttendanceStatus.PRESENT

            await self.session.commit()
            await self.session.refresh(record)

            logger.info(f"Checked in: User {user_id} at {now:%H:%M} - Status: {record.status.value}")
            return record

        except HTTPException:
            raise
        except IntegrityError:
            # A concurrent check-in inserted today's row first
            await self.session.rollback()
            logger.warning(f"Duplicate check-in rejected for user {user_id} on {today}")
            raise AlreadyCheckedInError()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error checking in user {user_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error checking in")

    async def check_out(self, user: User, ip_address: Optional[str] = None, now: Optional[datetime] = None) -> Attendance:
        """Close today's record and derive working hours"""
        now = now or local_now()
        user_id = user.id
        try:
            record = await self.get_record(user_id, now.date())
            if not record or not record.check_in_time:
                raise NoCheckInFoundError()
            if record.check_out_time:
                raise AlreadyCheckedOutError()

            record.check_out_time = now
            record.check_out_ip = ip_address
            record.working_hours = hours_between(record.check_in_time, now)
            if record.working_hours < settings.HALF_DAY_THRESHOLD_HOURS:
                record.status = AttendanceStatus.HALF_DAY

            await self.session.commit()
            await self.session.refresh(record)

            logger.info(
                f"Checked out: User {user_id} at {now:%H:%M} - "
                f"Hours: {record.working_hours}, Status: {record.status.value}"
            )
            return record

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error checking out user {user_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error checking out")

    # ---------- Manual marks ----------
    async def mark_status(
        self,
        actor: User,
        target_user_id: int,
        new_status: AttendanceStatus,
        attendance_date: Optional[date] = None,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Attendance:
        """
        Set a day's status directly on behalf of an employee.

        Only admin/CEO or the employee's reporting manager may mark. Marking
        present fills in a missing check-in; marking absent or half-day closes
        the day with a check-out and recomputes hours when a check-in exists.
        Casual-leave consumption for half-days is derived from the ledger, so
        no balance is touched here.
        """
        now = now or local_now()
        actor_id = actor.id
        try:
            target = await self.user_service.get_user(target_user_id)
            if not target:
                raise NotFoundError("User not found")
            if not is_top_management(actor.role) and target.reporting_to_id != actor_id:
                raise ForbiddenError("Access denied. Only the reporting manager or admin/CEO can mark attendance")

            day = attendance_date or now.date()
            if day > now.date():
                raise ValidationError("Cannot mark attendance for a future date")

            record = await self.get_record(target_user_id, day)
            previous_status = record.status if record else None
            if record is None:
                record = Attendance(user_id=target_user_id, attendance_date=day)
                self.session.add(record)

            is_today = day == now.date()
            record.status = new_status

            if new_status == AttendanceStatus.PRESENT:
                if not record.check_in_time:
                    record.check_in_time = now if is_today else at_hour(day, settings.OFFICE_START_HOUR)
                    record.check_in_ip = MANUAL_MARK_IP
                record.is_late = False
            else:
                if not record.check_out_time:
                    record.check_out_time = now if is_today else at_hour(day, settings.AUTO_CHECKOUT_HOUR)
                    record.check_out_ip = MANUAL_MARK_IP
                if record.check_in_time:
                    record.working_hours = hours_between(record.check_in_time, record.check_out_time)

            record.remarks = append_remark(
                record.remarks,
                remarks or f"Marked {new_status.value} by {actor.full_name}",
            )

            await self.session.commit()
            await self.session.refresh(record)

            if previous_status != new_status and AttendanceStatus.HALF_DAY in (previous_status, new_status):
                logger.info(
                    f"Half-day transition for user {target_user_id} on {day}: "
                    f"{previous_status.value if previous_status else 'none'} -> {new_status.value}"
                )
            logger.info(f"Attendance marked: User {target_user_id} on {day} as {new_status.value} by {actor_id}")
            log_user_action(actor_id, f"mark_{new_status.value}", "attendance", record.id)
            return record

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error marking attendance for user {target_user_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error marking attendance")

    # ---------- Auto-checkout sweep ----------
    async def auto_checkout(self, sweep_date: Optional[date] = None) -> Dict[str, Any]:
        """Force-close every open check-in for the day at the configured hour"""
        day = sweep_date or local_now().date()
        checkout_at = at_hour(day, settings.AUTO_CHECKOUT_HOUR)
        remark = f"Auto checkout at {format_hour(settings.AUTO_CHECKOUT_HOUR)}"
        try:
            logger.info(f"Running auto checkout for {day}")
            result = await self.session.execute(
                select(Attendance).where(
                    Attendance.attendance_date == day,
                    Attendance.check_in_time.isnot(None),
                    Attendance.check_out_time.is_(None)
                )
            )
            records = result.scalars().all()

            if not records:
                logger.info(f"No pending checkouts for {day}")
                return {"success": True, "message": "No pending checkouts", "count": 0}

            for record in records:
                record.check_out_time = checkout_at
                record.check_out_ip = AUTO_CHECKOUT_IP
                record.working_hours = hours_between(record.check_in_time, checkout_at)
                record.status = status_after_checkout(record)
                record.remarks = append_remark(record.remarks, remark)
                logger.info(
                    f"Auto checkout: User {record.user_id} - "
                    f"Hours: {record.working_hours}, Status: {record.status.value}"
                )

            await self.session.commit()

            result = {
                "success": True,
                "message": f"Auto checkout completed for {len(records)} records",
                "count": len(records),
            }
            logger.info(f"Auto checkout complete: {result}")
            return result

        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error during auto checkout for {day}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Auto checkout failed")

    # ---------- Queries ----------
    async def get_records_for_month(self, user_id: int, month: int, year: int) -> List[Attendance]:
        start, end = month_bounds(month, year)
        result = await self.session.execute(
            select(Attendance)
            .where(
                Attendance.user_id == user_id,
                Attendance.attendance_date.between(start, end)
            )
            .order_by(Attendance.attendance_date.desc())
        )
        return list(result.scalars().all())

    async def get_my_attendance(self, user_id: int, month: Optional[int] = None, year: Optional[int] = None) -> Dict[str, Any]:
        month, year = resolve_month_year(month, year)
        records = await self.get_records_for_month(user_id, month, year)
        return {
            "month": month,
            "year": year,
            "attendance": records,
            "stats": summarize_records(records),
        }

    async def get_today(self, user_id: int, today: Optional[date] = None) -> Optional[Attendance]:
        return await self.get_record(user_id, today or local_now().date())

    async def get_user_attendance(
        self,
        actor: User,
        user_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> Dict[str, Any]:
        """Month view for one employee: self, reporting manager or attendance readers"""
        target = await self.user_service.get_user(user_id)
        if not target:
            raise NotFoundError("User not found")
        if (
            actor.id != user_id
            and target.reporting_to_id != actor.id
            and PermissionChecker(actor.role).cannot("attendance", "read_all")
        ):
            raise ForbiddenError("Access denied")
        return await self.get_my_attendance(user_id, month, year)

    async def get_daily_attendance(self, attendance_date: Optional[date] = None) -> Dict[str, Any]:
        """All records for one day plus the active users with no record at all"""
        day = attendance_date or local_now().date()
        result = await self.session.execute(
            select(Attendance)
            .options(selectinload(Attendance.user))
            .where(Attendance.attendance_date == day)
            .order_by(Attendance.check_in_time)
        )
        records = list(result.scalars().all())

        active_users = await self.user_service.get_active_users()
        recorded_ids = {r.user_id for r in records}
        absent_users = [u for u in active_users if u.id not in recorded_ids]

        return {
            "attendance_date": day,
            "attendance": records,
            "absent_users": absent_users,
            "stats": {
                "total": len(active_users),
                "present": sum(1 for r in records if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)),
                "absent": len(absent_users),
                "late": sum(1 for r in records if r.is_late),
                "on_leave": sum(1 for r in records if r.status == AttendanceStatus.ON_LEAVE),
            },
        }
