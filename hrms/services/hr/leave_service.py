import logging
from typing import Any, Optional, List, Dict
from datetime import datetime
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from hrms.auth.permissions import PermissionChecker, is_top_management
from hrms.core.exceptions import (
    AlreadyProcessedError,
    ForbiddenError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from hrms.core.logging_config import log_user_action
from hrms.models.auth.user import User
from hrms.models.hr.attendance import Attendance
from hrms.models.hr.leave import Leave
from hrms.models.shared.enums import AttendanceStatus, LeaveStatus, LeaveType
from hrms.schemas.hr.leave_schema import LeaveApply
from hrms.services.auth.user_service import UserService
from hrms.utils.date_utils import iter_days, local_now, year_bounds

logger = logging.getLogger(__name__)

HALF_DAY_LEAVE_WEIGHT = 0.5

class LeaveService:
    """
    Leave application lifecycle and casual-leave accounting.

    The user's casual_leave column is the annual entitlement only. What is
    left is always derived: entitlement minus approved Casual Leave days and
    half a day for every half-day attendance record in the same calendar year.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_service = UserService(session)

    # ---------- Balance ----------
    async def get_leave_balance(self, user: User, year: Optional[int] = None) -> Dict[str, Any]:
        year = year or local_now().year
        start, end = year_bounds(year)

        approved_days = await self.session.scalar(
            select(func.coalesce(func.sum(Leave.number_of_days), 0)).where(
                Leave.user_id == user.id,
                Leave.status == LeaveStatus.APPROVED,
                Leave.leave_type == LeaveType.CASUAL_LEAVE,
                Leave.start_date.between(start, end)
            )
        )
        half_days = await self.session.scalar(
            select(func.count(Attendance.id)).where(
                Attendance.user_id == user.id,
                Attendance.status == AttendanceStatus.HALF_DAY,
                Attendance.attendance_date.between(start, end)
            )
        )

        entitlement = float(user.casual_leave or 0)
        approved_days = float(approved_days or 0)
        half_day_days = (half_days or 0) * HALF_DAY_LEAVE_WEIGHT
        availed = approved_days + half_day_days

        return {
            "year": year,
            "entitlement": entitlement,
            "approved_days": approved_days,
            "half_day_days": half_day_days,
            "availed": availed,
            "remaining": max(entitlement - availed, 0.0),
            "on_duty_leave": float(user.on_duty_leave or 0),
            "leave_without_pay": float(user.leave_without_pay or 0),
        }

    @staticmethod
    def _snapshot(balance: Dict[str, Any], casual_leave: Optional[float] = None) -> Dict[str, float]:
        return {
            "casual_leave": balance["remaining"] if casual_leave is None else casual_leave,
            "on_duty_leave": balance["on_duty_leave"],
            "leave_without_pay": balance["leave_without_pay"],
        }

    # ---------- Apply ----------
    async def apply_leave(self, user: User, data: LeaveApply) -> Leave:
        """Create a pending application; nothing is deducted until approval"""
        user_id = user.id
        try:
            if not data.reporting_to_id:
                raise ValidationError("Reporting to is required")
            if not data.person_in_charge or not data.person_in_charge.strip():
                raise ValidationError("Person in-charge in absence is required")
            if data.end_date < data.start_date:
                raise ValidationError("End date cannot be before start date")
            if data.reporting_to_id == user_id:
                raise ValidationError("You cannot approve your own leave")

            approver = await self.user_service.get_user(data.reporting_to_id)
            if not approver or not approver.is_active:
                raise ValidationError("Selected approver not found")

            number_of_days = data.number_of_days or float((data.end_date - data.start_date).days + 1)
            balance = await self.get_leave_balance(user, data.start_date.year)

            leave = Leave(
                user_id=user_id,
                leave_type=data.leave_type,
                start_date=data.start_date,
                end_date=data.end_date,
                number_of_days=number_of_days,
                reason=data.reason,
                contact_no=data.contact_no,
                person_in_charge=data.person_in_charge.strip(),
                reporting_to_id=approver.id,
                status=LeaveStatus.PENDING,
                leave_balance_before=self._snapshot(balance),
                created_by=user_id,
            )
            self.session.add(leave)
            await self.session.commit()
            await self.session.refresh(leave)

            logger.info(
                f"Leave applied: User {user_id} - {data.leave_type.value} "
                f"{data.start_date} to {data.end_date} ({number_of_days} days), approver {approver.id}"
            )
            log_user_action(user_id, "apply", "leave", leave.id)
            return leave

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error applying leave for user {user_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error applying leave")

    # ---------- Review ----------
    async def _get_pending_for_review(self, actor: User, leave_id: int, verb: str) -> Leave:
        leave = await self.session.get(Leave, leave_id)
        if not leave or leave.is_deleted:
            raise NotFoundError("Leave application not found")
        if leave.status != LeaveStatus.PENDING:
            raise AlreadyProcessedError()
        if not is_top_management(actor.role) and leave.reporting_to_id != actor.id:
            raise ForbiddenError(f"Access denied. Only assigned approver can {verb} this leave.")
        return leave

    async def _mark_on_leave(self, leave: Leave) -> int:
        """Upsert an on-leave attendance row for every day of the leave"""
        remark = f"{leave.leave_type.value} - {leave.reason}"
        days = 0
        for day in iter_days(leave.start_date, leave.end_date):
            result = await self.session.execute(
                select(Attendance).where(
                    Attendance.user_id == leave.user_id,
                    Attendance.attendance_date == day
                )
            )
            record = result.scalar_one_or_none()
            if record is None:
                record = Attendance(user_id=leave.user_id, attendance_date=day)
                self.session.add(record)
            record.status = AttendanceStatus.ON_LEAVE
            record.remarks = remark
            days += 1
        return days

    async def approve_leave(self, actor: User, leave_id: int, remarks: Optional[str] = None, now: Optional[datetime] = None) -> Leave:
        """
        Approve a pending application.

        Casual Leave must fit within what is left of the year's entitlement;
        On Duty Leave and Leave Without Pay are at the approver's discretion.
        """
        actor_id = actor.id
        try:
            leave = await self._get_pending_for_review(actor, leave_id, "approve")

            applicant = await self.user_service.get_user(leave.user_id)
            if not applicant:
                raise NotFoundError("User not found")

            balance = await self.get_leave_balance(applicant, leave.start_date.year)
            if leave.leave_type == LeaveType.CASUAL_LEAVE:
                if leave.number_of_days > balance["remaining"]:
                    logger.info(
                        f"Leave {leave_id} rejected at approval: requested {leave.number_of_days}, "
                        f"remaining {balance['remaining']}"
                    )
                    raise InsufficientBalanceError()
                after = self._snapshot(balance, max(balance["remaining"] - leave.number_of_days, 0.0))
            else:
                after = self._snapshot(balance)

            leave.status = LeaveStatus.APPROVED
            leave.reviewed_by_id = actor_id
            leave.reviewed_on = now or local_now()
            leave.review_remarks = remarks
            leave.leave_balance_after = after
            leave.updated_by = actor_id

            days_marked = await self._mark_on_leave(leave)

            await self.session.commit()
            await self.session.refresh(leave)

            logger.info(f"Leave approved: {leave_id} by {actor_id}, {days_marked} days marked on-leave")
            log_user_action(actor_id, "approve", "leave", leave_id)
            return leave

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error approving leave {leave_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error approving leave")

    async def reject_leave(self, actor: User, leave_id: int, remarks: Optional[str] = None, now: Optional[datetime] = None) -> Leave:
        actor_id = actor.id
        try:
            leave = await self._get_pending_for_review(actor, leave_id, "reject")

            leave.status = LeaveStatus.REJECTED
            leave.reviewed_by_id = actor_id
            leave.reviewed_on = now or local_now()
            leave.review_remarks = remarks or "Leave request rejected"
            leave.updated_by = actor_id

            await self.session.commit()
            await self.session.refresh(leave)

            logger.info(f"Leave rejected: {leave_id} by {actor_id}")
            log_user_action(actor_id, "reject", "leave", leave_id)
            return leave

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error rejecting leave {leave_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error rejecting leave")

    # ---------- Queries ----------
    async def get_my_leaves(
        self,
        user: User,
        status_filter: Optional[LeaveStatus] = None,
        year: Optional[int] = None
    ) -> Dict[str, Any]:
        query = select(Leave).where(Leave.user_id == user.id, Leave.is_deleted == False)
        if status_filter:
            query = query.where(Leave.status == status_filter)
        if year:
            start, end = year_bounds(year)
            query = query.where(Leave.start_date.between(start, end))

        result = await self.session.execute(query.order_by(Leave.applied_on.desc(), Leave.id.desc()))
        leaves = list(result.scalars().all())
        return {
            "count": len(leaves),
            "leaves": leaves,
            "leave_balance": await self.get_leave_balance(user, year),
        }

    async def _list_with_users(self, *conditions) -> List[Leave]:
        result = await self.session.execute(
            select(Leave)
            .options(selectinload(Leave.user))
            .where(Leave.is_deleted == False, *conditions)
            .order_by(Leave.applied_on.desc(), Leave.id.desc())
        )
        return list(result.scalars().all())

    async def get_all_leaves(self, status_filter: Optional[LeaveStatus] = None) -> List[Leave]:
        conditions = [Leave.status == status_filter] if status_filter else []
        return await self._list_with_users(*conditions)

    async def get_pending_leaves(self, actor: User) -> List[Leave]:
        """Pending applications the actor may review"""
        conditions = [Leave.status == LeaveStatus.PENDING]
        if not is_top_management(actor.role):
            conditions.append(Leave.reporting_to_id == actor.id)
        return await self._list_with_users(*conditions)

    async def get_leave(self, actor: User, leave_id: int) -> Leave:
        result = await self.session.execute(
            select(Leave)
            .options(selectinload(Leave.user))
            .where(Leave.id == leave_id, Leave.is_deleted == False)
        )
        leave = result.scalar_one_or_none()
        if not leave:
            raise NotFoundError("Leave application not found")
        if (
            leave.user_id != actor.id
            and leave.reporting_to_id != actor.id
            and PermissionChecker(actor.role).cannot("leave", "read_all")
        ):
            raise ForbiddenError("Access denied")
        return leave

    async def count_pending(self) -> int:
        return await self.session.scalar(
            select(func.count(Leave.id)).where(Leave.status == LeaveStatus.PENDING, Leave.is_deleted == False)
        ) or 0

