import pytest
from datetime import date, datetime
from sqlalchemy import select

from hrms.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    ForbiddenError,
    NoCheckInFoundError,
    ValidationError,
)
from hrms.models.auth.user import User
from hrms.models.hr.attendance import Attendance
from hrms.models.shared.enums import AttendanceStatus, Role
from hrms.services.hr.attendance_service import AUTO_CHECKOUT_IP, AttendanceService, format_hour

DAY = date(2025, 3, 3)

def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)

class TestCheckIn:
    """Daily check-in and check-out"""

    async def test_check_in_before_cutoff_is_present(self, session, make_user):
        user = await make_user()
        record = await AttendanceService(session).check_in(user, "10.0.0.1", now=at(9, 30))

        assert record.status == AttendanceStatus.PRESENT
        assert record.is_late is False
        assert record.check_in_ip == "10.0.0.1"
        assert record.attendance_date == DAY

    async def test_check_in_at_cutoff_is_late(self, session, make_user):
        user = await make_user()
        record = await AttendanceService(session).check_in(user, now=at(11, 0))

        assert record.status == AttendanceStatus.LATE
        assert record.is_late is True

    async def test_second_check_in_same_day_is_rejected(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(9, 0))

        with pytest.raises(AlreadyCheckedInError) as exc:
            await service.check_in(user, now=at(10, 0))
        assert exc.value.detail == "Already checked in today"

    async def test_check_out_without_check_in(self, session, make_user):
        user = await make_user()
        with pytest.raises(NoCheckInFoundError):
            await AttendanceService(session).check_out(user, now=at(18, 0))

    async def test_short_day_becomes_half_day(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(9, 0))
        record = await service.check_out(user, now=at(12, 0))

        assert record.working_hours == 3.0
        assert record.status == AttendanceStatus.HALF_DAY

    async def test_full_day_keeps_late_status(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(11, 15))
        record = await service.check_out(user, now=at(19, 45))

        assert record.working_hours == 8.5
        assert record.status == AttendanceStatus.LATE

    async def test_second_check_out_is_rejected(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(9, 0))
        await service.check_out(user, now=at(18, 0))

        with pytest.raises(AlreadyCheckedOutError):
            await service.check_out(user, now=at(18, 30))

    async def test_check_in_on_approved_leave_day_is_rejected(self, session, make_user):
        user = await make_user()
        session.add(Attendance(
            user_id=user.id,
            attendance_date=DAY,
            status=AttendanceStatus.ON_LEAVE,
            remarks="Casual Leave - Wedding",
        ))
        await session.commit()
        service = AttendanceService(session)

        with pytest.raises(ValidationError) as exc:
            await service.check_in(user, now=at(9, 0))
        assert exc.value.detail == "You are on approved leave today"

        record = await service.get_record(user.id, DAY)
        assert record.status == AttendanceStatus.ON_LEAVE
        assert record.check_in_time is None

class TestAutoCheckout:
    """End-of-day sweep"""

    async def test_closes_only_open_records(self, session, make_user):
        early, late, done = await make_user(), await make_user(), await make_user()
        service = AttendanceService(session)
        await service.check_in(early, now=at(9, 0))
        await service.check_in(late, now=at(18, 30))
        await service.check_in(done, now=at(9, 0))
        await service.check_out(done, now=at(17, 0))

        result = await service.auto_checkout(DAY)

        assert result["success"] is True
        assert result["count"] == 2

        early_record = await service.get_record(early.id, DAY)
        assert early_record.check_out_time == at(20, 0)
        assert early_record.check_out_ip == AUTO_CHECKOUT_IP
        assert early_record.working_hours == 11.0
        assert early_record.status == AttendanceStatus.PRESENT
        assert early_record.remarks == f"Auto checkout at {format_hour(20)}"

        late_record = await service.get_record(late.id, DAY)
        assert late_record.working_hours == 1.5
        assert late_record.status == AttendanceStatus.HALF_DAY

        done_record = await service.get_record(done.id, DAY)
        assert done_record.check_out_time == at(17, 0)

    async def test_long_late_day_stays_late(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(11, 30))

        await service.auto_checkout(DAY)

        record = await service.get_record(user.id, DAY)
        assert record.working_hours == 8.5
        assert record.is_late is True
        assert record.status == AttendanceStatus.LATE

    async def test_second_run_is_a_no_op(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(9, 0))
        await service.auto_checkout(DAY)

        result = await service.auto_checkout(DAY)
        assert result == {"success": True, "message": "No pending checkouts", "count": 0}

    def test_format_hour(self):
        assert format_hour(20) == "8 PM"
        assert format_hour(9) == "9 AM"
        assert format_hour(0) == "12 AM"
        assert format_hour(12) == "12 PM"

class TestMarkStatus:
    """Manual marking by managers"""

    async def test_unrelated_employee_cannot_mark(self, session, make_user):
        target = await make_user()
        outsider = await make_user()

        with pytest.raises(ForbiddenError):
            await AttendanceService(session).mark_status(
                outsider, target.id, AttendanceStatus.ABSENT, now=at(12, 0)
            )

    async def test_reporting_manager_marks_absent(self, session, make_user):
        manager = await make_user(role=Role.INCUBATION_MANAGER)
        target = await make_user(reporting_to_id=manager.id)

        record = await AttendanceService(session).mark_status(
            manager, target.id, AttendanceStatus.ABSENT, attendance_date=date(2025, 3, 1), now=at(12, 0)
        )

        assert record.status == AttendanceStatus.ABSENT
        assert record.check_out_time == datetime(2025, 3, 1, 20, 0)
        assert record.remarks == f"Marked absent by {manager.full_name}"

    async def test_ceo_marks_past_day_present(self, session, make_user):
        ceo = await make_user(role=Role.CEO)
        target = await make_user()

        record = await AttendanceService(session).mark_status(
            ceo, target.id, AttendanceStatus.PRESENT, attendance_date=date(2025, 3, 1),
            remarks="Forgot to check in", now=at(12, 0)
        )

        assert record.status == AttendanceStatus.PRESENT
        assert record.check_in_time == datetime(2025, 3, 1, 9, 0)
        assert record.is_late is False
        assert record.remarks == "Forgot to check in"

    async def test_half_day_mark_computes_hours_from_existing_check_in(self, session, make_user):
        ceo = await make_user(role=Role.CEO)
        target = await make_user()
        service = AttendanceService(session)
        await service.check_in(target, now=at(9, 0))

        record = await service.mark_status(ceo, target.id, AttendanceStatus.HALF_DAY, now=at(13, 0))

        assert record.status == AttendanceStatus.HALF_DAY
        assert record.check_out_time == at(13, 0)
        assert record.working_hours == 4.0

    async def test_future_date_is_rejected(self, session, make_user):
        ceo = await make_user(role=Role.CEO)
        target = await make_user()

        with pytest.raises(ValidationError):
            await AttendanceService(session).mark_status(
                ceo, target.id, AttendanceStatus.ABSENT, attendance_date=date(2025, 3, 4), now=at(12, 0)
            )

    async def test_marking_does_not_touch_entitlement(self, session, make_user):
        ceo = await make_user(role=Role.CEO)
        target = await make_user(casual_leave=12)

        await AttendanceService(session).mark_status(ceo, target.id, AttendanceStatus.HALF_DAY, now=at(13, 0))

        rows = (await session.execute(select(Attendance).where(Attendance.user_id == target.id))).scalars().all()
        assert len(rows) == 1
        stored = await session.get(User, target.id)
        assert stored.casual_leave == 12

class TestQueries:
    async def test_month_view_summarizes_statuses(self, session, make_user):
        user = await make_user()
        service = AttendanceService(session)
        await service.check_in(user, now=at(9, 0, date(2025, 3, 3)))
        await service.check_out(user, now=at(18, 0, date(2025, 3, 3)))
        await service.check_in(user, now=at(11, 30, date(2025, 3, 4)))
        await service.check_out(user, now=at(13, 0, date(2025, 3, 4)))

        result = await service.get_my_attendance(user.id, 3, 2025)

        assert len(result["attendance"]) == 2
        assert result["stats"]["present"] == 1
        assert result["stats"]["half_day"] == 1
        assert result["stats"]["total_working_hours"] == 10.5

    async def test_other_users_month_needs_relationship_or_permission(self, session, make_user):
        target = await make_user()
        outsider = await make_user()
        accountant = await make_user(role=Role.ACCOUNTANT)
        service = AttendanceService(session)

        with pytest.raises(ForbiddenError):
            await service.get_user_attendance(outsider, target.id, 3, 2025)

        result = await service.get_user_attendance(accountant, target.id, 3, 2025)
        assert result["attendance"] == []
