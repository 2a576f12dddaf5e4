from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.core.database import get_async_session
from hrms.core.request_context import get_client_ip
from hrms.models.auth.user import User
from hrms.schemas.hr.attendance_schema import (
    AttendanceEnvelope,
    AttendanceListResponse,
    AutoCheckoutRequest,
    AutoCheckoutResponse,
    DailyAttendanceResponse,
    MarkStatusRequest,
)
from hrms.services.hr.attendance_service import AttendanceService

router = APIRouter()

@router.post("/check-in", response_model=AttendanceEnvelope)
async def check_in(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = AttendanceService(session)
    record = await service.check_in(current_user, ip_address=get_client_ip(request))
    message = "Checked in late" if record.is_late else "Checked in successfully"
    return {"message": message, "attendance": record}

@router.post("/check-out", response_model=AttendanceEnvelope)
async def check_out(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = AttendanceService(session)
    record = await service.check_out(current_user, ip_address=get_client_ip(request))
    return {"message": "Checked out successfully", "attendance": record}

@router.get("/my", response_model=AttendanceListResponse)
async def get_my_attendance(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Own attendance for a month, defaults to the current one"""
    service = AttendanceService(session)
    return await service.get_my_attendance(current_user.id, month, year)

@router.get("/today", response_model=AttendanceEnvelope)
async def get_today_attendance(
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = AttendanceService(session)
    record = await service.get_today(current_user.id)
    return {"attendance": record}

@router.get("/all", response_model=DailyAttendanceResponse)
async def get_daily_attendance(
    attendance_date: Optional[date] = Query(None, alias="date"),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("attendance", "read_all"))
):
    """Everyone's attendance for one day, with the users who have no record"""
    service = AttendanceService(session)
    return await service.get_daily_attendance(attendance_date)

@router.get("/user/{user_id}", response_model=AttendanceListResponse)
async def get_user_attendance(
    user_id: int,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = AttendanceService(session)
    return await service.get_user_attendance(current_user, user_id, month, year)

@router.post("/mark-status", response_model=AttendanceEnvelope)
async def mark_attendance_status(
    data: MarkStatusRequest,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Manually set present/absent/half-day for a reportee"""
    service = AttendanceService(session)
    record = await service.mark_status(
        current_user,
        data.user_id,
        data.status,
        attendance_date=data.attendance_date,
        remarks=data.remarks,
    )
    return {"message": f"Attendance marked as {record.status.value}", "attendance": record}

@router.post("/auto-checkout", response_model=AutoCheckoutResponse)
async def run_auto_checkout(
    data: Optional[AutoCheckoutRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("attendance", "sweep"))
):
    """Run the end-of-day sweep on demand"""
    service = AttendanceService(session)
    return await service.auto_checkout(data.sweep_date if data else None)
