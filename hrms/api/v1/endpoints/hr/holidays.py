from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.core.database import get_async_session
from hrms.models.auth.user import User
from hrms.schemas.common.pagination import MessageResponse
from hrms.schemas.hr.holiday_schema import HolidayCreate, HolidayEnvelope, HolidayListResponse, HolidayUpdate
from hrms.services.hr.holiday_service import HolidayService
from hrms.utils.date_utils import local_today

router = APIRouter()

@router.get("/", response_model=HolidayListResponse)
async def get_holidays(
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Holidays for a year, defaults to the current one"""
    year = year or local_today().year
    service = HolidayService(session)
    return {"year": year, "holidays": await service.get_holidays(year)}

@router.post("/", response_model=HolidayEnvelope, status_code=201)
async def create_holiday(
    holiday: HolidayCreate,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("holiday", "manage"))
):
    service = HolidayService(session)
    created = await service.create_holiday(holiday, current_user.id)
    return {"message": "Holiday added successfully", "holiday": created}

@router.put("/{holiday_id}", response_model=HolidayEnvelope)
async def update_holiday(
    holiday_id: int,
    holiday: HolidayUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("holiday", "manage"))
):
    service = HolidayService(session)
    updated = await service.update_holiday(holiday_id, holiday, current_user.id)
    return {"message": "Holiday updated successfully", "holiday": updated}

@router.delete("/date/{holiday_date}", response_model=MessageResponse)
async def delete_holiday_by_date(
    holiday_date: date,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("holiday", "manage"))
):
    service = HolidayService(session)
    await service.delete_holiday_by_date(holiday_date, current_user.id)
    return {"message": "Holiday deleted successfully"}

@router.delete("/{holiday_id}", response_model=MessageResponse)
async def delete_holiday(
    holiday_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("holiday", "manage"))
):
    service = HolidayService(session)
    await service.delete_holiday(holiday_id, current_user.id)
    return {"message": "Holiday deleted successfully"}
