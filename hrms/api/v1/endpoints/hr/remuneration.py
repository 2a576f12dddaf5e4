from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.core.database import get_async_session
from hrms.models.auth.user import User
from hrms.schemas.hr.remuneration_schema import AttendanceSummaryResponse
from hrms.services.hr.remuneration_service import RemunerationService

router = APIRouter()

@router.get("/attendance-summary", response_model=AttendanceSummaryResponse)
async def get_attendance_summary(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("remuneration", "view"))
):
    """Payable-day breakdown per employee for a closed month"""
    service = RemunerationService(session)
    return await service.get_attendance_summary(month, year)

@router.get("/attendance-summary/export")
async def export_attendance_summary(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("remuneration", "view"))
):
    service = RemunerationService(session)
    file_bytes, filename = await service.export_attendance_summary_excel(month, year)
    return StreamingResponse(
        file_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
