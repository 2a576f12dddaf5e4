from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user
from hrms.core.database import get_async_session
from hrms.models.auth.user import User
from hrms.schemas.dashboard.dashboard_schema import DashboardResponse
from hrms.services.dashboard.dashboard_service import DashboardService

router = APIRouter()

@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Headline numbers for everyone, the live board for management"""
    service = DashboardService(session)
    return await service.get_dashboard(current_user)
