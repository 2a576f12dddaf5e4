from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.core.database import get_async_session
from hrms.core.exceptions import ValidationError
from hrms.models.auth.user import User
from hrms.schemas.common.pagination import MessageResponse
from hrms.schemas.hr.peer_rating_schema import PeerRatingListResponse, PeerRatingSubmit, PeerRatingSummaryResponse
from hrms.services.hr.peer_rating_service import PeerRatingService
from hrms.utils.date_utils import MONTH_NAMES, local_today

router = APIRouter()

def _resolve_period(month: Optional[str], year: Optional[int]):
    today = local_today()
    month = (month or MONTH_NAMES[today.month - 1]).strip().capitalize()
    if month not in MONTH_NAMES:
        raise ValidationError("Month must be a full month name, e.g. January")
    return month, year or today.year

@router.post("/", response_model=MessageResponse)
async def submit_ratings(
    data: PeerRatingSubmit,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = PeerRatingService(session)
    saved = await service.save_ratings(current_user, data.ratings, data.month, data.year)
    return {"message": f"{saved} ratings saved successfully"}

@router.get("/my-ratings", response_model=PeerRatingListResponse)
async def get_my_ratings(
    month: Optional[str] = Query(None),
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Ratings the current user has given for a month"""
    month, year = _resolve_period(month, year)
    service = PeerRatingService(session)
    return {"ratings": await service.get_my_ratings(current_user, month, year)}

@router.get("/summary", response_model=PeerRatingSummaryResponse)
async def get_rating_summary(
    month: Optional[str] = Query(None),
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("peer_rating", "summary"))
):
    month, year = _resolve_period(month, year)
    service = PeerRatingService(session)
    return {"month": month, "year": year, "summary": await service.get_rating_summary(month, year)}
