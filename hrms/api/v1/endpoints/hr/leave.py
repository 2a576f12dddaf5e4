from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.core.database import get_async_session
from hrms.models.auth.user import User
from hrms.models.shared.enums import LeaveStatus
from hrms.schemas.hr.leave_schema import (
    LeaveApply,
    LeaveBalanceResponse,
    LeaveDetailResponse,
    LeaveEnvelope,
    LeaveListResponse,
    LeaveReview,
    MyLeavesResponse,
)
from hrms.services.hr.leave_service import LeaveService

router = APIRouter()

@router.post("/apply", response_model=LeaveEnvelope, status_code=201)
async def apply_leave(
    data: LeaveApply,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = LeaveService(session)
    leave = await service.apply_leave(current_user, data)
    return {"message": "Leave application submitted successfully", "leave": leave}

@router.get("/my", response_model=MyLeavesResponse)
async def get_my_leaves(
    status: Optional[LeaveStatus] = Query(None),
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = LeaveService(session)
    return await service.get_my_leaves(current_user, status, year)

@router.get("/all", response_model=LeaveListResponse)
async def get_all_leaves(
    status: Optional[LeaveStatus] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("leave", "read_all"))
):
    service = LeaveService(session)
    leaves = await service.get_all_leaves(status)
    return {"count": len(leaves), "leaves": leaves}

@router.get("/pending", response_model=LeaveListResponse)
async def get_pending_leaves(
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Pending applications awaiting the current user's decision"""
    service = LeaveService(session)
    leaves = await service.get_pending_leaves(current_user)
    return {"count": len(leaves), "leaves": leaves}

@router.get("/balance", response_model=LeaveBalanceResponse)
async def get_leave_balance(
    year: Optional[int] = Query(None, ge=2000),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = LeaveService(session)
    return {"leave_balance": await service.get_leave_balance(current_user, year)}

@router.get("/{leave_id}", response_model=LeaveDetailResponse)
async def get_leave(
    leave_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = LeaveService(session)
    return {"leave": await service.get_leave(current_user, leave_id)}

@router.put("/{leave_id}/approve", response_model=LeaveEnvelope)
async def approve_leave(
    leave_id: int,
    data: Optional[LeaveReview] = None,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = LeaveService(session)
    leave = await service.approve_leave(current_user, leave_id, data.remarks if data else None)
    return {"message": "Leave approved successfully", "leave": leave}

@router.put("/{leave_id}/reject", response_model=LeaveEnvelope)
async def reject_leave(
    leave_id: int,
    data: Optional[LeaveReview] = None,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    service = LeaveService(session)
    leave = await service.reject_leave(current_user, leave_id, data.remarks if data else None)
    return {"message": "Leave rejected", "leave": leave}
