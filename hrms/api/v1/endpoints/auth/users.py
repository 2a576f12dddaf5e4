from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.core.database import get_async_session
from hrms.models.auth.user import User
from hrms.models.shared.enums import Role
from hrms.schemas.auth.user import UserCreate, UserEnvelope, UserResponse, UserStatsResponse, UserSummaryListResponse, UserUpdate
from hrms.schemas.common.pagination import MessageResponse, PaginatedResponse
from hrms.services.auth.user_service import UserService
from hrms.utils.file_handler import FileUploadService

router = APIRouter()

@router.get("/", response_model=PaginatedResponse[UserResponse])
async def get_users(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    role: Optional[Role] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("users", "manage"))
):
    """Get users with filtering and pagination"""
    user_service = UserService(session)
    return await user_service.get_users(
        page_index=page_index,
        page_size=page_size,
        role=role,
        is_active=is_active,
        search=search
    )

@router.get("/stats/overview", response_model=UserStatsResponse)
async def get_user_stats(
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("users", "manage"))
):
    user_service = UserService(session)
    return await user_service.get_stats_overview()

@router.get("/peer-rating/employees", response_model=UserSummaryListResponse)
async def get_peer_rating_employees(
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """Active colleagues the current user can rate"""
    user_service = UserService(session)
    users = await user_service.get_peer_rating_candidates(current_user)
    return {"count": len(users), "users": users}

@router.post("/", response_model=UserEnvelope, status_code=201)
async def create_user(
    user_data: UserCreate,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("users", "manage"))
):
    user_service = UserService(session)
    user = await user_service.create_user(user_data, current_user.id)
    return {"message": "User created successfully", "user": user}

@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    user_service = UserService(session)
    return {"user": await user_service.get_user_or_404(user_id)}

@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("users", "manage"))
):
    user_service = UserService(session)
    user = await user_service.update_user(user_id, user_data, current_user.id)
    return {"message": "User updated successfully", "user": user}

@router.delete("/{user_id}", response_model=MessageResponse)
async def deactivate_user(
    user_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("users", "manage"))
):
    """Deactivate a user; records are kept"""
    user_service = UserService(session)
    await user_service.deactivate_user(user_id, current_user.id)
    return {"message": "User deactivated successfully"}

@router.post("/{user_id}/upload-photo", response_model=UserEnvelope)
async def upload_profile_photo(
    user_id: int,
    photo: UploadFile = File(...),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    user_service = UserService(session)
    user_service.ensure_can_edit_photo(current_user, user_id)
    await user_service.get_user_or_404(user_id)

    file_service = FileUploadService()
    photo_path = await file_service.save_profile_photo(photo, user_id)
    user = await user_service.set_profile_photo(current_user, user_id, photo_path)
    return {"message": "Profile photo uploaded successfully", "user": user}
