import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, get_permission_checker_dependency
from hrms.auth.permissions import PermissionChecker
from hrms.core.database import get_async_session
from hrms.core.request_context import get_request_context
from hrms.models.auth.user import User
from hrms.schemas.auth.login import ChangePasswordRequest, LoginRequest, LoginResponse, MeResponse
from hrms.schemas.auth.user import SelfProfileUpdate, UserEnvelope
from hrms.schemas.common.pagination import MessageResponse
from hrms.services.auth.auth_service import AuthService
from hrms.services.auth.user_service import UserService
from hrms.utils.rate_limiter import check_login_rate_limit

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    login_data: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
    _: None = Depends(check_login_rate_limit),
):
    """Authenticate with username or email and return a bearer token"""
    auth_service = AuthService(session)
    req_context = get_request_context(request)
    return await auth_service.login(
        login_data.username,
        login_data.password,
        ip_address=req_context["ip_address"],
    )

@router.get("/me", response_model=MeResponse)
async def read_users_me(
    current_user: User = Depends(get_current_user),
    checker: PermissionChecker = Depends(get_permission_checker_dependency),
):
    """Current user with the capability set the client renders from"""
    return {"user": current_user, "capabilities": checker.get_capabilities()}

@router.put("/profile", response_model=UserEnvelope)
async def update_my_profile(
    data: SelfProfileUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    user_service = UserService(session)
    user = await user_service.update_own_profile(current_user, data)
    return {"message": "Profile updated successfully", "user": user}

@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: ChangePasswordRequest,
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    user_service = UserService(session)
    await user_service.change_password(
        current_user,
        password_data.current_password,
        password_data.new_password,
    )
    return {"message": "Password changed successfully"}
