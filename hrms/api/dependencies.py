from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.auth.jwt_handler import decode_access_token
from hrms.models.auth.user import User
from hrms.services.auth.user_service import UserService
from hrms.auth.permissions import PermissionChecker
import logging

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_async_session)
) -> User:
    """Get current authenticated user"""
    if credentials is None:
        raise _unauthorized("Not authorized, no token")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Not authorized, token failed")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Not authorized, token failed")

    user_service = UserService(session)
    user = await user_service.get_user(user_id)

    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("Account is deactivated")

    # Role always comes from the stored user, never from the token
    request.state.current_user = user
    request.state.permission_checker = PermissionChecker(user.role)

    return user

async def get_permission_checker_dependency(
    request: Request,
    current_user: User = Depends(get_current_user)
) -> PermissionChecker:
    """
    Permission checker for the current user, built by get_current_user
    """
    checker = getattr(request.state, "permission_checker", None)
    return checker or PermissionChecker(current_user.role)

def require_permission(resource: str, action: str):
    """
    Dependency to require specific permission for an endpoint

    Examples:
        require_permission("holiday", "manage")      # holiday:manage
    """
    async def permission_dependency(
        checker: PermissionChecker = Depends(get_permission_checker_dependency)
    ):
        checker.require(resource, action)
        return True

    return permission_dependency
