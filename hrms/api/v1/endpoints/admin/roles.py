import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_user, require_permission
from hrms.auth.permissions import (
    COMPONENTS,
    COMPONENT_ACCESS,
    HIERARCHY_LEVELS,
    ROLE_DISPLAY_NAMES,
    ROLE_PERMISSIONS,
    PermissionChecker,
)
from hrms.core.database import get_async_session
from hrms.core.exceptions import NotFoundError
from hrms.models.auth.user import User
from hrms.models.shared.enums import Role
from hrms.services.auth.user_service import UserService

router = APIRouter()
logger = logging.getLogger(__name__)

def _role_config(role: Role) -> dict:
    return {
        "role_id": role.value,
        "display_name": ROLE_DISPLAY_NAMES[role],
        "hierarchy_level": HIERARCHY_LEVELS[role],
        "component_access": COMPONENT_ACCESS[role],
        "feature_access": ROLE_PERMISSIONS[role],
        "is_system_role": True,
    }

# ============================================================================
# ADMIN ONLY
# ============================================================================

@router.get("/roles")
async def get_roles(
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("admin", "panel"))
):
    """Every system role with its hierarchy level and capability sets"""
    roles = sorted(Role, key=lambda r: HIERARCHY_LEVELS[r])
    return {
        "success": True,
        "roles": [_role_config(role) for role in roles],
    }

@router.get("/roles/{role_id}")
async def get_role(
    role_id: str,
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("admin", "panel"))
):
    try:
        role = Role(role_id.upper())
    except ValueError:
        raise NotFoundError("Role not found")
    return {"success": True, "role": _role_config(role)}

@router.get("/components")
async def get_components(
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("admin", "panel"))
):
    return {"success": True, "components": COMPONENTS}

@router.get("/stats")
async def get_admin_stats(
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
    _permission=Depends(require_permission("admin", "panel"))
):
    """Active users grouped by role"""
    stats = await UserService(session).get_stats_overview()
    return {
        "success": True,
        "total_users": stats["total_employees"],
        "users_by_role": stats["role_wise"],
        "total_roles": len(Role),
    }

# ============================================================================
# ANY AUTHENTICATED USER
# ============================================================================

@router.get("/valid-roles")
async def get_valid_roles(current_user: User = Depends(get_current_user)):
    return {"success": True, "roles": [role.value for role in Role]}

@router.get("/user-permissions/{role}")
async def get_user_permissions(
    role: str,
    current_user: User = Depends(get_current_user)
):
    """Capability set for a role, used by the client to shape navigation"""
    try:
        checker = PermissionChecker(role.upper())
    except ValueError:
        raise NotFoundError("Role not found")
    return {"success": True, **checker.get_capabilities()}
