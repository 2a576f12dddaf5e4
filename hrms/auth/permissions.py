# hrms/auth/permissions.py
# Role catalogue plus the capability tables derived from it

from typing import List, Dict, Optional, Iterable, Union
from fastapi import HTTPException, status
import logging

from hrms.models.shared.enums import Role

logger = logging.getLogger(__name__)


# Lower level means more authority
HIERARCHY_LEVELS: Dict[Role, int] = {
    Role.ADMIN: 0,
    Role.CEO: 1,
    Role.INCUBATION_MANAGER: 2,
    Role.ACCOUNTANT: 2,
    Role.OFFICER_IN_CHARGE: 2,
    Role.FACULTY_IN_CHARGE: 2,
    Role.EMPLOYEE: 3,
}

ROLE_DISPLAY_NAMES: Dict[Role, str] = {
    Role.ADMIN: "Administrator",
    Role.CEO: "Chief Executive Officer",
    Role.INCUBATION_MANAGER: "Incubation Manager",
    Role.ACCOUNTANT: "Accountant",
    Role.OFFICER_IN_CHARGE: "Officer In-Charge",
    Role.FACULTY_IN_CHARGE: "Faculty In-Charge",
    Role.EMPLOYEE: "Employee",
}

ROLE_GROUPS: Dict[str, List[Role]] = {
    "ALL": list(Role),
    "MANAGERS": [role for role in Role if role != Role.EMPLOYEE],
    "TOP_MANAGEMENT": [Role.ADMIN, Role.CEO],
    "MIDDLE_MANAGEMENT": [
        Role.INCUBATION_MANAGER,
        Role.ACCOUNTANT,
        Role.OFFICER_IN_CHARGE,
        Role.FACULTY_IN_CHARGE,
    ],
    "FINANCE": [Role.ADMIN, Role.CEO, Role.ACCOUNTANT],
    "FACULTY": [Role.FACULTY_IN_CHARGE, Role.OFFICER_IN_CHARGE],
    "STAFF": [Role.INCUBATION_MANAGER, Role.ACCOUNTANT, Role.EMPLOYEE],
}

# Roles excluded from the remuneration roster and the dashboard headcount
NON_PAYROLL_ROLES = [Role.FACULTY_IN_CHARGE, Role.OFFICER_IN_CHARGE]
HEADCOUNT_EXCLUDED_ROLES = [Role.FACULTY_IN_CHARGE, Role.ADMIN, Role.OFFICER_IN_CHARGE]

_MANAGER_READS = [
    "attendance:read_all",
    "leave:read_all",
    "dashboard:management",
]

# Server-enforced capabilities per role, as "resource:action"
ROLE_PERMISSIONS: Dict[Role, List[str]] = {
    Role.ADMIN: ["system:admin"],
    Role.CEO: _MANAGER_READS + [
        "users:manage",
        "attendance:sweep",
        "leave:review_any",
        "holiday:manage",
        "remuneration:view",
        "peer_rating:summary",
    ],
    Role.INCUBATION_MANAGER: list(_MANAGER_READS),
    Role.ACCOUNTANT: list(_MANAGER_READS),
    Role.OFFICER_IN_CHARGE: list(_MANAGER_READS),
    Role.FACULTY_IN_CHARGE: _MANAGER_READS + [
        "remuneration:view",
        "peer_rating:summary",
    ],
    Role.EMPLOYEE: [],
}

COMPONENTS: List[Dict[str, str]] = [
    {"id": "dashboard", "name": "Dashboard"},
    {"id": "employees", "name": "Employees"},
    {"id": "attendance", "name": "Attendance"},
    {"id": "leave", "name": "Leave Management"},
    {"id": "salary", "name": "Salary"},
    {"id": "peer-rating", "name": "Peer Rating"},
    {"id": "variable-remuneration", "name": "Variable Remuneration"},
    {"id": "remuneration", "name": "Remuneration"},
    {"id": "calendar", "name": "Calendar"},
    {"id": "efiling", "name": "E-Filing"},
    {"id": "settings", "name": "Settings"},
    {"id": "profile", "name": "Profile"},
    {"id": "admin", "name": "Admin Panel"},
]

_ALL_COMPONENTS = [c["id"] for c in COMPONENTS]
_MANAGER_COMPONENTS = [c for c in _ALL_COMPONENTS if c not in ("admin", "salary", "variable-remuneration")]

# UI hints only; the server never trusts these for enforcement
COMPONENT_ACCESS: Dict[Role, List[str]] = {
    Role.ADMIN: list(_ALL_COMPONENTS),
    Role.CEO: list(_MANAGER_COMPONENTS),
    Role.INCUBATION_MANAGER: list(_MANAGER_COMPONENTS),
    Role.OFFICER_IN_CHARGE: list(_MANAGER_COMPONENTS),
    Role.ACCOUNTANT: [
        "dashboard", "employees", "attendance", "leave", "salary",
        "remuneration", "efiling", "settings", "profile",
    ],
    Role.FACULTY_IN_CHARGE: [
        "dashboard", "employees", "attendance", "leave", "variable-remuneration",
        "remuneration", "calendar", "efiling", "settings", "profile",
    ],
    Role.EMPLOYEE: ["dashboard", "employees", "salary", "profile"],
}


def to_role(role: Union[Role, str]) -> Role:
    if isinstance(role, Role):
        return role
    try:
        return Role(str(role).upper())
    except ValueError:
        raise ValueError(f"Invalid role: {role}")


def is_top_management(role: Union[Role, str]) -> bool:
    return to_role(role) in ROLE_GROUPS["TOP_MANAGEMENT"]


def is_in_group(role: Union[Role, str], group: str) -> bool:
    return to_role(role) in ROLE_GROUPS.get(group, [])


def get_hierarchy_level(role: Union[Role, str]) -> int:
    return HIERARCHY_LEVELS[to_role(role)]


def outranks(role: Union[Role, str], other: Union[Role, str]) -> bool:
    return get_hierarchy_level(role) < get_hierarchy_level(other)


class PermissionChecker:
    """
    Check a role's capabilities against the static permission table
    """

    def __init__(self, role: Union[Role, str], extra_permissions: Optional[Iterable[str]] = None):
        self.role = to_role(role)
        self.permissions = list(ROLE_PERMISSIONS.get(self.role, []))
        if extra_permissions:
            self.permissions.extend(extra_permissions)
        self._permission_map = {perm: True for perm in self.permissions}

        logger.debug(f"PermissionChecker initialized for {self.role.value} with {len(self.permissions)} permissions")

    def can(self, resource: str, action: str) -> bool:
        """
        Check if the role can perform action on resource

        Examples:
            can("holiday", "manage")
        """
        permission_key = f"{resource}:{action}"
        if permission_key in self._permission_map:
            return True

        # Admin permission on this resource
        if f"{resource}:admin" in self._permission_map:
            return True

        # System admin (full access)
        if "system:admin" in self._permission_map:
            return True

        logger.debug(f"Permission denied: {permission_key} for {self.role.value}")
        return False

    def cannot(self, resource: str, action: str) -> bool:
        return not self.can(resource, action)

    def require(
        self,
        resource: str,
        action: str,
        custom_message: Optional[str] = None
    ):
        """
        Require permission or raise HTTPException
        """
        if self.cannot(resource, action):
            message = custom_message or f"Role {self.role.value} is not authorized to {action} {resource}"
            logger.warning(f"Permission check failed: {message}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=message
            )

    def has_any(self, *permission_tuples) -> bool:
        """
        Check if the role has any of the given permissions (OR logic)
        """
        for resource, action in permission_tuples:
            if self.can(resource, action):
                return True
        return False

    def has_all(self, *permission_tuples) -> bool:
        """
        Check if the role has all of the given permissions (AND logic)
        """
        for resource, action in permission_tuples:
            if self.cannot(resource, action):
                return False
        return True

    def get_all_permissions(self) -> List[str]:
        return list(self.permissions)

    def get_component_access(self) -> List[str]:
        return list(COMPONENT_ACCESS.get(self.role, []))

    def get_capabilities(self) -> Dict[str, object]:
        """Capability set handed to clients for feature visibility"""
        return {
            "role": self.role.value,
            "hierarchy_level": HIERARCHY_LEVELS[self.role],
            "permissions": self.get_all_permissions(),
            "components": self.get_component_access(),
            "is_management": self.can("dashboard", "management"),
        }


def get_permission_checker(role: Union[Role, str]) -> PermissionChecker:
    return PermissionChecker(role)


def parse_permission_name(permission_name: str) -> tuple:
    """
    Parse permission name into resource and action
    """
    parts = permission_name.split(":", 1)
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid permission format: {permission_name}. Expected 'resource:action'")
    return parts[0], parts[1]
