"""Role-Based Access Control (RBAC) utilities."""

from enum import Enum
from typing import Annotated, Dict, List, Optional

from fastapi import Depends, HTTPException, Request, status

from laundry.core.security import COOKIE_ACCESS_NAME, decode_access_token
from laundry.db.session import DbSession


class UserRole(str, Enum):
    """User roles for RBAC."""

    ADMIN = "admin"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    BILLING = "billing"
    REPORTS = "reports"
    INVENTORY = "inventory"
    TECHNICIAN = "technician"
    DEPARTMENT = "department"
    STAFF = "staff"


# Higher number means more privileges
ROLE_LEVELS: Dict[UserRole, int] = {
    UserRole.ADMIN: 100,
    UserRole.MANAGER: 80,
    UserRole.SUPERVISOR: 70,
    UserRole.BILLING: 60,
    UserRole.REPORTS: 60,
    UserRole.INVENTORY: 50,
    UserRole.TECHNICIAN: 40,
    UserRole.DEPARTMENT: 30,
    UserRole.STAFF: 20,
}

ROLE_PERMISSIONS: Dict[UserRole, List[str]] = {
    UserRole.ADMIN: [
        "dashboard", "tasks", "inventory", "equipment", "departments",
        "processes", "users", "billing", "reports", "settings", "hms-integration",
    ],
    UserRole.MANAGER: [
        "dashboard", "tasks", "inventory", "equipment", "departments",
        "processes", "billing", "reports", "hms-integration",
    ],
    UserRole.SUPERVISOR: [
        "dashboard", "tasks", "inventory", "equipment", "departments", "processes",
    ],
    UserRole.STAFF: ["dashboard", "tasks"],
    UserRole.DEPARTMENT: ["dashboard", "tasks", "reports"],
    UserRole.INVENTORY: ["dashboard", "tasks", "inventory", "equipment"],
    UserRole.TECHNICIAN: ["dashboard", "tasks", "equipment"],
    UserRole.BILLING: ["dashboard", "tasks", "billing", "reports"],
    UserRole.REPORTS: ["dashboard", "tasks", "reports"],
}


def _as_role(role) -> Optional[UserRole]:
    try:
        return UserRole(role)
    except ValueError:
        return None


def has_permission(user_role, feature: str) -> bool:
    """Check if a role has access to a feature. Unknown roles have none."""
    role = _as_role(user_role)
    if role is None:
        return False
    return feature in ROLE_PERMISSIONS[role]


def has_minimum_role(user_role, minimum_role) -> bool:
    """Check if a role is at least as privileged as ``minimum_role``."""
    user_level = ROLE_LEVELS.get(_as_role(user_role), 0)
    required_level = ROLE_LEVELS.get(_as_role(minimum_role), 0)
    return user_level >= required_level


def get_accessible_features(user_role) -> List[str]:
    """Feature names a role can access."""
    role = _as_role(user_role)
    if role is None:
        return []
    return list(ROLE_PERMISSIONS[role])


class TokenData:
    """Authenticated caller.

    Attributes:
        user_id: The user's database ID (0 for the mock user).
        username: Login name.
        role: The user's role.
        name: Display name.
    """

    def __init__(self, user_id: int, username: str, role: UserRole, name: str = ""):
        self.user_id = user_id
        self.id = user_id
        self.username = username
        self.role = role
        self.name = name or username


def extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        if token:
            return token
    return request.cookies.get(COOKIE_ACCESS_NAME)


def _mock_user(request: Request) -> TokenData:
    role = _as_role(request.app.state.settings.mock_user_role) or UserRole.ADMIN
    return TokenData(user_id=0, username="mock", role=role, name="Mock User")


async def get_current_user(request: Request, db: DbSession) -> TokenData:
    """Get the current authenticated user.

    Checks in order:
    1. Authorization: Bearer <token> header
    2. access_token cookie (HttpOnly)

    In ``mock`` auth mode every request is the configured mock user.
    """
    if request.app.state.settings.auth_mode == "mock":
        return _mock_user(request)

    token = extract_token(request)
    payload = decode_access_token(token) if token else None
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    role = _as_role(payload.get("role"))
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid role in token",
        )

    from laundry.models.user import User

    try:
        user_id = int(payload["sub"])
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    # Verify user still exists and is active
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled",
        )

    return TokenData(user_id=user.id, username=user.username, role=user.role, name=user.name)


def require_role(minimum_role: UserRole):
    """Dependency to require a minimum role level."""

    async def role_checker(
        current_user: Annotated[TokenData, Depends(get_current_user)]
    ) -> TokenData:
        if not has_minimum_role(current_user.role, minimum_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role {minimum_role.value} or higher",
            )
        return current_user

    return role_checker


def require_feature(feature: str):
    """Dependency to require access to a named feature."""

    async def feature_checker(
        current_user: Annotated[TokenData, Depends(get_current_user)]
    ) -> TokenData:
        if not has_permission(current_user.role, feature):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access to '{feature}' is not permitted for role {current_user.role.value}",
            )
        return current_user

    return feature_checker


# Common role dependencies
RequireAdmin = Annotated[TokenData, Depends(require_role(UserRole.ADMIN))]
RequireReports = Annotated[TokenData, Depends(require_feature("reports"))]
CurrentUser = Annotated[TokenData, Depends(get_current_user)]
