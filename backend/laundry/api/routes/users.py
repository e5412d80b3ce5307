"""User management routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.errors import ConflictError, NotFoundError
from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.core.security import get_password_hash
from laundry.db.session import DbSession
from laundry.models.task import Task
from laundry.models.user import User
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.pagination import PaginatedResponse, paginate_query
from laundry.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user(db, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def _ensure_username_free(db, username: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise ConflictError(f"Username '{username}' is already taken")


@router.get("/", response_model=PaginatedResponse[UserResponse])
@limiter.limit("60/minute")
def list_users(
    request: Request,
    db: DbSession,
    current_user: RequireAdmin,
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """List user accounts."""
    users, total = paginate_query(db.query(User).order_by(User.username), offset, limit)
    return PaginatedResponse[UserResponse].create(items=users, total=total, offset=offset, limit=limit)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_user(request: Request, data: UserCreate, db: DbSession, current_user: RequireAdmin):
    """Create a user account."""
    _ensure_username_free(db, data.username)
    user = User(
        **data.model_dump(exclude={"password", "confirm_password"}),
        password_hash=get_password_hash(data.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.username} (ID: {user.id}, role: {user.role.value}) created by {current_user.username}")
    return user


@router.get("/{user_id}", response_model=UserResponse)
@limiter.limit("60/minute")
def get_user(request: Request, user_id: int, db: DbSession, current_user: CurrentUser):
    return _get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserResponse)
@limiter.limit("30/minute")
def update_user(request: Request, user_id: int, data: UserUpdate, db: DbSession, current_user: RequireAdmin):
    """Update a user; a new password is re-hashed."""
    user = _get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)

    password = changes.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)

    for field in ("username", "name", "role", "is_active"):
        if field in changes and changes[field] is None:
            del changes[field]
    if "username" in changes:
        _ensure_username_free(db, changes["username"], exclude_id=user.id)

    for field, value in changes.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    logger.info(f"User {user.username} (ID: {user.id}) updated by {current_user.username}")
    return user


@router.delete("/{user_id}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_user(request: Request, user_id: int, db: DbSession, current_user: RequireAdmin):
    user = _get_user(db, user_id)
    if db.query(Task.id).filter(Task.requested_by_id == user_id).first():
        raise ConflictError(f"User '{user.username}' has requested tasks; deactivate the account instead")
    db.delete(user)
    db.commit()
    logger.info(f"User {user.username} (ID: {user_id}) deleted by {current_user.username}")
    return SuccessResponse(success=True)
