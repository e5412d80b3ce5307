"""Authentication routes."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status

from laundry.core.rate_limit import limiter
from laundry.core.rbac import (
    ROLE_LEVELS,
    CurrentUser,
    TokenData,
    extract_token,
    get_accessible_features,
)
from laundry.core.security import (
    ACCESS_TOKEN_MAX_AGE,
    COOKIE_ACCESS_NAME,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    create_access_token,
    revoke_token,
    verify_password,
)
from laundry.db.session import DbSession
from laundry.models.user import User
from laundry.schemas.auth import (
    LoginRequest,
    LoginResponse,
    PermissionsResponse,
    SessionResponse,
    SuccessResponse,
)
from laundry.schemas.user import UserResponse

logger = logging.getLogger("auth")

router = APIRouter()


def _session_user(current_user: TokenData, db) -> UserResponse:
    """The caller as a user record; the mock user has no database row."""
    user = db.get(User, current_user.user_id) if current_user.user_id else None
    if user is None:
        return UserResponse(
            id=current_user.user_id,
            username=current_user.username,
            name=current_user.name,
            role=current_user.role,
            is_active=True,
        )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
@limiter.limit("5/minute")
def login(request: Request, response: Response, login_request: LoginRequest, db: DbSession):
    """Authenticate a user, set the session cookie and return the token."""
    client_ip = request.client.host if request.client else "unknown"
    user = db.query(User).filter(User.username == login_request.username).first()

    if not user or not verify_password(login_request.password, user.password_hash):
        logger.warning(f"Failed login attempt for username: {login_request.username} from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    if not user.is_active:
        logger.warning(f"Login attempt for inactive user: {user.username} (ID: {user.id}) from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    logger.info(f"Successful login: {user.username} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
    token = create_access_token(
        data={"sub": str(user.id), "username": user.username, "role": user.role.value}
    )
    response.set_cookie(
        key=COOKIE_ACCESS_NAME,
        value=token,
        max_age=ACCESS_TOKEN_MAX_AGE,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
    )
    return LoginResponse(user=UserResponse.model_validate(user), access_token=token)


@router.post("/logout", response_model=SuccessResponse)
@limiter.limit("30/minute")
def logout(request: Request, response: Response):
    """Revoke the current token (if any) and clear the session cookie."""
    token = extract_token(request)
    if token and revoke_token(token):
        logger.info("Session token revoked")
    response.delete_cookie(COOKIE_ACCESS_NAME, samesite=COOKIE_SAMESITE, secure=COOKIE_SECURE)
    return SuccessResponse(success=True)


@router.get("/session", response_model=SessionResponse)
@limiter.limit("60/minute")
def get_session(request: Request, current_user: CurrentUser, db: DbSession):
    """Return the user behind the current session."""
    return SessionResponse(user=_session_user(current_user, db))


@router.get("/permissions", response_model=PermissionsResponse)
@limiter.limit("60/minute")
def get_permissions(request: Request, current_user: CurrentUser):
    """Role level and feature names available to the caller."""
    return PermissionsResponse(
        role=current_user.role.value,
        level=ROLE_LEVELS[current_user.role],
        features=get_accessible_features(current_user.role),
    )
