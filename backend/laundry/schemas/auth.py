"""Authentication schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from laundry.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request body."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    """Successful login: the user plus the bearer token also set as a cookie."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    user: UserResponse


class PermissionsResponse(BaseModel):
    """Role and feature access of the current caller."""

    role: str
    level: int
    features: List[str]


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
