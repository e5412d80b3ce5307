"""User schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from laundry.core.rbac import UserRole


class UserBase(BaseModel):
    """Base user schema."""

    username: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.STAFF
    department: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class UserCreate(UserBase):
    """User creation schema."""

    password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "UserCreate":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class UserUpdate(BaseModel):
    """User update schema."""

    username: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[UserRole] = None
    department: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    is_active: Optional[bool] = None


class UserResponse(BaseModel):
    """User response schema. Never carries the password hash."""

    id: int
    username: str
    name: str
    role: UserRole
    department: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}
