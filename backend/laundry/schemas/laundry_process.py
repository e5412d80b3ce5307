"""Laundry process schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LaundryProcessCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, description="Cycle length in minutes")
    temperature: Optional[int] = Field(default=None, ge=0, le=100)
    detergent_amount: Optional[float] = Field(default=None, ge=0)
    softener_amount: Optional[float] = Field(default=None, ge=0)
    disinfectant_amount: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True


class LaundryProcessUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[int] = Field(default=None, ge=0, le=100)
    detergent_amount: Optional[float] = Field(default=None, ge=0)
    softener_amount: Optional[float] = Field(default=None, ge=0)
    disinfectant_amount: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class LaundryProcessResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    duration: int
    temperature: Optional[int] = None
    detergent_amount: Optional[float] = None
    softener_amount: Optional[float] = None
    disinfectant_amount: Optional[float] = None
    is_active: bool

    model_config = {"from_attributes": True}
