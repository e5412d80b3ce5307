"""Equipment schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from laundry.models.equipment import EquipmentStatus


class MaintenanceStatus(str, Enum):
    """Derived maintenance state, computed at read time."""

    OK = "ok"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"


class EquipmentCreate(BaseModel):
    """Equipment creation schema. ``next_maintenance`` is always derived."""

    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    last_maintenance: Optional[datetime] = None
    time_remaining: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class EquipmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: Optional[EquipmentStatus] = None
    last_maintenance: Optional[datetime] = None
    time_remaining: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class EquipmentResponse(BaseModel):
    """Equipment response schema."""

    id: int
    name: str
    type: str
    status: EquipmentStatus
    last_maintenance: Optional[datetime] = None
    next_maintenance: Optional[datetime] = None
    time_remaining: Optional[int] = None
    notes: Optional[str] = None
    maintenance_status: Optional[MaintenanceStatus] = None

    model_config = {"from_attributes": True}
