"""Inventory item and alert schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StockStatus(str, Enum):
    """Derived stock level of an inventory item."""

    OK = "ok"
    LOW = "low"
    CRITICAL = "critical"


class InventoryItemCreate(BaseModel):
    """Inventory item creation schema."""

    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    unit: str = Field(..., min_length=1, max_length=50)
    quantity: float = Field(ge=0)
    minimum_level: float = Field(ge=0)
    unit_cost: float = Field(default=0, ge=0)
    location: Optional[str] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    """Inventory item update schema. ``last_restocked`` is server-maintained."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=50)
    quantity: Optional[float] = Field(default=None, ge=0)
    minimum_level: Optional[float] = Field(default=None, ge=0)
    unit_cost: Optional[float] = Field(default=None, ge=0)
    location: Optional[str] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None


class InventoryItemResponse(BaseModel):
    """Inventory item response schema."""

    id: int
    name: str
    category: str
    unit: str
    quantity: float
    minimum_level: float
    unit_cost: float
    location: Optional[str] = None
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None
    notes: Optional[str] = None
    stock_status: Optional[StockStatus] = None

    model_config = {"from_attributes": True}


class InventoryAlertResponse(BaseModel):
    """Low-stock alert response schema."""

    id: int
    inventory_item_id: int
    alert_type: str
    message: str
    created_at: datetime
    acknowledged: bool

    model_config = {"from_attributes": True}
