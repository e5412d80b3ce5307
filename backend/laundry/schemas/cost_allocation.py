"""Cost allocation schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class CostAllocationCreate(BaseModel):
    """Cost allocation creation schema.

    ``cost_per_kg`` is accepted for compatibility but always recomputed from
    total cost and total weight.
    """

    department_id: int
    month: str = Field(..., pattern=MONTH_PATTERN, description="YYYY-MM")
    total_weight: float = Field(ge=0)
    total_cost: float = Field(ge=0)
    cost_per_kg: Optional[float] = None


class CostAllocationUpdate(BaseModel):
    department_id: Optional[int] = None
    month: Optional[str] = Field(default=None, pattern=MONTH_PATTERN)
    total_weight: Optional[float] = Field(default=None, ge=0)
    total_cost: Optional[float] = Field(default=None, ge=0)
    cost_per_kg: Optional[float] = None


class CostAllocationResponse(BaseModel):
    id: int
    department_id: int
    month: str
    total_weight: float
    total_cost: float
    cost_per_kg: float
    created_at: datetime

    model_config = {"from_attributes": True}
