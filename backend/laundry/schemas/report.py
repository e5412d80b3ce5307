"""Read-only report schemas."""

from typing import Optional

from pydantic import BaseModel


class DepartmentWorkloadRow(BaseModel):
    department_id: int
    department_name: str
    total_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    completed_tasks: int
    delayed_tasks: int
    total_weight_kg: float


class MonthlyCostRow(BaseModel):
    month: str
    department_id: int
    department_name: str
    total_cost: float
    total_weight: float
    cost_per_kg: float


class InventoryStatusRow(BaseModel):
    id: int
    name: str
    category: str
    quantity: float
    minimum_level: float
    unit: str
    stock_status: str


class EquipmentStatusRow(BaseModel):
    id: int
    name: str
    type: str
    status: str
    last_maintenance: Optional[str] = None
    next_maintenance: Optional[str] = None
    maintenance_status: str
