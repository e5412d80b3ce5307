"""Dashboard analytics schemas."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    pending_tasks: int
    completed_today: int
    inventory_status: int  # percent, 0-100
    monthly_costs: float


class DepartmentUsage(BaseModel):
    department_name: str
    usage: int


class TaskCompletionPoint(BaseModel):
    date: str
    count: int
