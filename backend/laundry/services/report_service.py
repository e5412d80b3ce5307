"""Report Service - read-only operational reports."""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from laundry.db.base import as_utc
from laundry.models.cost_allocation import CostAllocation
from laundry.models.department import Department
from laundry.models.equipment import Equipment
from laundry.models.inventory import InventoryItem
from laundry.models.task import Task, TaskStatus
from laundry.services.equipment_service import maintenance_status
from laundry.services.inventory_service import stock_status


class ReportService:
    """Department workload, monthly costs, and inventory/equipment status."""

    def __init__(self, db: Session):
        self.db = db

    def department_workload(self) -> List[Dict]:
        """Task counts per status and total weight for every department."""
        counts = self.db.query(
            Task.department_id, Task.status, func.count(Task.id), func.coalesce(func.sum(Task.weight), 0)
        ).group_by(Task.department_id, Task.status).all()

        by_department: Dict[int, Dict] = {}
        for department_id, status, count, weight in counts:
            entry = by_department.setdefault(department_id, {"weight": 0.0})
            entry[TaskStatus(status)] = count
            entry["weight"] += float(weight or 0)

        rows = []
        for department in self.db.query(Department).order_by(Department.name).all():
            entry = by_department.get(department.id, {"weight": 0.0})
            status_counts = {s: entry.get(s, 0) for s in TaskStatus}
            rows.append({
                "department_id": department.id,
                "department_name": department.name,
                "total_tasks": sum(status_counts.values()),
                "pending_tasks": status_counts[TaskStatus.PENDING],
                "in_progress_tasks": status_counts[TaskStatus.IN_PROGRESS],
                "completed_tasks": status_counts[TaskStatus.COMPLETED],
                "delayed_tasks": status_counts[TaskStatus.DELAYED],
                "total_weight_kg": round(entry["weight"], 2),
            })
        return rows

    def monthly_costs(self, month: Optional[str] = None) -> List[Dict]:
        """Cost allocations joined with department names, newest month first."""
        query = self.db.query(CostAllocation, Department.name).join(
            Department, CostAllocation.department_id == Department.id
        )
        if month:
            query = query.filter(CostAllocation.month == month)
        query = query.order_by(CostAllocation.month.desc(), CostAllocation.total_cost.desc())

        return [
            {
                "month": allocation.month,
                "department_id": allocation.department_id,
                "department_name": department_name,
                "total_cost": allocation.total_cost,
                "total_weight": allocation.total_weight,
                "cost_per_kg": allocation.cost_per_kg,
            }
            for allocation, department_name in query.all()
        ]

    def inventory_status(self) -> List[Dict]:
        items = self.db.query(InventoryItem).order_by(InventoryItem.category, InventoryItem.name).all()
        return [
            {
                "id": item.id,
                "name": item.name,
                "category": item.category,
                "quantity": item.quantity,
                "minimum_level": item.minimum_level,
                "unit": item.unit,
                "stock_status": stock_status(item.quantity, item.minimum_level).value,
            }
            for item in items
        ]

    def equipment_status(self, now: Optional[datetime] = None, upcoming_days: int = 7) -> List[Dict]:
        now = now or datetime.now(timezone.utc)
        machines = self.db.query(Equipment).order_by(Equipment.name).all()
        return [
            {
                "id": machine.id,
                "name": machine.name,
                "type": machine.type,
                "status": machine.status.value,
                "last_maintenance": _iso(machine.last_maintenance),
                "next_maintenance": _iso(machine.next_maintenance),
                "maintenance_status": maintenance_status(machine.next_maintenance, now, upcoming_days).value,
            }
            for machine in machines
        ]


def _iso(value: Optional[datetime]) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value else None
