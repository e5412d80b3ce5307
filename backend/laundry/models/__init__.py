"""SQLAlchemy models."""

from laundry.models.user import User
from laundry.models.department import Department
from laundry.models.task import Task, TaskPriority, TaskStatus
from laundry.models.inventory import InventoryAlert, InventoryItem
from laundry.models.equipment import Equipment, EquipmentStatus
from laundry.models.laundry_process import LaundryProcess
from laundry.models.cost_allocation import CostAllocation

__all__ = [
    "User",
    "Department",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "InventoryAlert",
    "InventoryItem",
    "Equipment",
    "EquipmentStatus",
    "LaundryProcess",
    "CostAllocation",
]
