"""Laundry task schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from laundry.models.task import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    """Task creation schema. ``task_id`` is generated when omitted."""

    task_id: Optional[str] = Field(default=None, min_length=1, max_length=32)
    description: str = Field(..., min_length=1)
    requested_by_id: int
    assigned_to_id: Optional[int] = None
    department_id: int
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    weight: Optional[float] = Field(default=None, ge=0)
    due_date: datetime
    notes: Optional[str] = None


class TaskUpdate(BaseModel):
    """Task update schema. The task ID and completion time are not writable."""

    description: Optional[str] = Field(default=None, min_length=1)
    assigned_to_id: Optional[int] = None
    department_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    weight: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class TaskResponse(BaseModel):
    """Task response schema."""

    id: int
    task_id: str
    description: str
    requested_by_id: int
    assigned_to_id: Optional[int] = None
    department_id: int
    department_name: Optional[str] = None
    requested_by_name: Optional[str] = None
    assigned_to_name: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    weight: Optional[float] = None
    due_date: datetime
    created_at: datetime
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class TaskStatusCounts(BaseModel):
    """Number of tasks per status; every status is present."""

    counts: Dict[str, int]
    total: int
