"""Laundry task model."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Enum as SQLEnum, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from laundry.db.base import Base, CreatedAtMixin


class TaskStatus(str, Enum):
    """Lifecycle status of a laundry task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DELAYED = "delayed"


class TaskPriority(str, Enum):
    """Priority of a laundry task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Task(Base, CreatedAtMixin):
    """A unit of laundry work requested by a department."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    task_id: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)  # e.g. 25-CA-0007
    description: Mapped[str] = mapped_column(Text, nullable=False)
    requested_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    assigned_to_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    department_id: Mapped[int] = mapped_column(ForeignKey("departments.id"), nullable=False, index=True)
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, name="task_status", values_callable=lambda e: [m.value for m in e]),
        default=TaskStatus.PENDING,
        nullable=False,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        SQLEnum(TaskPriority, name="task_priority", values_callable=lambda e: [m.value for m in e]),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # kg
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    department: Mapped["Department"] = relationship("Department", back_populates="tasks")
    requested_by: Mapped["User"] = relationship("User", foreign_keys=[requested_by_id])
    assigned_to: Mapped[Optional["User"]] = relationship("User", foreign_keys=[assigned_to_id])

    @property
    def department_name(self) -> Optional[str]:
        """Display name of the requesting department."""
        return self.department.name if self.department is not None else None

    @property
    def requested_by_name(self) -> Optional[str]:
        return self.requested_by.name if self.requested_by is not None else None

    @property
    def assigned_to_name(self) -> Optional[str]:
        return self.assigned_to.name if self.assigned_to is not None else None
