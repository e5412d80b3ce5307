"""Department model."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from laundry.db.base import Base


class Department(Base):
    """A hospital department that requests laundry work and is billed for it."""

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Relationships
    tasks: Mapped[list["Task"]] = relationship("Task", back_populates="department")
    cost_allocations: Mapped[list["CostAllocation"]] = relationship(
        "CostAllocation", back_populates="department"
    )
