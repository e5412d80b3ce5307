"""Monthly per-department cost allocation model."""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from laundry.db.base import Base, CreatedAtMixin


class CostAllocation(Base, CreatedAtMixin):
    """Laundry weight and cost billed to a department for one month."""

    __tablename__ = "cost_allocations"

    id: Mapped[int] = mapped_column(primary_key=True)
    department_id: Mapped[int] = mapped_column(
        ForeignKey("departments.id"), nullable=False, index=True
    )
    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)  # YYYY-MM
    total_weight: Mapped[float] = mapped_column(Float, nullable=False)  # kg
    total_cost: Mapped[float] = mapped_column(Float, nullable=False)
    cost_per_kg: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    # Relationships
    department: Mapped["Department"] = relationship("Department", back_populates="cost_allocations")
