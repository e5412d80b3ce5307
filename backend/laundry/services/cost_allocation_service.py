"""Cost Allocation Service - monthly department billing.

``cost_per_kg`` is always derived from ``total_cost`` and ``total_weight``;
a value supplied by the client is discarded.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from laundry.core.errors import NotFoundError
from laundry.models.cost_allocation import CostAllocation
from laundry.models.department import Department
from laundry.schemas.cost_allocation import CostAllocationCreate, CostAllocationUpdate
from laundry.schemas.pagination import paginate_query

logger = logging.getLogger(__name__)


def compute_cost_per_kg(total_cost: float, total_weight: float) -> float:
    """Cost divided by weight, or 0 when no weight was processed."""
    if not total_weight or total_weight <= 0:
        return 0.0
    return total_cost / total_weight


class CostAllocationService:
    """Service for per-department monthly cost allocations."""

    def __init__(self, db: Session):
        self.db = db

    def _require_department(self, department_id: int) -> None:
        if self.db.get(Department, department_id) is None:
            raise NotFoundError("Department", department_id)

    def create(self, data: CostAllocationCreate) -> CostAllocation:
        self._require_department(data.department_id)
        allocation = CostAllocation(**data.model_dump(exclude={"cost_per_kg"}))
        allocation.cost_per_kg = compute_cost_per_kg(allocation.total_cost, allocation.total_weight)
        self.db.add(allocation)
        self.db.commit()
        self.db.refresh(allocation)
        logger.info(
            f"Created cost allocation {allocation.id} for department {allocation.department_id} "
            f"({allocation.month}): {allocation.total_cost:.2f} / {allocation.total_weight:g} kg"
        )
        return allocation

    def update(self, allocation_id: int, data: CostAllocationUpdate) -> CostAllocation:
        allocation = self.get(allocation_id, for_update=True)
        changes = data.model_dump(exclude_unset=True, exclude={"cost_per_kg"})
        changes = {field: value for field, value in changes.items() if value is not None}

        if "department_id" in changes:
            self._require_department(changes["department_id"])

        for field, value in changes.items():
            setattr(allocation, field, value)

        if "total_cost" in changes or "total_weight" in changes:
            allocation.cost_per_kg = compute_cost_per_kg(allocation.total_cost, allocation.total_weight)

        self.db.commit()
        self.db.refresh(allocation)
        logger.info(f"Updated cost allocation {allocation.id}")
        return allocation

    def delete(self, allocation_id: int) -> None:
        allocation = self.get(allocation_id)
        self.db.delete(allocation)
        self.db.commit()
        logger.info(f"Deleted cost allocation {allocation_id}")

    def get(self, allocation_id: int, for_update: bool = False) -> CostAllocation:
        allocation = self.db.get(
            CostAllocation, allocation_id, with_for_update=for_update or None, populate_existing=for_update
        )
        if allocation is None:
            raise NotFoundError("Cost allocation", allocation_id)
        return allocation

    def list(
        self, offset: int = 0, limit: int = 20, department_id: Optional[int] = None
    ) -> Tuple[List[CostAllocation], int]:
        query = self.db.query(CostAllocation)
        if department_id is not None:
            query = query.filter(CostAllocation.department_id == department_id)
        query = query.order_by(CostAllocation.month.desc(), CostAllocation.id.desc())
        return paginate_query(query, offset, limit)
