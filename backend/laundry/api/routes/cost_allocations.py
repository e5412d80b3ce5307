"""Cost allocation routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.db.session import DbSession
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.cost_allocation import (
    CostAllocationCreate,
    CostAllocationResponse,
    CostAllocationUpdate,
)
from laundry.schemas.pagination import PaginatedResponse
from laundry.services.cost_allocation_service import CostAllocationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[CostAllocationResponse])
@limiter.limit("60/minute")
def list_cost_allocations(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    department_id: Optional[int] = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """List cost allocations, most recent month first."""
    allocations, total = CostAllocationService(db).list(offset, limit, department_id=department_id)
    return PaginatedResponse[CostAllocationResponse].create(items=allocations, total=total, offset=offset, limit=limit)


@router.post("/", response_model=CostAllocationResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_cost_allocation(
    request: Request, data: CostAllocationCreate, db: DbSession, current_user: RequireAdmin
):
    """Create an allocation; cost per kg is computed, never taken from the request."""
    allocation = CostAllocationService(db).create(data)
    logger.info(f"Cost allocation {allocation.id} created by {current_user.username}")
    return allocation


@router.get("/{allocation_id}", response_model=CostAllocationResponse)
@limiter.limit("60/minute")
def get_cost_allocation(request: Request, allocation_id: int, db: DbSession, current_user: CurrentUser):
    return CostAllocationService(db).get(allocation_id)


@router.patch("/{allocation_id}", response_model=CostAllocationResponse)
@limiter.limit("30/minute")
def update_cost_allocation(
    request: Request,
    allocation_id: int,
    data: CostAllocationUpdate,
    db: DbSession,
    current_user: RequireAdmin,
):
    allocation = CostAllocationService(db).update(allocation_id, data)
    logger.info(f"Cost allocation {allocation_id} updated by {current_user.username}")
    return allocation


@router.delete("/{allocation_id}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_cost_allocation(request: Request, allocation_id: int, db: DbSession, current_user: RequireAdmin):
    CostAllocationService(db).delete(allocation_id)
    logger.info(f"Cost allocation {allocation_id} deleted by {current_user.username}")
    return SuccessResponse(success=True)
