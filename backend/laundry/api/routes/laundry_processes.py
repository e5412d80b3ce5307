"""Laundry process (wash-cycle template) routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.errors import NotFoundError
from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.db.session import DbSession
from laundry.models.laundry_process import LaundryProcess
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.laundry_process import (
    LaundryProcessCreate,
    LaundryProcessResponse,
    LaundryProcessUpdate,
)
from laundry.schemas.pagination import PaginatedResponse, paginate_query

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_process(db, process_id: int) -> LaundryProcess:
    process = db.get(LaundryProcess, process_id)
    if process is None:
        raise NotFoundError("Laundry process", process_id)
    return process


@router.get("/", response_model=PaginatedResponse[LaundryProcessResponse])
@limiter.limit("60/minute")
def list_processes(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    is_active: Optional[bool] = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    query = db.query(LaundryProcess)
    if is_active is not None:
        query = query.filter(LaundryProcess.is_active == is_active)
    processes, total = paginate_query(query.order_by(LaundryProcess.name), offset, limit)
    return PaginatedResponse[LaundryProcessResponse].create(items=processes, total=total, offset=offset, limit=limit)


@router.post("/", response_model=LaundryProcessResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_process(request: Request, data: LaundryProcessCreate, db: DbSession, current_user: RequireAdmin):
    process = LaundryProcess(**data.model_dump())
    db.add(process)
    db.commit()
    db.refresh(process)
    logger.info(f"Created laundry process {process.name} (id={process.id})")
    return process


@router.get("/{process_id}", response_model=LaundryProcessResponse)
@limiter.limit("60/minute")
def get_process(request: Request, process_id: int, db: DbSession, current_user: CurrentUser):
    return _get_process(db, process_id)


@router.patch("/{process_id}", response_model=LaundryProcessResponse)
@limiter.limit("30/minute")
def update_process(
    request: Request, process_id: int, data: LaundryProcessUpdate, db: DbSession, current_user: RequireAdmin
):
    process = _get_process(db, process_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "duration", "is_active"):
            continue
        setattr(process, field, value)
    db.commit()
    db.refresh(process)
    logger.info(f"Updated laundry process {process.name} (id={process.id})")
    return process


@router.delete("/{process_id}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_process(request: Request, process_id: int, db: DbSession, current_user: RequireAdmin):
    process = _get_process(db, process_id)
    db.delete(process)
    db.commit()
    logger.info(f"Deleted laundry process {process.name} (id={process_id})")
    return SuccessResponse(success=True)
