"""Department routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.errors import ConflictError, NotFoundError
from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.db.session import DbSession
from laundry.models.cost_allocation import CostAllocation
from laundry.models.department import Department
from laundry.models.task import Task
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.department import DepartmentCreate, DepartmentResponse, DepartmentUpdate
from laundry.schemas.pagination import PaginatedResponse, paginate_query

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_department(db, department_id: int) -> Department:
    department = db.get(Department, department_id)
    if department is None:
        raise NotFoundError("Department", department_id)
    return department


def _ensure_name_free(db, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Department.id).filter(Department.name == name)
    if exclude_id is not None:
        query = query.filter(Department.id != exclude_id)
    if query.first():
        raise ConflictError(f"Department '{name}' already exists")


@router.get("/", response_model=PaginatedResponse[DepartmentResponse])
@limiter.limit("60/minute")
def list_departments(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    departments, total = paginate_query(db.query(Department).order_by(Department.name), offset, limit)
    return PaginatedResponse[DepartmentResponse].create(items=departments, total=total, offset=offset, limit=limit)


@router.post("/", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_department(request: Request, data: DepartmentCreate, db: DbSession, current_user: RequireAdmin):
    _ensure_name_free(db, data.name)
    department = Department(**data.model_dump())
    db.add(department)
    db.commit()
    db.refresh(department)
    logger.info(f"Created department {department.name} (id={department.id})")
    return department


@router.get("/{department_id}", response_model=DepartmentResponse)
@limiter.limit("60/minute")
def get_department(request: Request, department_id: int, db: DbSession, current_user: CurrentUser):
    return _get_department(db, department_id)


@router.patch("/{department_id}", response_model=DepartmentResponse)
@limiter.limit("30/minute")
def update_department(
    request: Request, department_id: int, data: DepartmentUpdate, db: DbSession, current_user: RequireAdmin
):
    department = _get_department(db, department_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    else:
        _ensure_name_free(db, changes["name"], exclude_id=department.id)

    for field, value in changes.items():
        setattr(department, field, value)

    db.commit()
    db.refresh(department)
    logger.info(f"Updated department {department.name} (id={department.id})")
    return department


@router.delete("/{department_id}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_department(request: Request, department_id: int, db: DbSession, current_user: RequireAdmin):
    """Delete a department. Departments still referenced by tasks cannot be deleted."""
    department = _get_department(db, department_id)
    in_use = (
        db.query(Task.id).filter(Task.department_id == department_id).first()
        or db.query(CostAllocation.id).filter(CostAllocation.department_id == department_id).first()
    )
    if in_use:
        raise ConflictError(f"Department '{department.name}' still has tasks or cost allocations")
    db.delete(department)
    db.commit()
    logger.info(f"Deleted department {department.name} (id={department_id})")
    return SuccessResponse(success=True)
