"""Laundry task routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.db.session import DbSession
from laundry.models.task import TaskStatus
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.pagination import PaginatedResponse
from laundry.schemas.task import TaskCreate, TaskResponse, TaskStatusCounts, TaskUpdate
from laundry.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


def _service(request: Request, db) -> TaskService:
    return TaskService(db, max_retries=request.app.state.settings.task_id_max_retries)


@router.get("/", response_model=PaginatedResponse[TaskResponse])
@limiter.limit("60/minute")
def list_tasks(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """List tasks, newest first."""
    tasks, total = _service(request, db).list(offset, limit, status=status_filter)
    return PaginatedResponse[TaskResponse].create(items=tasks, total=total, offset=offset, limit=limit)


@router.get("/count-by-status", response_model=TaskStatusCounts)
@limiter.limit("60/minute")
def count_tasks_by_status(request: Request, db: DbSession, current_user: CurrentUser):
    counts = _service(request, db).count_by_status()
    return TaskStatusCounts(counts=counts, total=sum(counts.values()))


@router.get("/department/{department_id}", response_model=PaginatedResponse[TaskResponse])
@limiter.limit("60/minute")
def list_department_tasks(
    request: Request,
    department_id: int,
    db: DbSession,
    current_user: CurrentUser,
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    tasks, total = _service(request, db).list(offset, limit, department_id=department_id)
    return PaginatedResponse[TaskResponse].create(items=tasks, total=total, offset=offset, limit=limit)


@router.get("/assigned/{user_id}", response_model=PaginatedResponse[TaskResponse])
@limiter.limit("60/minute")
def list_assigned_tasks(
    request: Request,
    user_id: int,
    db: DbSession,
    current_user: CurrentUser,
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    tasks, total = _service(request, db).list(offset, limit, assigned_to_id=user_id)
    return PaginatedResponse[TaskResponse].create(items=tasks, total=total, offset=offset, limit=limit)


@router.get("/by-task-id/{task_id}", response_model=TaskResponse)
@limiter.limit("60/minute")
def get_task_by_task_id(request: Request, task_id: str, db: DbSession, current_user: CurrentUser):
    """Look a task up by its human-readable ID (e.g. 25-CA-0007)."""
    return _service(request, db).get_by_task_id(task_id)


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_task(request: Request, data: TaskCreate, db: DbSession, current_user: CurrentUser):
    """Create a task. A task ID is generated when none is given."""
    task = _service(request, db).create(data)
    logger.info(f"Task {task.task_id} created by {current_user.username}")
    return task


@router.get("/{task_pk}", response_model=TaskResponse)
@limiter.limit("60/minute")
def get_task(request: Request, task_pk: int, db: DbSession, current_user: CurrentUser):
    return _service(request, db).get(task_pk)


@router.patch("/{task_pk}", response_model=TaskResponse)
@limiter.limit("30/minute")
def update_task(request: Request, task_pk: int, data: TaskUpdate, db: DbSession, current_user: CurrentUser):
    """Update a task. Moving it to completed records the completion time."""
    task = _service(request, db).update(task_pk, data)
    logger.info(f"Task {task.task_id} updated by {current_user.username}")
    return task


@router.delete("/{task_pk}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_task(request: Request, task_pk: int, db: DbSession, current_user: RequireAdmin):
    _service(request, db).delete(task_pk)
    logger.info(f"Task {task_pk} deleted by {current_user.username}")
    return SuccessResponse(success=True)
