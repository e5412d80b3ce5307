"""Equipment routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.db.session import DbSession
from laundry.models.equipment import Equipment, EquipmentStatus
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.equipment import EquipmentCreate, EquipmentResponse, EquipmentUpdate
from laundry.schemas.pagination import PaginatedResponse
from laundry.services.equipment_service import EquipmentService, maintenance_status

logger = logging.getLogger(__name__)

router = APIRouter()


def _service(request: Request, db) -> EquipmentService:
    return EquipmentService(db, interval_days=request.app.state.settings.maintenance_interval_days)


def _to_response(request: Request, equipment: Equipment) -> EquipmentResponse:
    response = EquipmentResponse.model_validate(equipment)
    response.maintenance_status = maintenance_status(
        equipment.next_maintenance,
        upcoming_days=request.app.state.settings.maintenance_upcoming_days,
    )
    return response


@router.get("/", response_model=PaginatedResponse[EquipmentResponse])
@limiter.limit("60/minute")
def list_equipment(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    status_filter: Optional[EquipmentStatus] = Query(None, alias="status"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    machines, total = _service(request, db).list(offset, limit, status=status_filter)
    return PaginatedResponse[EquipmentResponse].create(
        items=[_to_response(request, m) for m in machines], total=total, offset=offset, limit=limit
    )


@router.post("/", response_model=EquipmentResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_equipment(request: Request, data: EquipmentCreate, db: DbSession, current_user: RequireAdmin):
    return _to_response(request, _service(request, db).create(data))


@router.get("/{equipment_id}", response_model=EquipmentResponse)
@limiter.limit("60/minute")
def get_equipment(request: Request, equipment_id: int, db: DbSession, current_user: CurrentUser):
    return _to_response(request, _service(request, db).get(equipment_id))


@router.patch("/{equipment_id}", response_model=EquipmentResponse)
@limiter.limit("30/minute")
def update_equipment(
    request: Request, equipment_id: int, data: EquipmentUpdate, db: DbSession, current_user: CurrentUser
):
    """Update a machine. A new last-maintenance date reschedules the next one."""
    return _to_response(request, _service(request, db).update(equipment_id, data))


@router.post("/{equipment_id}/maintenance", response_model=EquipmentResponse)
@limiter.limit("30/minute")
def record_maintenance(request: Request, equipment_id: int, db: DbSession, current_user: CurrentUser):
    """Record that maintenance was carried out now."""
    equipment = _service(request, db).record_maintenance(equipment_id)
    logger.info(f"Maintenance on equipment {equipment_id} recorded by {current_user.username}")
    return _to_response(request, equipment)


@router.delete("/{equipment_id}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_equipment(request: Request, equipment_id: int, db: DbSession, current_user: RequireAdmin):
    _service(request, db).delete(equipment_id)
    return SuccessResponse(success=True)
