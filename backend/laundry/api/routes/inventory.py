"""Inventory routes: consumable stock and low-stock alerts."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser, RequireAdmin
from laundry.db.session import DbSession
from laundry.models.inventory import InventoryItem
from laundry.schemas.auth import SuccessResponse
from laundry.schemas.inventory import (
    InventoryAlertResponse,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
)
from laundry.schemas.pagination import PaginatedResponse
from laundry.services.inventory_service import InventoryService, stock_status

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(item: InventoryItem) -> InventoryItemResponse:
    response = InventoryItemResponse.model_validate(item)
    response.stock_status = stock_status(item.quantity, item.minimum_level)
    return response


@router.get("/", response_model=PaginatedResponse[InventoryItemResponse])
@limiter.limit("60/minute")
def list_inventory(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    category: Optional[str] = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    items, total = InventoryService(db).list(offset, limit, category=category)
    return PaginatedResponse[InventoryItemResponse].create(
        items=[_to_response(i) for i in items], total=total, offset=offset, limit=limit
    )


@router.get("/low-stock", response_model=List[InventoryItemResponse])
@limiter.limit("60/minute")
def list_low_stock(request: Request, db: DbSession, current_user: CurrentUser):
    """Items at or below their minimum level, most depleted first."""
    return [_to_response(i) for i in InventoryService(db).low_stock()]


@router.get("/alerts", response_model=PaginatedResponse[InventoryAlertResponse])
@limiter.limit("60/minute")
def list_alerts(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    acknowledged: Optional[bool] = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    alerts, total = InventoryService(db).list_alerts(offset, limit, acknowledged=acknowledged)
    return PaginatedResponse[InventoryAlertResponse].create(items=alerts, total=total, offset=offset, limit=limit)


@router.post("/alerts/{alert_id}/acknowledge", response_model=InventoryAlertResponse)
@limiter.limit("30/minute")
def acknowledge_alert(request: Request, alert_id: int, db: DbSession, current_user: CurrentUser):
    alert = InventoryService(db).acknowledge_alert(alert_id)
    logger.info(f"Alert {alert_id} acknowledged by {current_user.username}")
    return alert


@router.post("/", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_item(request: Request, data: InventoryItemCreate, db: DbSession, current_user: CurrentUser):
    return _to_response(InventoryService(db).create(data))


@router.get("/{item_id}", response_model=InventoryItemResponse)
@limiter.limit("60/minute")
def get_item(request: Request, item_id: int, db: DbSession, current_user: CurrentUser):
    return _to_response(InventoryService(db).get(item_id))


@router.patch("/{item_id}", response_model=InventoryItemResponse)
@limiter.limit("30/minute")
def update_item(
    request: Request, item_id: int, data: InventoryItemUpdate, db: DbSession, current_user: CurrentUser
):
    """Update an item. Quantity changes stamp the restock time and may raise an alert."""
    return _to_response(InventoryService(db).update(item_id, data))


@router.delete("/{item_id}", response_model=SuccessResponse)
@limiter.limit("30/minute")
def delete_item(request: Request, item_id: int, db: DbSession, current_user: RequireAdmin):
    InventoryService(db).delete(item_id)
    return SuccessResponse(success=True)
