"""Read-only operational reports."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from laundry.core.rate_limit import limiter
from laundry.core.rbac import RequireReports
from laundry.db.session import DbSession
from laundry.schemas.cost_allocation import MONTH_PATTERN
from laundry.schemas.report import (
    DepartmentWorkloadRow,
    EquipmentStatusRow,
    InventoryStatusRow,
    MonthlyCostRow,
)
from laundry.services.report_service import ReportService

router = APIRouter()


@router.get("/department-workload", response_model=List[DepartmentWorkloadRow])
@limiter.limit("30/minute")
def department_workload(request: Request, db: DbSession, current_user: RequireReports):
    return ReportService(db).department_workload()


@router.get("/monthly-costs", response_model=List[MonthlyCostRow])
@limiter.limit("30/minute")
def monthly_costs(
    request: Request,
    db: DbSession,
    current_user: RequireReports,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
):
    return ReportService(db).monthly_costs(month)


@router.get("/inventory-status", response_model=List[InventoryStatusRow])
@limiter.limit("30/minute")
def inventory_status(request: Request, db: DbSession, current_user: RequireReports):
    return ReportService(db).inventory_status()


@router.get("/equipment-status", response_model=List[EquipmentStatusRow])
@limiter.limit("30/minute")
def equipment_status(request: Request, db: DbSession, current_user: RequireReports):
    return ReportService(db).equipment_status(
        upcoming_days=request.app.state.settings.maintenance_upcoming_days
    )
