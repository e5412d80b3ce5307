"""API routes."""

from fastapi import APIRouter

from laundry.api.routes import (
    analytics,
    auth,
    cost_allocations,
    departments,
    equipment,
    inventory,
    laundry_processes,
    reports,
    tasks,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(equipment.router, prefix="/equipment", tags=["equipment"])
api_router.include_router(laundry_processes.router, prefix="/laundry-processes", tags=["processes"])
api_router.include_router(cost_allocations.router, prefix="/cost-allocations", tags=["billing"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
