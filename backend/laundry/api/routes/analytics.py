"""Dashboard analytics routes."""

from typing import List

from fastapi import APIRouter, Query, Request

from laundry.core.rate_limit import limiter
from laundry.core.rbac import CurrentUser
from laundry.db.session import DbSession
from laundry.schemas.analytics import DashboardStats, DepartmentUsage, TaskCompletionPoint
from laundry.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/dashboard-stats", response_model=DashboardStats)
@limiter.limit("60/minute")
def get_dashboard_stats(request: Request, db: DbSession, current_user: CurrentUser):
    """Pending work, today's completions, stock health and this month's cost."""
    return AnalyticsService(db).dashboard_stats()


@router.get("/department-usage", response_model=List[DepartmentUsage])
@limiter.limit("60/minute")
def get_department_usage(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    period: str = Query("weekly", description="weekly, monthly or quarterly"),
):
    return AnalyticsService(db).department_usage(period)


@router.get("/task-completion", response_model=List[TaskCompletionPoint])
@limiter.limit("60/minute")
def get_task_completion(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
    period: str = Query("daily", description="daily, weekly or monthly"),
):
    return AnalyticsService(db).task_completion_stats(period)
