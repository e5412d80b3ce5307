"""Analytics Service - read-only dashboard aggregates.

All day, week and month boundaries are computed in UTC. Weeks start on
Sunday.
"""

import math
from collections import Counter
from datetime import datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from laundry.core.errors import DomainValidationError
from laundry.db.base import as_utc
from laundry.models.cost_allocation import CostAllocation
from laundry.models.department import Department
from laundry.models.inventory import InventoryItem
from laundry.models.task import Task, TaskStatus

USAGE_PERIODS = ("weekly", "monthly", "quarterly")
COMPLETION_PERIODS = ("daily", "weekly", "monthly")

TASK_USAGE_WEIGHT = 10
COST_USAGE_DIVISOR = 1000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=timezone.utc)


def start_of_week(moment: datetime) -> datetime:
    """Midnight of the Sunday on or before ``moment``."""
    day = start_of_day(moment)
    # weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


def week_key(moment: datetime) -> str:
    """Label the Sunday-start week containing ``moment`` as ``YYYY-Www``.

    ``YYYY`` is the calendar year of the week's Sunday. Week 1 is the week
    containing January 1st, so late December can already be week 1: the week
    of 2025-12-28 is ``2025-W01`` and the week of 2026-01-04 is ``2026-W02``.
    """
    week_start = start_of_week(moment)
    first_week = start_of_week(week_start.replace(year=week_start.year + 1, month=1, day=1))
    if week_start < first_week:
        first_week = start_of_week(week_start.replace(month=1, day=1))
    return f"{week_start.year}-W{(week_start - first_week).days // 7 + 1:02d}"


def item_stock_percentage(quantity: float, minimum_level: float) -> float:
    """Percentage of twice the minimum level on hand, capped at 100.

    An item at exactly its minimum level scores 50.
    """
    if minimum_level <= 0:
        return 100.0
    return min(100.0, quantity / (minimum_level * 2) * 100)


class AnalyticsService:
    """Dashboard statistics, department usage and completion time series."""

    def __init__(self, db: Session, now: Optional[datetime] = None):
        self.db = db
        self.now = as_utc(now or datetime.now(timezone.utc))

    # ===== DASHBOARD =====

    def dashboard_stats(self) -> Dict:
        today = start_of_day(self.now)
        tomorrow = today + timedelta(days=1)

        pending = (
            self.db.query(func.count(Task.id))
            .filter(Task.status.in_([TaskStatus.PENDING, TaskStatus.IN_PROGRESS]))
            .scalar()
        ) or 0

        completed_today = (
            self.db.query(func.count(Task.id))
            .filter(
                Task.status == TaskStatus.COMPLETED,
                Task.completed_at >= today,
                Task.completed_at < tomorrow,
            )
            .scalar()
        ) or 0

        return {
            "pending_tasks": pending,
            "completed_today": completed_today,
            "inventory_status": self._inventory_status(),
            "monthly_costs": self._monthly_costs(),
        }

    def _inventory_status(self) -> int:
        rows = self.db.query(InventoryItem.quantity, InventoryItem.minimum_level).all()
        if not rows:
            return 0
        total = sum(item_stock_percentage(quantity, minimum) for quantity, minimum in rows)
        return round_half_up(total / len(rows))

    def _cost_sum(self, months: List[str]) -> float:
        total = (
            self.db.query(func.sum(CostAllocation.total_cost))
            .filter(CostAllocation.month.in_(months))
            .scalar()
        )
        return float(total or 0)

    def _monthly_costs(self) -> float:
        """Current month's total, falling back to last month when it is zero."""
        current = self._cost_sum([month_key(self.now)])
        if current:
            return current
        return self._cost_sum([month_key(self.now - relativedelta(months=1))])

    # ===== DEPARTMENT USAGE =====

    def _usage_window(self, period: str) -> Tuple[datetime, Optional[datetime], List[str]]:
        """Task window start/end and the month strings used for costs.

        An empty month list means costs are filtered by creation time instead.
        """
        if period == "weekly":
            start = start_of_week(self.now)
            return start, start + timedelta(days=7), []
        if period == "monthly":
            start = start_of_month(self.now)
            return start, start + relativedelta(months=1), [month_key(self.now)]
        start = start_of_month(self.now) - relativedelta(months=2)
        months = [month_key(self.now - relativedelta(months=i)) for i in range(3)]
        return start, None, months

    def department_usage(self, period: str = "weekly") -> List[Dict]:
        """Per-department score: tasks x 10 plus cost / 1000, highest first."""
        if period not in USAGE_PERIODS:
            raise DomainValidationError(
                f"Invalid period '{period}'. Expected one of: {', '.join(USAGE_PERIODS)}"
            )
        start, end, months = self._usage_window(period)

        task_query = self.db.query(Task.department_id, func.count(Task.id)).filter(Task.created_at >= start)
        if end is not None:
            task_query = task_query.filter(Task.created_at < end)
        task_counts = dict(task_query.group_by(Task.department_id).all())

        cost_query = self.db.query(CostAllocation.department_id, func.sum(CostAllocation.total_cost))
        if months:
            cost_query = cost_query.filter(CostAllocation.month.in_(months))
        else:
            cost_query = cost_query.filter(
                CostAllocation.created_at >= start, CostAllocation.created_at < end
            )
        cost_sums = dict(cost_query.group_by(CostAllocation.department_id).all())

        usage = []
        for department in self.db.query(Department).order_by(Department.name).all():
            score = (
                task_counts.get(department.id, 0) * TASK_USAGE_WEIGHT
                + float(cost_sums.get(department.id) or 0) / COST_USAGE_DIVISOR
            )
            usage.append({"department_name": department.name, "usage": round_half_up(score)})

        return sorted(usage, key=lambda row: row["usage"], reverse=True)

    # ===== TASK COMPLETION =====

    def task_completion_stats(self, period: str = "daily") -> List[Dict]:
        """Completed task counts bucketed by day, Sunday-start week or month."""
        if period not in COMPLETION_PERIODS:
            raise DomainValidationError(
                f"Invalid period '{period}'. Expected one of: {', '.join(COMPLETION_PERIODS)}"
            )
        if period == "daily":
            start = self.now - timedelta(days=14)
        elif period == "weekly":
            start = self.now - timedelta(days=84)
        else:
            start = self.now - relativedelta(months=12)

        rows = (
            self.db.query(Task.completed_at)
            .filter(
                Task.status == TaskStatus.COMPLETED,
                Task.completed_at.isnot(None),
                Task.completed_at >= start,
                Task.completed_at <= self.now,
            )
            .all()
        )

        anchor, label = {
            "daily": (start_of_day, lambda day: day.strftime("%Y-%m-%d")),
            "weekly": (start_of_week, week_key),
            "monthly": (start_of_month, month_key),
        }[period]

        # Keyed by bucket start so week labels sort chronologically across years
        buckets: Counter = Counter(anchor(as_utc(completed_at)) for (completed_at,) in rows)
        return [{"date": label(start), "count": buckets[start]} for start in sorted(buckets)]
