"""Equipment Service - maintenance scheduling.

Whenever ``last_maintenance`` is set to a new value, ``next_maintenance`` is
recomputed as ``last_maintenance`` plus the fixed maintenance interval. The
maintenance status shown to clients is derived at read time and never stored.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from laundry.core.errors import NotFoundError
from laundry.db.base import as_utc
from laundry.models.equipment import Equipment, EquipmentStatus
from laundry.schemas.equipment import EquipmentCreate, EquipmentUpdate, MaintenanceStatus
from laundry.schemas.pagination import paginate_query

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_DAYS = 90
DEFAULT_UPCOMING_DAYS = 7


def next_maintenance_date(last_maintenance: datetime, interval_days: int = DEFAULT_INTERVAL_DAYS) -> datetime:
    return last_maintenance + timedelta(days=interval_days)


def maintenance_status(
    next_maintenance: Optional[datetime],
    now: Optional[datetime] = None,
    upcoming_days: int = DEFAULT_UPCOMING_DAYS,
) -> MaintenanceStatus:
    """Compare the next maintenance date with the start of today (UTC).

    Overdue before today, upcoming within ``upcoming_days``, otherwise ok.
    Machines without a scheduled date are ok.
    """
    if next_maintenance is None:
        return MaintenanceStatus.OK
    now = as_utc(now or datetime.now(timezone.utc))
    today = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    due = as_utc(next_maintenance)
    if due < today:
        return MaintenanceStatus.OVERDUE
    if due < today + timedelta(days=upcoming_days):
        return MaintenanceStatus.UPCOMING
    return MaintenanceStatus.OK


class EquipmentService:
    """Service for equipment records and their maintenance schedule."""

    def __init__(self, db: Session, interval_days: int = DEFAULT_INTERVAL_DAYS):
        self.db = db
        self.interval_days = interval_days

    def create(self, data: EquipmentCreate) -> Equipment:
        equipment = Equipment(**data.model_dump())
        if equipment.last_maintenance is not None:
            equipment.last_maintenance = as_utc(equipment.last_maintenance)
            equipment.next_maintenance = next_maintenance_date(equipment.last_maintenance, self.interval_days)
        self.db.add(equipment)
        self.db.commit()
        self.db.refresh(equipment)
        logger.info(f"Created equipment {equipment.name} (id={equipment.id})")
        return equipment

    def update(self, equipment_id: int, data: EquipmentUpdate) -> Equipment:
        equipment = self.get(equipment_id, for_update=True)
        changes = data.model_dump(exclude_unset=True)

        for field in ("name", "type", "status"):
            if field in changes and changes[field] is None:
                del changes[field]

        new_last = changes.pop("last_maintenance", None)
        for field, value in changes.items():
            setattr(equipment, field, value)

        if new_last is not None:
            self._set_last_maintenance(equipment, new_last)

        self.db.commit()
        self.db.refresh(equipment)
        logger.info(f"Updated equipment {equipment.name} (id={equipment.id})")
        return equipment

    def record_maintenance(self, equipment_id: int, now: Optional[datetime] = None) -> Equipment:
        """Mark maintenance as done now and make the machine available again."""
        equipment = self.get(equipment_id, for_update=True)
        self._set_last_maintenance(equipment, now or datetime.now(timezone.utc))
        equipment.status = EquipmentStatus.AVAILABLE
        self.db.commit()
        self.db.refresh(equipment)
        logger.info(
            f"Recorded maintenance for {equipment.name} (id={equipment.id}), "
            f"next due {as_utc(equipment.next_maintenance).date().isoformat()}"
        )
        return equipment

    def _set_last_maintenance(self, equipment: Equipment, value: datetime) -> None:
        value = as_utc(value)
        if value == as_utc(equipment.last_maintenance):
            return
        equipment.last_maintenance = value
        equipment.next_maintenance = next_maintenance_date(value, self.interval_days)

    def delete(self, equipment_id: int) -> None:
        equipment = self.get(equipment_id)
        self.db.delete(equipment)
        self.db.commit()
        logger.info(f"Deleted equipment {equipment.name} (id={equipment_id})")

    def get(self, equipment_id: int, for_update: bool = False) -> Equipment:
        equipment = self.db.get(
            Equipment, equipment_id, with_for_update=for_update or None, populate_existing=for_update
        )
        if equipment is None:
            raise NotFoundError("Equipment", equipment_id)
        return equipment

    def list(
        self, offset: int = 0, limit: int = 20, status: Optional[EquipmentStatus] = None
    ) -> Tuple[List[Equipment], int]:
        query = self.db.query(Equipment)
        if status is not None:
            query = query.filter(Equipment.status == status)
        query = query.order_by(Equipment.name, Equipment.id)
        return paginate_query(query, offset, limit)
