"""Inventory Service - restock stamping and low-stock alerting.

Flow on every item update:
1. Re-read the row with ``SELECT ... FOR UPDATE`` so the threshold check sees
   the latest committed quantity (concurrent updates serialize on the lock).
2. Apply the changed fields.
3. If the quantity changed, stamp ``last_restocked`` (consumption and
   restocking are not distinguished).
4. If the quantity is now at or below the minimum level and was above the
   previous minimum level before the update, record one ``low_stock`` alert.
   Updates that keep an item below its threshold record nothing.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from laundry.core.errors import NotFoundError
from laundry.models.inventory import InventoryAlert, InventoryItem
from laundry.schemas.inventory import InventoryItemCreate, InventoryItemUpdate, StockStatus
from laundry.schemas.pagination import paginate_query

logger = logging.getLogger(__name__)

LOW_STOCK_ALERT = "low_stock"
CRITICAL_RATIO = 0.5


def stock_status(quantity: float, minimum_level: float) -> StockStatus:
    """Classify a stock level against its minimum."""
    if quantity <= minimum_level * CRITICAL_RATIO:
        return StockStatus.CRITICAL
    if quantity <= minimum_level:
        return StockStatus.LOW
    return StockStatus.OK


def crossed_below_threshold(
    old_quantity: float, old_minimum: float, new_quantity: float, new_minimum: float
) -> bool:
    """True when an update moves an item from above its threshold to at or below it."""
    return new_quantity <= new_minimum and old_quantity > old_minimum


def _fmt(value: float) -> str:
    return f"{value:g}"


class InventoryService:
    """Service for inventory items and their low-stock alerts."""

    def __init__(self, db: Session):
        self.db = db

    # ===== ITEMS =====

    def create(self, data: InventoryItemCreate) -> InventoryItem:
        """Create an item. Creation never records an alert."""
        item = InventoryItem(**data.model_dump())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Created inventory item {item.name} (id={item.id})")
        return item

    def update(self, item_id: int, data: InventoryItemUpdate, now: Optional[datetime] = None) -> InventoryItem:
        now = now or datetime.now(timezone.utc)
        item = self.get(item_id, for_update=True)
        changes = data.model_dump(exclude_unset=True)

        for field in ("name", "category", "unit", "quantity", "minimum_level", "unit_cost"):
            if field in changes and changes[field] is None:
                del changes[field]

        old_quantity = item.quantity
        old_minimum = item.minimum_level

        for field, value in changes.items():
            setattr(item, field, value)

        if item.quantity != old_quantity:
            item.last_restocked = now

        if crossed_below_threshold(old_quantity, old_minimum, item.quantity, item.minimum_level):
            alert = InventoryAlert(
                inventory_item_id=item.id,
                alert_type=LOW_STOCK_ALERT,
                message=(
                    f"{item.name} is below reorder threshold "
                    f"({_fmt(item.quantity)} <= {_fmt(item.minimum_level)} {item.unit})"
                ),
                acknowledged=False,
                created_at=now,
            )
            self.db.add(alert)
            logger.warning(
                f"LOW STOCK: {item.name} at {_fmt(item.quantity)} {item.unit} "
                f"(minimum {_fmt(item.minimum_level)} {item.unit})"
            )

        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Updated inventory item {item.name} (id={item.id})")
        return item

    def delete(self, item_id: int) -> None:
        item = self.get(item_id)
        self.db.delete(item)
        self.db.commit()
        logger.info(f"Deleted inventory item {item.name} (id={item_id})")

    def get(self, item_id: int, for_update: bool = False) -> InventoryItem:
        """Load an item. ``for_update`` takes a row lock and re-reads committed values."""
        item = self.db.get(
            InventoryItem, item_id, with_for_update=for_update or None, populate_existing=for_update
        )
        if item is None:
            raise NotFoundError("Inventory item", item_id)
        return item

    def list(
        self, offset: int = 0, limit: int = 20, category: Optional[str] = None
    ) -> Tuple[List[InventoryItem], int]:
        query = self.db.query(InventoryItem)
        if category:
            query = query.filter(InventoryItem.category == category)
        query = query.order_by(InventoryItem.name, InventoryItem.id)
        return paginate_query(query, offset, limit)

    def low_stock(self) -> List[InventoryItem]:
        """Items at or below their minimum level, most depleted first."""
        items = (
            self.db.query(InventoryItem)
            .filter(InventoryItem.quantity <= InventoryItem.minimum_level)
            .all()
        )
        return sorted(
            items,
            key=lambda i: (i.quantity / i.minimum_level) if i.minimum_level else 0,
        )

    # ===== ALERTS =====

    def list_alerts(
        self, offset: int = 0, limit: int = 20, acknowledged: Optional[bool] = None
    ) -> Tuple[List[InventoryAlert], int]:
        query = self.db.query(InventoryAlert)
        if acknowledged is not None:
            query = query.filter(InventoryAlert.acknowledged == acknowledged)
        query = query.order_by(InventoryAlert.created_at.desc(), InventoryAlert.id.desc())
        return paginate_query(query, offset, limit)

    def acknowledge_alert(self, alert_id: int) -> InventoryAlert:
        alert = self.db.get(InventoryAlert, alert_id)
        if alert is None:
            raise NotFoundError("Inventory alert", alert_id)
        alert.acknowledged = True
        self.db.commit()
        self.db.refresh(alert)
        logger.info(f"Acknowledged inventory alert {alert_id}")
        return alert
