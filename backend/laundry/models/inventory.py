"""Inventory item and low-stock alert models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from laundry.db.base import Base, CreatedAtMixin


class InventoryItem(Base):
    """A consumable stock record (detergent, softener, bags...)."""

    __tablename__ = "inventory_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)  # liters, kg, boxes
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    minimum_level: Mapped[float] = mapped_column(Float, nullable=False)
    unit_cost: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)  # storage location
    supplier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_restocked: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    alerts: Mapped[list["InventoryAlert"]] = relationship(
        "InventoryAlert", back_populates="item", cascade="all, delete-orphan", passive_deletes=True
    )


class InventoryAlert(Base, CreatedAtMixin):
    """Generated when an item's quantity crosses below its minimum level."""

    __tablename__ = "inventory_alerts"

    id: Mapped[int] = mapped_column(primary_key=True)
    inventory_item_id: Mapped[int] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    alert_type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    acknowledged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    item: Mapped["InventoryItem"] = relationship("InventoryItem", back_populates="alerts")
