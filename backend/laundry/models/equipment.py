"""Laundry equipment model."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Enum as SQLEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from laundry.db.base import Base


class EquipmentStatus(str, Enum):
    """Operational status of a machine."""

    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    AVAILABLE = "available"
    IN_QUEUE = "in_queue"


class Equipment(Base):
    """A physical machine: washer, dryer, sterilizer..."""

    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[EquipmentStatus] = mapped_column(
        SQLEnum(EquipmentStatus, name="equipment_status", values_callable=lambda e: [m.value for m in e]),
        default=EquipmentStatus.AVAILABLE,
        nullable=False,
        index=True,
    )
    last_maintenance: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    next_maintenance: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    time_remaining: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # minutes left in cycle
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
