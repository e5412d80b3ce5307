"""Laundry process (wash-cycle template) model."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from laundry.db.base import Base


class LaundryProcess(Base):
    """A configurable wash cycle."""

    __tablename__ = "laundry_processes"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    temperature: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # celsius
    detergent_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    softener_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    disinfectant_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
