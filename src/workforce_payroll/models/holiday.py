"""Statutory holiday calendar."""

from __future__ import annotations

import datetime as dt
from uuid import UUID, uuid4

from sqlalchemy import Date, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from workforce_payroll.models.base import Base, TimestampMixin


class StatutoryHoliday(Base, TimestampMixin):
    """A jurisdiction-designated paid holiday."""

    __tablename__ = "statutory_holiday"

    statutory_holiday_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    province: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("date", "province", name="statutory_holiday_date_province_unique"),
    )
