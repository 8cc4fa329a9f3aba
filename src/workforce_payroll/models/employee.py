"""Employee, schedule and time-clock models.

These tables are owned by the surrounding HR system; the payroll engine only
reads them.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from workforce_payroll.models.payroll import PayCalculation


class ScheduleType(str, Enum):
    """Kind of scheduled shift."""

    REGULAR = "REGULAR"
    OVERTIME = "OVERTIME"
    HOLIDAY = "HOLIDAY"


class Employee(Base, TimestampMixin):
    """Employee record."""

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    termination_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    pay_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    overtime_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "termination_date IS NULL OR termination_date >= hire_date",
            name="employee_dates_check",
        ),
    )

    # Relationships
    schedules: Mapped[list[Schedule]] = relationship(back_populates="employee")
    time_clocks: Mapped[list[TimeClock]] = relationship(back_populates="employee")
    pay_calculations: Mapped[list[PayCalculation]] = relationship(back_populates="employee")


class Schedule(Base, TimestampMixin):
    """Scheduled shift for an employee."""

    __tablename__ = "schedule"

    schedule_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    start_time: Mapped[datetime] = mapped_column(nullable=False)
    end_time: Mapped[datetime] = mapped_column(nullable=False)
    break_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    schedule_type: Mapped[str] = mapped_column(
        String, nullable=False, default=ScheduleType.REGULAR.value
    )
    is_statutory_holiday: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(
            "schedule_type IN ('REGULAR', 'OVERTIME', 'HOLIDAY')",
            name="schedule_type_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="schedules")


class TimeClock(Base, TimestampMixin):
    """A clock-in/clock-out record."""

    __tablename__ = "time_clock"

    time_clock_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    clock_in_time: Mapped[datetime] = mapped_column(nullable=False)
    clock_out_time: Mapped[datetime | None] = mapped_column(nullable=True)
    total_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    schedule_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("schedule.schedule_id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        Index("time_clock_employee_clock_in_idx", "employee_id", "clock_in_time"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="time_clocks")
    schedule: Mapped[Schedule | None] = relationship()
