"""Pay period, pay calculation, and adjustment models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from workforce_payroll.models.employee import Employee


class PayPeriodType(str, Enum):
    """Pay period frequency (informational only)."""

    SEMI_MONTHLY = "SEMI_MONTHLY"
    BI_WEEKLY = "BI_WEEKLY"
    MONTHLY = "MONTHLY"


# ===== Pay Periods =====


class PayPeriod(Base, TimestampMixin):
    """Date range over which hours are aggregated into one payroll run."""

    __tablename__ = "pay_period"

    pay_period_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="DRAFT")

    __table_args__ = (
        CheckConstraint(
            "type IN ('SEMI_MONTHLY', 'BI_WEEKLY', 'MONTHLY')",
            name="pay_period_type_check",
        ),
        CheckConstraint(
            "status IN ('DRAFT', 'PROCESSING', 'COMPLETED', 'PAID')",
            name="pay_period_status_check",
        ),
        CheckConstraint("end_date > start_date", name="pay_period_dates_check"),
        Index("pay_period_dates_idx", "start_date", "end_date"),
    )

    # Relationships
    calculations: Mapped[list[PayCalculation]] = relationship(
        back_populates="pay_period",
        order_by="PayCalculation.created_at",
    )


# ===== Pay Calculations =====


class PayCalculation(Base, TimestampMixin):
    """Computed hours and gross pay for one employee in one pay period.

    ``overtime_hours`` holds premium-adjusted hour equivalents (already
    multiplied by 1.5x/2x); ``holiday_hours`` holds raw hours.
    """

    __tablename__ = "pay_calculation"

    pay_calculation_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pay_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_period.pay_period_id", ondelete="RESTRICT"),
        nullable=False,
    )
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    holiday_hours: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "regular_hours >= 0 AND overtime_hours >= 0 AND holiday_hours >= 0",
            name="pay_calculation_hours_check",
        ),
        Index("pay_calculation_period_employee_idx", "pay_period_id", "employee_id"),
    )

    # Relationships
    pay_period: Mapped[PayPeriod] = relationship(back_populates="calculations")
    employee: Mapped[Employee] = relationship(back_populates="pay_calculations")
    adjustments: Mapped[list[PayAdjustment]] = relationship(
        back_populates="pay_calculation",
        order_by="PayAdjustment.created_at",
    )

    @property
    def total_hours(self) -> Decimal:
        """Sum of the three hour buckets."""
        return self.regular_hours + self.overtime_hours + self.holiday_hours

    @property
    def adjustments_total(self) -> Decimal:
        """Sum of all adjustment amounts."""
        return sum((adj.amount for adj in self.adjustments), Decimal("0"))


class PayAdjustment(Base):
    """Manual signed change to a calculation's gross pay. Immutable."""

    __tablename__ = "pay_adjustment"

    pay_adjustment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pay_calculation_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_calculation.pay_calculation_id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    pay_calculation: Mapped[PayCalculation] = relationship(back_populates="adjustments")
