"""ORM models for the workforce payroll service."""

from workforce_payroll.models.base import Base, TimestampMixin
from workforce_payroll.models.employee import Employee, Schedule, ScheduleType, TimeClock
from workforce_payroll.models.holiday import StatutoryHoliday
from workforce_payroll.models.payroll import (
    PayAdjustment,
    PayCalculation,
    PayPeriod,
    PayPeriodType,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "Schedule",
    "ScheduleType",
    "TimeClock",
    "StatutoryHoliday",
    "PayAdjustment",
    "PayCalculation",
    "PayPeriod",
    "PayPeriodType",
]
