"""Type definitions for the hours/pay calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import UUID

# Premium multipliers and thresholds for daily/weekly overtime
DAILY_REGULAR_LIMIT = Decimal("8")
DAILY_DOUBLE_TIME_START = Decimal("12")
WEEKLY_REGULAR_LIMIT = Decimal("40")
OVERTIME_MULTIPLIER = Decimal("1.5")
DOUBLE_TIME_MULTIPLIER = Decimal("2")
HOLIDAY_MULTIPLIER = Decimal("1.5")

HOURS_QUANTUM = Decimal("0.0001")
CURRENCY_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class ClockRecord:
    """A time-clock record as seen by the calculator."""

    clock_in_time: datetime
    clock_out_time: datetime | None
    total_minutes: int | None
    schedule_type: str | None = None
    is_statutory_holiday: bool = False
    time_clock_id: UUID | None = None

    @property
    def is_completed(self) -> bool:
        return self.clock_out_time is not None and self.total_minutes is not None

    @property
    def work_date(self) -> date:
        """Calendar day of the clock-in."""
        return self.clock_in_time.date()

    @property
    def week_start(self) -> date:
        """Sunday on or before the clock-in day (workweek starts Sunday)."""
        day = self.work_date
        # isoweekday: Monday=1 .. Sunday=7
        return day - timedelta(days=day.isoweekday() % 7)


@dataclass(frozen=True)
class ActiveEmployee:
    """An employee eligible for a payroll run."""

    employee_id: UUID
    hourly_rate: Decimal | None
    overtime_enabled: bool


@dataclass
class HourTotals:
    """Running hour buckets and the per-day/per-week totals behind them."""

    regular: Decimal = Decimal("0")
    overtime: Decimal = Decimal("0")
    holiday: Decimal = Decimal("0")
    daily: dict[date, Decimal] = field(default_factory=dict)
    weekly: dict[date, Decimal] = field(default_factory=dict)
    holiday_days: set[date] = field(default_factory=set)
    holiday_by_day: dict[date, Decimal] = field(default_factory=dict)

    def add_worked(self, record: ClockRecord, hours: Decimal) -> None:
        self.daily[record.work_date] = self.daily.get(record.work_date, Decimal("0")) + hours
        self.weekly[record.week_start] = self.weekly.get(record.week_start, Decimal("0")) + hours

    def add_holiday(self, day: date, hours: Decimal) -> None:
        self.holiday += hours
        self.holiday_by_day[day] = self.holiday_by_day.get(day, Decimal("0")) + hours


@dataclass(frozen=True)
class CalculationResult:
    """Result of calculating pay for one employee."""

    employee_id: UUID
    regular_hours: Decimal
    overtime_hours: Decimal
    holiday_hours: Decimal
    gross_pay: Decimal

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours + self.holiday_hours
