"""Payroll calculation engine - per-employee hours and gross pay."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol
from uuid import UUID

from workforce_payroll.calculators.types import (
    CURRENCY_QUANTUM,
    DAILY_DOUBLE_TIME_START,
    DAILY_REGULAR_LIMIT,
    DOUBLE_TIME_MULTIPLIER,
    HOLIDAY_MULTIPLIER,
    HOURS_QUANTUM,
    OVERTIME_MULTIPLIER,
    WEEKLY_REGULAR_LIMIT,
    CalculationResult,
    ClockRecord,
    HourTotals,
)
from workforce_payroll.models.employee import ScheduleType

MINUTES_PER_HOUR = Decimal("60")


class HolidayCalendar(Protocol):
    async def find_dates(self, start_date: date, end_date: date) -> set[date]: ...


class EligibilityCheck(Protocol):
    async def is_eligible(self, employee_id: UUID, holiday_date: date) -> bool: ...


class PayrollCalculator:
    """Classifies worked time into regular/overtime/holiday buckets.

    Calculation pipeline (stable order per employee):
    1) Classify each completed clock record (holiday, pre-approved overtime,
       or regular) while accumulating per-day and per-week totals
    2) If overtime is enabled, rebuild regular/overtime from the daily
       totals (8h/12h thresholds) and then apply the weekly 40h check
    3) Quantize hour buckets and compute gross pay

    ``overtime_hours`` are premium-adjusted hour equivalents; only holiday
    hours get an explicit multiplier at the gross-pay step.
    """

    def __init__(self, holidays: HolidayCalendar, eligibility: EligibilityCheck):
        self.holidays = holidays
        self.eligibility = eligibility

    async def calculate(
        self,
        employee_id: UUID,
        clocks: Iterable[ClockRecord],
        hourly_rate: Decimal,
        overtime_enabled: bool,
        period_start: date,
        period_end: date,
    ) -> CalculationResult:
        """Calculate hours and gross pay for a single employee."""
        holiday_dates = await self.holidays.find_dates(period_start, period_end)
        totals = await self._classify(employee_id, clocks, holiday_dates)

        if overtime_enabled:
            self._reconcile_overtime(totals)

        regular = _quantize_hours(totals.regular)
        overtime = _quantize_hours(totals.overtime)
        holiday = _quantize_hours(totals.holiday)

        return CalculationResult(
            employee_id=employee_id,
            regular_hours=regular,
            overtime_hours=overtime,
            holiday_hours=holiday,
            gross_pay=self.gross_pay(regular, overtime, holiday, hourly_rate),
        )

    @staticmethod
    def gross_pay(
        regular_hours: Decimal,
        overtime_hours: Decimal,
        holiday_hours: Decimal,
        hourly_rate: Decimal,
    ) -> Decimal:
        """Gross pay from the three buckets; overtime already embeds its premium."""
        gross = (
            regular_hours * hourly_rate
            + overtime_hours * hourly_rate
            + holiday_hours * hourly_rate * HOLIDAY_MULTIPLIER
        )
        return gross.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)

    async def _classify(
        self,
        employee_id: UUID,
        clocks: Iterable[ClockRecord],
        holiday_dates: set[date],
    ) -> HourTotals:
        totals = HourTotals()
        eligibility_by_day: dict[date, bool] = {}

        for record in clocks:
            if not record.is_completed:
                continue

            hours = Decimal(record.total_minutes) / MINUTES_PER_HOUR
            day = record.work_date
            totals.add_worked(record, hours)

            if day in holiday_dates:
                totals.holiday_days.add(day)
            if day in holiday_dates or record.is_statutory_holiday:
                if day not in eligibility_by_day:
                    eligibility_by_day[day] = await self.eligibility.is_eligible(
                        employee_id, day
                    )
                if eligibility_by_day[day]:
                    totals.add_holiday(day, hours)
                else:
                    # No holiday premium; counted as ordinary work
                    totals.regular += hours
            elif record.schedule_type == ScheduleType.OVERTIME.value:
                # Pre-approved overtime bypasses the daily thresholds
                totals.overtime += hours
            else:
                totals.regular += hours

        return totals

    @staticmethod
    def _reconcile_overtime(totals: HourTotals) -> None:
        """Rebuild regular/overtime buckets from daily and weekly totals.

        Calendar holiday days are skipped entirely. On other days, hours
        already paid as holiday hours are left out of the daily total.
        """
        totals.regular = Decimal("0")
        totals.overtime = Decimal("0")

        for day in sorted(totals.daily):
            if day in totals.holiday_days:
                continue

            hours_for_day = totals.daily[day] - totals.holiday_by_day.get(day, Decimal("0"))
            if hours_for_day <= DAILY_REGULAR_LIMIT:
                totals.regular += hours_for_day
            elif hours_for_day <= DAILY_DOUBLE_TIME_START:
                totals.regular += DAILY_REGULAR_LIMIT
                totals.overtime += (hours_for_day - DAILY_REGULAR_LIMIT) * OVERTIME_MULTIPLIER
            else:
                totals.regular += DAILY_REGULAR_LIMIT
                totals.overtime += (
                    (DAILY_DOUBLE_TIME_START - DAILY_REGULAR_LIMIT) * OVERTIME_MULTIPLIER
                    + (hours_for_day - DAILY_DOUBLE_TIME_START) * DOUBLE_TIME_MULTIPLIER
                )

        # Weekly check compares against the running overtime total, not a
        # per-hour attribution of which hours were already daily overtime.
        for week_start in sorted(totals.weekly):
            weekly_hours = totals.weekly[week_start]
            if weekly_hours <= WEEKLY_REGULAR_LIMIT:
                continue

            weekly_overtime = weekly_hours - WEEKLY_REGULAR_LIMIT
            additional = max(Decimal("0"), weekly_overtime - totals.overtime / OVERTIME_MULTIPLIER)
            # Regular hours never go negative
            additional = min(additional, totals.regular)
            if additional > 0:
                totals.overtime += additional * OVERTIME_MULTIPLIER
                totals.regular -= additional


def _quantize_hours(hours: Decimal) -> Decimal:
    return hours.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)
