"""Statutory holiday pay eligibility."""

from __future__ import annotations

from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.config import get_settings
from workforce_payroll.services.repositories import EmployeeRepository, TimeClockRepository

ATTENDANCE_WINDOW_DAYS = 30


class HolidayEligibility:
    """Decides whether an employee qualifies for statutory holiday pay.

    An employee is eligible for a holiday when:
    1. They were hired at least ``min_employment_days`` (30) calendar days
       before the holiday, and
    2. They clocked in on at least ``min_worked_days`` (15) distinct days
       within the window [holiday - 30 days, holiday). The window length
       does not follow ``min_employment_days``.

    Unknown employees are never eligible.
    """

    def __init__(
        self,
        session: AsyncSession,
        min_employment_days: int | None = None,
        min_worked_days: int | None = None,
    ):
        settings = get_settings()
        self.employees = EmployeeRepository(session)
        self.time_clocks = TimeClockRepository(session)
        self.min_employment_days = (
            min_employment_days
            if min_employment_days is not None
            else settings.holiday_min_employment_days
        )
        self.min_worked_days = (
            min_worked_days if min_worked_days is not None else settings.holiday_min_worked_days
        )

    async def is_eligible(self, employee_id: UUID, holiday_date: date) -> bool:
        """Check eligibility for holiday pay on ``holiday_date``."""
        hire_date = await self.employees.get_hire_date(employee_id)
        if hire_date is None:
            return False

        if hire_date > holiday_date - timedelta(days=self.min_employment_days):
            return False

        window_start = holiday_date - timedelta(days=ATTENDANCE_WINDOW_DAYS)
        days_worked = await self.time_clocks.count_distinct_work_days(
            employee_id, window_start, holiday_date
        )
        return days_worked >= self.min_worked_days
