"""Read-side repositories for data owned by the surrounding HR system.

Each repository returns plain dataclasses so the calculator never touches
ORM instances.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workforce_payroll.calculators.types import ActiveEmployee, ClockRecord
from workforce_payroll.models import Employee, StatutoryHoliday, TimeClock


def day_start(day: date) -> datetime:
    """Midnight at the start of a calendar day."""
    return datetime.combine(day, time.min)


class TimeClockRepository:
    """Completed time-clock records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_completed(
        self, employee_id: UUID, start_date: date, end_date: date
    ) -> list[ClockRecord]:
        """Get completed records with clock-in on any day in [start_date, end_date]."""
        result = await self.session.execute(
            select(TimeClock)
            .where(
                TimeClock.employee_id == employee_id,
                TimeClock.clock_in_time >= day_start(start_date),
                TimeClock.clock_in_time < day_start(end_date + timedelta(days=1)),
                TimeClock.clock_out_time.is_not(None),
                TimeClock.total_minutes.is_not(None),
            )
            .options(selectinload(TimeClock.schedule))
            .order_by(TimeClock.clock_in_time)
        )
        return [
            ClockRecord(
                clock_in_time=tc.clock_in_time,
                clock_out_time=tc.clock_out_time,
                total_minutes=tc.total_minutes,
                schedule_type=tc.schedule.schedule_type if tc.schedule else None,
                is_statutory_holiday=bool(tc.schedule and tc.schedule.is_statutory_holiday),
                time_clock_id=tc.time_clock_id,
            )
            for tc in result.scalars().all()
        ]

    async def count_distinct_work_days(
        self, employee_id: UUID, start: date, end: date
    ) -> int:
        """Count distinct clock-in days with a completed record in [start, end)."""
        result = await self.session.execute(
            select(TimeClock.clock_in_time).where(
                TimeClock.employee_id == employee_id,
                TimeClock.clock_in_time >= day_start(start),
                TimeClock.clock_in_time < day_start(end),
                TimeClock.clock_out_time.is_not(None),
            )
        )
        return len({clock_in.date() for clock_in in result.scalars().all()})


class HolidayRepository:
    """Statutory holiday lookups."""

    def __init__(self, session: AsyncSession, province: str | None = None):
        self.session = session
        self.province = province

    async def find_dates(self, start_date: date, end_date: date) -> set[date]:
        """Get holiday dates in [start_date, end_date]."""
        query = select(StatutoryHoliday.date).where(
            StatutoryHoliday.date >= start_date,
            StatutoryHoliday.date <= end_date,
        )
        if self.province:
            query = query.where(StatutoryHoliday.province == self.province)

        result = await self.session.execute(query)
        return set(result.scalars().all())


class EmployeeRepository:
    """Employee lookups needed by payroll."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_active(self, as_of: date) -> list[ActiveEmployee]:
        """Employees with no termination date, or one strictly after ``as_of``."""
        result = await self.session.execute(
            select(Employee)
            .where(
                or_(
                    Employee.termination_date.is_(None),
                    Employee.termination_date > as_of,
                )
            )
            .order_by(Employee.last_name, Employee.first_name)
        )
        return [
            ActiveEmployee(
                employee_id=emp.employee_id,
                hourly_rate=emp.pay_rate,
                overtime_enabled=emp.overtime_enabled,
            )
            for emp in result.scalars().all()
        ]

    async def get_hire_date(self, employee_id: UUID) -> date | None:
        """Get an employee's hire date, or None if the employee does not exist."""
        return await self.session.scalar(
            select(Employee.hire_date).where(Employee.employee_id == employee_id)
        )
