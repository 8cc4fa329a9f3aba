"""Pytest fixtures for workforce payroll tests."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from workforce_payroll.database import make_session_factory
from workforce_payroll.models import (
    Base,
    Employee,
    PayCalculation,
    PayPeriod,
    Schedule,
    StatutoryHoliday,
    TimeClock,
)

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database engine per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_employee(session: AsyncSession):
    """Insert an employee; defaults describe a long-tenured hourly worker."""
    counter = {"n": 0}

    async def _make(
        first_name: str = "Alex",
        last_name: str | None = None,
        hire_date: date = date(2020, 1, 1),
        termination_date: date | None = None,
        pay_rate: Decimal | None = Decimal("20.00"),
        overtime_enabled: bool = True,
    ) -> Employee:
        counter["n"] += 1
        employee = Employee(
            email=f"employee{counter['n']}@example.com",
            first_name=first_name,
            last_name=last_name or f"Worker{counter['n']:02d}",
            hire_date=hire_date,
            termination_date=termination_date,
            pay_rate=pay_rate,
            overtime_enabled=overtime_enabled,
        )
        session.add(employee)
        await session.commit()
        return employee

    return _make


@pytest.fixture
def make_clock(session: AsyncSession):
    """Insert a completed time-clock record starting at ``clock_in``."""

    async def _make(
        employee_id: UUID,
        clock_in: datetime,
        hours: float = 8,
        completed: bool = True,
        schedule_type: str | None = None,
        is_statutory_holiday: bool = False,
    ) -> TimeClock:
        minutes = int(hours * 60)
        clock_out = clock_in + timedelta(minutes=minutes)

        schedule_id = None
        if schedule_type is not None or is_statutory_holiday:
            schedule = Schedule(
                employee_id=employee_id,
                start_time=clock_in,
                end_time=clock_out,
                schedule_type=schedule_type or "REGULAR",
                is_statutory_holiday=is_statutory_holiday,
            )
            session.add(schedule)
            await session.flush()
            schedule_id = schedule.schedule_id

        clock = TimeClock(
            employee_id=employee_id,
            clock_in_time=clock_in,
            clock_out_time=clock_out if completed else None,
            total_minutes=minutes if completed else None,
            schedule_id=schedule_id,
        )
        session.add(clock)
        await session.commit()
        return clock

    return _make


@pytest.fixture
def make_holiday(session: AsyncSession):
    async def _make(
        day: date, name: str = "Civic Holiday", province: str = "ON"
    ) -> StatutoryHoliday:
        holiday = StatutoryHoliday(name=name, date=day, year=day.year, province=province)
        session.add(holiday)
        await session.commit()
        return holiday

    return _make


@pytest.fixture
def make_pay_period(session: AsyncSession):
    async def _make(
        start_date: date = date(2025, 1, 1),
        end_date: date = date(2025, 1, 15),
        type: str = "SEMI_MONTHLY",
        status: str = "DRAFT",
    ) -> PayPeriod:
        pay_period = PayPeriod(
            start_date=start_date, end_date=end_date, type=type, status=status
        )
        session.add(pay_period)
        await session.commit()
        return pay_period

    return _make


@pytest.fixture
def make_calculation(session: AsyncSession):
    async def _make(
        pay_period_id: UUID,
        employee_id: UUID,
        regular_hours: Decimal = Decimal("40"),
        overtime_hours: Decimal = Decimal("0"),
        holiday_hours: Decimal = Decimal("0"),
        gross_pay: Decimal = Decimal("1000.00"),
    ) -> PayCalculation:
        calculation = PayCalculation(
            pay_period_id=pay_period_id,
            employee_id=employee_id,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            holiday_hours=holiday_hours,
            gross_pay=gross_pay,
        )
        session.add(calculation)
        await session.commit()
        return calculation

    return _make
