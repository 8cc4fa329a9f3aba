"""Tests for the adjustment ledger."""

from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import Update, func, select, update

from workforce_payroll.errors import NotFoundError, ValidationError
from workforce_payroll.models import PayAdjustment, PayCalculation, PayPeriod
from workforce_payroll.services.adjustment_service import AdjustmentService


@pytest_asyncio.fixture
async def calculation(make_pay_period, make_employee, make_calculation):
    pay_period = await make_pay_period(status="COMPLETED")
    employee = await make_employee()
    return await make_calculation(
        pay_period.pay_period_id, employee.employee_id, gross_pay=Decimal("1000.00")
    )


async def stored_state(session, pay_calculation_id):
    count = await session.scalar(select(func.count()).select_from(PayAdjustment))
    gross_pay = await session.scalar(
        select(PayCalculation.gross_pay).where(
            PayCalculation.pay_calculation_id == pay_calculation_id
        )
    )
    return count, gross_pay


class TestAddAdjustment:
    async def test_negative_adjustment_reduces_gross_pay(self, session, calculation):
        result = await AdjustmentService(session).add_adjustment(
            calculation.pay_calculation_id,
            Decimal("-50"),
            reason="Uniform deduction",
            created_by="manager-1",
        )

        adjusted = result.calculations[0]
        assert adjusted.gross_pay == Decimal("950.00")
        assert len(adjusted.adjustments) == 1
        assert adjusted.adjustments[0].amount == Decimal("-50.00")
        assert adjusted.adjustments[0].created_by == "manager-1"
        assert adjusted.adjustments_total == Decimal("-50.00")

    async def test_adjustments_accumulate(self, session, calculation):
        service = AdjustmentService(session)

        await service.add_adjustment(calculation.pay_calculation_id, Decimal("25.50"), "Bonus", "m")
        result = await service.add_adjustment(
            calculation.pay_calculation_id, Decimal("-10"), "Correction", "m"
        )

        adjusted = result.calculations[0]
        assert adjusted.gross_pay == Decimal("1015.50")
        assert {adj.reason for adj in adjusted.adjustments} == {"Bonus", "Correction"}

    async def test_rejected_when_paid(
        self, session, make_pay_period, make_employee, make_calculation
    ):
        pay_period = await make_pay_period(status="PAID")
        employee = await make_employee()
        calculation = await make_calculation(
            pay_period.pay_period_id, employee.employee_id, gross_pay=Decimal("1000.00")
        )

        with pytest.raises(ValidationError) as exc_info:
            await AdjustmentService(session).add_adjustment(
                calculation.pay_calculation_id, Decimal("-50"), "Late", "manager-1"
            )

        assert exc_info.value.errors == {"status": "Cannot add adjustments to a paid pay period"}
        count = await session.scalar(select(func.count()).select_from(PayAdjustment))
        assert count == 0

    async def test_missing_calculation(self, session):
        with pytest.raises(NotFoundError) as exc_info:
            await AdjustmentService(session).add_adjustment(
                uuid4(), Decimal("10"), "Bonus", "manager-1"
            )

        assert str(exc_info.value) == "Pay Calculation not found"

    async def test_failed_increment_leaves_no_adjustment(self, session, calculation, monkeypatch):
        """The adjustment row and the gross-pay increment are written together or not at all."""
        pay_calculation_id = calculation.pay_calculation_id
        execute = session.execute

        async def failing_execute(statement, *args, **kwargs):
            if isinstance(statement, Update):
                raise RuntimeError("connection lost")
            return await execute(statement, *args, **kwargs)

        monkeypatch.setattr(session, "execute", failing_execute)

        with pytest.raises(RuntimeError):
            await AdjustmentService(session).add_adjustment(
                pay_calculation_id, Decimal("75"), "Bonus", "manager-1"
            )

        monkeypatch.undo()
        assert await stored_state(session, pay_calculation_id) == (0, Decimal("1000.00"))

    async def test_period_paid_after_check_rejects_adjustment(
        self, session, calculation, monkeypatch
    ):
        """A period marked PAID between the load and the increment takes no adjustment."""
        pay_calculation_id = calculation.pay_calculation_id
        pay_period_id = calculation.pay_period_id
        get = session.get

        async def get_then_mark_paid(*args, **kwargs):
            loaded = await get(*args, **kwargs)
            await session.execute(
                update(PayPeriod)
                .where(PayPeriod.pay_period_id == pay_period_id)
                .values(status="PAID")
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return loaded

        monkeypatch.setattr(session, "get", get_then_mark_paid)

        with pytest.raises(ValidationError) as exc_info:
            await AdjustmentService(session).add_adjustment(
                pay_calculation_id, Decimal("75"), "Bonus", "manager-1"
            )

        monkeypatch.undo()
        assert "status" in exc_info.value.errors
        assert await stored_state(session, pay_calculation_id) == (0, Decimal("1000.00"))
