"""Adjustment ledger - manual corrections to calculated gross pay."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workforce_payroll.errors import NotFoundError, ValidationError
from workforce_payroll.models import PayAdjustment, PayCalculation, PayPeriod
from workforce_payroll.services.pay_period_service import PayPeriodService
from workforce_payroll.services.state_machine import PayPeriodStateMachine, PayPeriodStatus

logger = logging.getLogger(__name__)

PAID_PERIOD_MESSAGE = "Cannot add adjustments to a paid pay period"


class AdjustmentService:
    """Appends adjustments and keeps gross pay in step with them.

    The adjustment row and the gross-pay increment are written in one
    transaction. The increment only applies while the owning period is not
    PAID, so an adjustment racing mark-as-paid is rolled back with it.
    Adjustments are immutable; there is no delete.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_adjustment(
        self,
        pay_calculation_id: UUID,
        amount: Decimal,
        reason: str,
        created_by: str,
    ) -> PayPeriod:
        """Record a signed adjustment against a calculation.

        Returns the owning pay period with its calculations reloaded.
        """
        calculation = await self.session.get(
            PayCalculation,
            pay_calculation_id,
            options=[selectinload(PayCalculation.pay_period)],
            populate_existing=True,
        )
        if calculation is None:
            raise NotFoundError("Pay Calculation")

        pay_period_id = calculation.pay_period_id
        if not PayPeriodStateMachine.can_adjust(calculation.pay_period.status):
            raise ValidationError({"status": PAID_PERIOD_MESSAGE})

        amount = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

        self.session.add(
            PayAdjustment(
                pay_calculation_id=pay_calculation_id,
                amount=amount,
                reason=reason,
                created_by=created_by,
            )
        )
        unpaid_periods = select(PayPeriod.pay_period_id).where(
            PayPeriod.status != PayPeriodStatus.PAID.value
        )
        try:
            result = await self.session.execute(
                update(PayCalculation)
                .where(
                    PayCalculation.pay_calculation_id == pay_calculation_id,
                    PayCalculation.pay_period_id.in_(unpaid_periods),
                )
                .values(gross_pay=PayCalculation.gross_pay + amount)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                await self.session.commit()
        except Exception:
            logger.exception("Error adding adjustment to pay calculation %s", pay_calculation_id)
            await self.session.rollback()
            raise

        if result.rowcount != 1:
            # Period was marked PAID after the status check above
            await self.session.rollback()
            raise ValidationError({"status": PAID_PERIOD_MESSAGE})

        logger.info(
            "Adjustment of %s recorded on pay calculation %s by %s",
            amount,
            pay_calculation_id,
            created_by,
        )
        return await PayPeriodService(self.session).get(pay_period_id)
