"""Payroll service - orchestrates calculation runs for a pay period."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.calculators.engine import PayrollCalculator
from workforce_payroll.config import get_settings
from workforce_payroll.errors import ConflictError, NotFoundError
from workforce_payroll.models import PayCalculation, PayPeriod
from workforce_payroll.services.holiday_eligibility import HolidayEligibility
from workforce_payroll.services.pay_period_service import PayPeriodService
from workforce_payroll.services.repositories import (
    EmployeeRepository,
    HolidayRepository,
    TimeClockRepository,
)
from workforce_payroll.services.state_machine import (
    InvalidTransitionError,
    PayPeriodStateMachine,
    PayPeriodStatus,
)

logger = logging.getLogger(__name__)


class PayrollService:
    """Service for running payroll over a pay period.

    Operations:
    - calculate_payroll: DRAFT → PROCESSING → COMPLETED, one PayCalculation
      per paid employee; PROCESSING → DRAFT on failure
    - mark_as_paid: COMPLETED → PAID
    - reset_run: PROCESSING → DRAFT for a run that died without reverting

    A run only starts from DRAFT and claims the period with a conditional
    status update, so two concurrent runs cannot both proceed. Calculations
    committed before a failure are kept.
    """

    def __init__(
        self,
        session: AsyncSession,
        calculator: PayrollCalculator | None = None,
        employees: EmployeeRepository | None = None,
        time_clocks: TimeClockRepository | None = None,
    ):
        self.session = session
        self.employees = employees or EmployeeRepository(session)
        self.time_clocks = time_clocks or TimeClockRepository(session)
        self.calculator = calculator or PayrollCalculator(
            holidays=HolidayRepository(session, province=get_settings().holiday_province),
            eligibility=HolidayEligibility(session),
        )

    async def calculate_payroll(self, pay_period_id: UUID) -> int:
        """Calculate pay for every active employee in a pay period.

        Returns the number of employees for whom a calculation was created.
        """
        pay_period = await self.session.get(PayPeriod, pay_period_id, populate_existing=True)
        if pay_period is None:
            raise NotFoundError("Pay Period")

        period_start = pay_period.start_date
        period_end = pay_period.end_date
        self._ensure_can_calculate(pay_period.status)

        employees = await self.employees.find_active(period_end)

        await self._claim(pay_period_id)
        logger.info(
            "Payroll run started for pay period %s (%s - %s), %d candidate employees",
            pay_period_id,
            period_start,
            period_end,
            len(employees),
        )

        count = 0
        try:
            for employee in employees:
                if not employee.hourly_rate:
                    continue

                clocks = await self.time_clocks.find_completed(
                    employee.employee_id, period_start, period_end
                )
                if not clocks:
                    continue

                result = await self.calculator.calculate(
                    employee.employee_id,
                    clocks,
                    employee.hourly_rate,
                    employee.overtime_enabled,
                    period_start,
                    period_end,
                )

                self.session.add(
                    PayCalculation(
                        pay_period_id=pay_period_id,
                        employee_id=employee.employee_id,
                        regular_hours=result.regular_hours,
                        overtime_hours=result.overtime_hours,
                        holiday_hours=result.holiday_hours,
                        gross_pay=result.gross_pay,
                    )
                )
                await self.session.commit()
                count += 1

            await self._set_status(
                pay_period_id, PayPeriodStatus.PROCESSING, PayPeriodStatus.COMPLETED
            )
            await self.session.commit()

        except Exception:
            logger.exception(
                "Error calculating payroll for pay period %s after %d employees",
                pay_period_id,
                count,
            )
            await self.session.rollback()
            await self._set_status(
                pay_period_id, PayPeriodStatus.PROCESSING, PayPeriodStatus.DRAFT
            )
            await self.session.commit()
            raise

        logger.info(
            "Payroll run completed for pay period %s: %d employees", pay_period_id, count
        )
        return count

    async def mark_as_paid(self, pay_period_id: UUID) -> PayPeriod:
        """Transition a COMPLETED pay period to PAID."""
        pay_period = await self.session.get(PayPeriod, pay_period_id, populate_existing=True)
        if pay_period is None:
            raise NotFoundError("Pay Period")

        if pay_period.status != PayPeriodStatus.COMPLETED.value:
            raise InvalidTransitionError(
                pay_period.status,
                PayPeriodStatus.PAID,
                "Pay period must be in COMPLETED status to mark as PAID",
            )

        try:
            await self._set_status(
                pay_period_id, PayPeriodStatus.COMPLETED, PayPeriodStatus.PAID
            )
            await self.session.commit()
        except Exception:
            logger.exception("Error marking pay period %s as paid", pay_period_id)
            await self.session.rollback()
            raise

        return await PayPeriodService(self.session).get(pay_period_id)

    async def reset_run(self, pay_period_id: UUID) -> PayPeriod:
        """Return a period stuck in PROCESSING to DRAFT so it can be recalculated.

        Calculations already committed by the interrupted run are kept.
        """
        pay_period = await self.session.get(PayPeriod, pay_period_id, populate_existing=True)
        if pay_period is None:
            raise NotFoundError("Pay Period")

        if pay_period.status != PayPeriodStatus.PROCESSING.value:
            raise InvalidTransitionError(
                pay_period.status,
                PayPeriodStatus.DRAFT,
                "Only a PROCESSING pay period can be reset to DRAFT",
            )

        try:
            reset = await self._set_status(
                pay_period_id, PayPeriodStatus.PROCESSING, PayPeriodStatus.DRAFT
            )
            await self.session.commit()
        except Exception:
            logger.exception("Error resetting pay period %s", pay_period_id)
            await self.session.rollback()
            raise

        if not reset:
            raise ConflictError("status", "Pay period is no longer in PROCESSING status")

        return await PayPeriodService(self.session).get(pay_period_id)

    def _ensure_can_calculate(self, status: str) -> None:
        if status == PayPeriodStatus.PROCESSING.value:
            raise ConflictError(
                "status", "Payroll calculation is already in progress for this pay period"
            )
        if not PayPeriodStateMachine.can_calculate(status):
            raise InvalidTransitionError(
                status,
                PayPeriodStatus.PROCESSING,
                f"Payroll can only be calculated for a DRAFT pay period (current: {status})",
            )

    async def _claim(self, pay_period_id: UUID) -> None:
        """Claim the period for this run (DRAFT → PROCESSING), visible to other readers."""
        claimed = await self._set_status(
            pay_period_id, PayPeriodStatus.DRAFT, PayPeriodStatus.PROCESSING
        )
        await self.session.commit()
        if not claimed:
            raise ConflictError(
                "status", "Payroll calculation is already in progress for this pay period"
            )

    async def _set_status(
        self,
        pay_period_id: UUID,
        from_status: PayPeriodStatus,
        to_status: PayPeriodStatus,
    ) -> bool:
        """Conditionally move a period between statuses.

        Returns False if the period was no longer in ``from_status``.
        """
        PayPeriodStateMachine.validate_transition(from_status, to_status)
        result = await self.session.execute(
            update(PayPeriod)
            .where(
                PayPeriod.pay_period_id == pay_period_id,
                PayPeriod.status == from_status.value,
            )
            .values(status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        if PayPeriodStateMachine.is_rollback(from_status, to_status):
            logger.warning("Pay period %s returned to DRAFT from PROCESSING", pay_period_id)
        return result.rowcount == 1
