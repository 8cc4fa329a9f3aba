"""Flat payroll export for a pay period."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.services.pay_period_service import PayPeriodService

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class ExportRow:
    """One employee line of a payroll export. Amounts are 2-dp strings."""

    row_number: int
    last_name: str
    first_name: str
    regular_hours: str
    overtime_hours: str
    holiday_hours: str
    total_hours: str
    pay_rate: str
    adjustments_sum: str
    gross_pay: str

    def to_dict(self) -> dict:
        return asdict(self)


def _fixed(value: Decimal | None) -> str:
    if value is None:
        value = Decimal("0")
    return str(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


class ExportService:
    """Builds export rows from a period's calculations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def generate_export(self, pay_period_id: UUID) -> list[ExportRow]:
        pay_period = await PayPeriodService(self.session).get(pay_period_id)

        calculations = sorted(
            pay_period.calculations,
            key=lambda calc: (calc.employee.last_name, calc.employee.first_name),
        )

        return [
            ExportRow(
                row_number=index,
                last_name=calc.employee.last_name,
                first_name=calc.employee.first_name,
                regular_hours=_fixed(calc.regular_hours),
                overtime_hours=_fixed(calc.overtime_hours),
                holiday_hours=_fixed(calc.holiday_hours),
                total_hours=_fixed(calc.total_hours),
                pay_rate=_fixed(calc.employee.pay_rate),
                adjustments_sum=_fixed(calc.adjustments_total),
                gross_pay=_fixed(calc.gross_pay),
            )
            for index, calc in enumerate(calculations, start=1)
        ]
