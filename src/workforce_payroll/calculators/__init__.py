"""Payroll calculation engine."""

from workforce_payroll.calculators.engine import PayrollCalculator
from workforce_payroll.calculators.types import ActiveEmployee, CalculationResult, ClockRecord

__all__ = [
    "PayrollCalculator",
    "ActiveEmployee",
    "CalculationResult",
    "ClockRecord",
]
