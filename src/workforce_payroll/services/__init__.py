"""Workforce payroll services."""

from workforce_payroll.services.state_machine import PayPeriodStateMachine, PayPeriodStatus, InvalidTransitionError
from workforce_payroll.services.holiday_eligibility import HolidayEligibility
from workforce_payroll.services.pay_period_service import PayPeriodService
from workforce_payroll.services.payroll_service import PayrollService
from workforce_payroll.services.adjustment_service import AdjustmentService
from workforce_payroll.services.export_service import ExportRow, ExportService

__all__ = [
    "PayPeriodStateMachine",
    "PayPeriodStatus",
    "InvalidTransitionError",
    "HolidayEligibility",
    "PayPeriodService",
    "PayrollService",
    "AdjustmentService",
    "ExportRow",
    "ExportService",
]
