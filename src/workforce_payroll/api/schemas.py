"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workforce_payroll.models import PayPeriodType
from workforce_payroll.services.state_machine import PayPeriodStatus


# ============================================================================
# Pay Period schemas
# ============================================================================


class PayPeriodCreate(BaseModel):
    """Schema for creating a pay period."""

    start_date: date
    end_date: date
    type: PayPeriodType
    status: PayPeriodStatus | None = None


class PayPeriodUpdate(BaseModel):
    """Schema for a partial pay period update. Status is not editable here."""

    model_config = ConfigDict(extra="forbid")

    start_date: date | None = None
    end_date: date | None = None
    type: PayPeriodType | None = None


class EmployeeSummary(BaseModel):
    """Employee fields shown alongside a calculation."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    first_name: str
    last_name: str
    email: str


class PayAdjustmentResponse(BaseModel):
    """Schema for pay adjustment response."""

    model_config = ConfigDict(from_attributes=True)

    pay_adjustment_id: UUID
    pay_calculation_id: UUID
    amount: Decimal
    reason: str
    created_by: str
    created_at: datetime


class PayCalculationResponse(BaseModel):
    """Schema for pay calculation response."""

    model_config = ConfigDict(from_attributes=True)

    pay_calculation_id: UUID
    pay_period_id: UUID
    employee_id: UUID
    employee: EmployeeSummary
    regular_hours: Decimal
    overtime_hours: Decimal
    holiday_hours: Decimal
    gross_pay: Decimal
    adjustments: list[PayAdjustmentResponse] = []
    created_at: datetime


class PayPeriodResponse(BaseModel):
    """Schema for pay period response."""

    model_config = ConfigDict(from_attributes=True)

    pay_period_id: UUID
    start_date: date
    end_date: date
    type: str
    status: str
    created_at: datetime
    updated_at: datetime
    calculations: list[PayCalculationResponse] = []


class PayPeriodListResponse(BaseModel):
    """Schema for listing pay periods."""

    items: list[PayPeriodResponse]
    total: int
    page: int
    page_size: int


# ============================================================================
# Payroll run schemas
# ============================================================================


class CalculateResponse(BaseModel):
    """Result of a payroll run."""

    employee_count: int


class AdjustmentCreate(BaseModel):
    """Schema for adding an adjustment to a calculation."""

    pay_calculation_id: UUID
    amount: Decimal
    reason: str = Field(min_length=1)


# ============================================================================
# Export schemas
# ============================================================================


class ExportRowResponse(BaseModel):
    """One export line; amounts are strings with two decimal places."""

    model_config = ConfigDict(from_attributes=True)

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


class ExportResponse(BaseModel):
    """Schema for a pay period export."""

    pay_period_id: UUID
    rows: list[ExportRowResponse]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    success: bool = False
    message: str
    errors: dict[str, str] | None = None
