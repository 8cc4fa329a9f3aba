"""Payroll API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from workforce_payroll.api.dependencies import Admin, DbSession, Manager, Viewer
from workforce_payroll.api.schemas import (
    AdjustmentCreate,
    CalculateResponse,
    ErrorResponse,
    ExportResponse,
    ExportRowResponse,
    PayPeriodCreate,
    PayPeriodListResponse,
    PayPeriodResponse,
    PayPeriodUpdate,
)
from workforce_payroll.services.adjustment_service import AdjustmentService
from workforce_payroll.services.export_service import ExportService
from workforce_payroll.services.pay_period_service import PayPeriodService
from workforce_payroll.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])


# ============================================================================
# Pay Period CRUD
# ============================================================================


@router.get(
    "/periods",
    response_model=PayPeriodListResponse,
)
async def list_pay_periods(
    db: DbSession,
    actor: Viewer,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    type_filter: Annotated[str | None, Query(alias="type")] = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> PayPeriodListResponse:
    """List pay periods, newest first."""
    result = await PayPeriodService(db).list(
        page=page,
        page_size=page_size,
        status=status_filter,
        type=type_filter,
        start_date=start_date,
        end_date=end_date,
    )
    return PayPeriodListResponse(
        items=[PayPeriodResponse.model_validate(pp) for pp in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get(
    "/periods/{pay_period_id}",
    response_model=PayPeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_pay_period(
    db: DbSession,
    actor: Viewer,
    pay_period_id: Annotated[UUID, Path()],
) -> PayPeriodResponse:
    """Get a pay period with its calculations."""
    pay_period = await PayPeriodService(db).get(pay_period_id)
    return PayPeriodResponse.model_validate(pay_period)


@router.post(
    "/periods",
    response_model=PayPeriodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_pay_period(
    db: DbSession,
    actor: Manager,
    payload: PayPeriodCreate,
) -> PayPeriodResponse:
    """Create a pay period, DRAFT unless a status is given."""
    pay_period = await PayPeriodService(db).create(
        start_date=payload.start_date,
        end_date=payload.end_date,
        type=payload.type,
        status=payload.status,
    )
    return PayPeriodResponse.model_validate(pay_period)


@router.put(
    "/periods/{pay_period_id}",
    response_model=PayPeriodResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_pay_period(
    db: DbSession,
    actor: Manager,
    pay_period_id: Annotated[UUID, Path()],
    payload: PayPeriodUpdate,
) -> PayPeriodResponse:
    """Update dates or type of a pay period."""
    pay_period = await PayPeriodService(db).update(
        pay_period_id, **payload.model_dump(exclude_unset=True)
    )
    return PayPeriodResponse.model_validate(pay_period)


@router.delete(
    "/periods/{pay_period_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_pay_period(
    db: DbSession,
    actor: Admin,
    pay_period_id: Annotated[UUID, Path()],
) -> Response:
    """Delete a pay period that has no calculations."""
    await PayPeriodService(db).delete(pay_period_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Payroll runs
# ============================================================================


@router.post(
    "/calculate/{pay_period_id}",
    response_model=CalculateResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def calculate_payroll(
    db: DbSession,
    actor: Manager,
    pay_period_id: Annotated[UUID, Path()],
) -> CalculateResponse:
    """Calculate pay for every active employee in the period."""
    count = await PayrollService(db).calculate_payroll(pay_period_id)
    return CalculateResponse(employee_count=count)


@router.post(
    "/adjustments",
    response_model=PayPeriodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def add_adjustment(
    db: DbSession,
    actor: Manager,
    payload: AdjustmentCreate,
) -> PayPeriodResponse:
    """Add a signed adjustment to a pay calculation."""
    pay_period = await AdjustmentService(db).add_adjustment(
        pay_calculation_id=payload.pay_calculation_id,
        amount=payload.amount,
        reason=payload.reason,
        created_by=actor.user_id,
    )
    return PayPeriodResponse.model_validate(pay_period)


@router.post(
    "/periods/{pay_period_id}/paid",
    response_model=PayPeriodResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def mark_as_paid(
    db: DbSession,
    actor: Manager,
    pay_period_id: Annotated[UUID, Path()],
) -> PayPeriodResponse:
    """Mark a COMPLETED pay period as PAID."""
    pay_period = await PayrollService(db).mark_as_paid(pay_period_id)
    return PayPeriodResponse.model_validate(pay_period)


@router.post(
    "/periods/{pay_period_id}/reset",
    response_model=PayPeriodResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def reset_pay_period(
    db: DbSession,
    actor: Admin,
    pay_period_id: Annotated[UUID, Path()],
) -> PayPeriodResponse:
    """Return a pay period stuck in PROCESSING to DRAFT."""
    pay_period = await PayrollService(db).reset_run(pay_period_id)
    return PayPeriodResponse.model_validate(pay_period)


@router.get(
    "/export/{pay_period_id}",
    response_model=ExportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def export_payroll(
    db: DbSession,
    actor: Viewer,
    pay_period_id: Annotated[UUID, Path()],
) -> ExportResponse:
    """Export one row per calculation, ordered by employee name."""
    rows = await ExportService(db).generate_export(pay_period_id)
    return ExportResponse(
        pay_period_id=pay_period_id,
        rows=[ExportRowResponse.model_validate(row) for row in rows],
    )
