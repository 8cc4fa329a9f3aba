"""Pay period store - CRUD with date-range invariants."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workforce_payroll.errors import NotFoundError, ValidationError
from workforce_payroll.models import PayCalculation, PayPeriod, PayPeriodType
from workforce_payroll.services.state_machine import PayPeriodStatus

logger = logging.getLogger(__name__)

# Fields that are frozen once a period has calculations and has left DRAFT
LOCKED_FIELDS = ("start_date", "end_date", "type")
UPDATABLE_FIELDS = frozenset(LOCKED_FIELDS)


@dataclass
class PayPeriodPage:
    """One page of pay periods."""

    items: list[PayPeriod]
    total: int
    page: int
    page_size: int


class PayPeriodService:
    """Lifecycle of pay period entities.

    Invariants:
    1. start_date < end_date
    2. No two periods overlap; touching boundaries count as overlap
    3. Dates and type are locked once calculations exist outside DRAFT
    4. A period with calculations cannot be deleted
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, pay_period_id: UUID) -> PayPeriod:
        """Load a pay period with its calculations, employees and adjustments."""
        result = await self.session.execute(
            select(PayPeriod)
            .where(PayPeriod.pay_period_id == pay_period_id)
            .options(
                selectinload(PayPeriod.calculations).selectinload(PayCalculation.employee),
                selectinload(PayPeriod.calculations).selectinload(PayCalculation.adjustments),
            )
            .execution_options(populate_existing=True)
        )
        pay_period = result.scalar_one_or_none()
        if pay_period is None:
            raise NotFoundError("Pay Period")
        return pay_period

    async def list(
        self,
        page: int = 1,
        page_size: int = 20,
        status: str | None = None,
        type: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> PayPeriodPage:
        """List pay periods, newest first, with optional filters."""
        query = select(PayPeriod)

        if start_date:
            query = query.where(PayPeriod.start_date >= start_date)
        if end_date:
            query = query.where(PayPeriod.end_date <= end_date)
        if status:
            query = query.where(PayPeriod.status == status)
        if type:
            query = query.where(PayPeriod.type == type)

        count_query = select(func.count()).select_from(query.subquery())
        total = await self.session.scalar(count_query) or 0

        query = (
            query.options(
                selectinload(PayPeriod.calculations).selectinload(PayCalculation.employee),
                selectinload(PayPeriod.calculations).selectinload(PayCalculation.adjustments),
            )
            .order_by(PayPeriod.start_date.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(query)

        return PayPeriodPage(
            items=list(result.scalars().all()),
            total=total,
            page=page,
            page_size=page_size,
        )

    async def create(
        self,
        start_date: date,
        end_date: date,
        type: str,
        status: str | None = None,
    ) -> PayPeriod:
        """Create a pay period after validating ordering and overlap."""
        self._validate_type(type)
        if status is not None:
            self._validate_status(status)
        self._validate_range(start_date, end_date)
        await self._ensure_no_overlap(start_date, end_date)

        pay_period = PayPeriod(
            start_date=start_date,
            end_date=end_date,
            type=_enum_value(type),
            status=_enum_value(status) if status else PayPeriodStatus.DRAFT.value,
        )
        self.session.add(pay_period)
        try:
            await self.session.commit()
        except Exception:
            logger.exception("Error creating pay period")
            await self.session.rollback()
            raise

        return await self.get(pay_period.pay_period_id)

    async def update(self, pay_period_id: UUID, **fields: Any) -> PayPeriod:
        """Apply a partial update to a pay period."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                {name: "Field cannot be updated" for name in sorted(unknown)}
            )

        pay_period = await self._get_plain(pay_period_id)
        changes = {
            name: _enum_value(value)
            for name, value in fields.items()
            if value is not None and _enum_value(value) != getattr(pay_period, name)
        }

        if changes and pay_period.status != PayPeriodStatus.DRAFT.value:
            if await self._calculation_count(pay_period_id) > 0:
                raise ValidationError(
                    {
                        "update": "Cannot modify dates or type for a pay period "
                        "with existing calculations",
                    }
                )

        if "type" in changes:
            self._validate_type(changes["type"])

        if "start_date" in changes or "end_date" in changes:
            start_date = changes.get("start_date", pay_period.start_date)
            end_date = changes.get("end_date", pay_period.end_date)
            self._validate_range(start_date, end_date)
            await self._ensure_no_overlap(start_date, end_date, exclude_id=pay_period_id)

        for name, value in changes.items():
            setattr(pay_period, name, value)

        try:
            await self.session.commit()
        except Exception:
            logger.exception("Error updating pay period %s", pay_period_id)
            await self.session.rollback()
            raise

        return await self.get(pay_period_id)

    async def delete(self, pay_period_id: UUID) -> None:
        """Delete a pay period that owns no calculations."""
        pay_period = await self._get_plain(pay_period_id)

        if await self._calculation_count(pay_period_id) > 0:
            raise ValidationError(
                {"delete": "Cannot delete pay period with existing calculations"}
            )

        try:
            await self.session.execute(
                delete(PayPeriod).where(PayPeriod.pay_period_id == pay_period.pay_period_id)
            )
            await self.session.commit()
        except Exception:
            logger.exception("Error deleting pay period %s", pay_period_id)
            await self.session.rollback()
            raise

    async def find_overlapping(
        self,
        start_date: date,
        end_date: date,
        exclude_id: UUID | None = None,
    ) -> PayPeriod | None:
        """Find any period whose range overlaps [start_date, end_date]."""
        query = select(PayPeriod).where(
            or_(
                # Start date falls within existing period
                and_(PayPeriod.start_date <= start_date, PayPeriod.end_date >= start_date),
                # End date falls within existing period
                and_(PayPeriod.start_date <= end_date, PayPeriod.end_date >= end_date),
                # New period completely contains an existing period
                and_(PayPeriod.start_date >= start_date, PayPeriod.end_date <= end_date),
            )
        )
        if exclude_id is not None:
            query = query.where(PayPeriod.pay_period_id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def _ensure_no_overlap(
        self,
        start_date: date,
        end_date: date,
        exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.find_overlapping(start_date, end_date, exclude_id)
        if existing is not None:
            raise ValidationError(
                {
                    "date": "Pay period overlaps with existing period "
                    f"({existing.start_date.isoformat()} - {existing.end_date.isoformat()})",
                }
            )

    async def _get_plain(self, pay_period_id: UUID) -> PayPeriod:
        pay_period = await self.session.get(PayPeriod, pay_period_id, populate_existing=True)
        if pay_period is None:
            raise NotFoundError("Pay Period")
        return pay_period

    async def _calculation_count(self, pay_period_id: UUID) -> int:
        return (
            await self.session.scalar(
                select(func.count())
                .select_from(PayCalculation)
                .where(PayCalculation.pay_period_id == pay_period_id)
            )
            or 0
        )

    @staticmethod
    def _validate_range(start_date: date, end_date: date) -> None:
        if start_date >= end_date:
            raise ValidationError({"date": "End date must be after start date"})

    @staticmethod
    def _validate_status(status: str) -> None:
        try:
            PayPeriodStatus(_enum_value(status))
        except ValueError:
            raise ValidationError({"status": f"Unknown pay period status '{status}'"}) from None

    @staticmethod
    def _validate_type(type: str) -> None:
        try:
            PayPeriodType(_enum_value(type))
        except ValueError:
            raise ValidationError({"type": f"Unknown pay period type '{type}'"}) from None


def _enum_value(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value
