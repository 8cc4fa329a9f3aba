"""Pay period state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from workforce_payroll.errors import ValidationError


class PayPeriodStatus(str, Enum):
    """Pay period status values."""

    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    PAID = "PAID"


class InvalidTransitionError(ValidationError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = _value(from_status)
        self.to_status = _value(to_status)
        self.reason = reason
        msg = reason or f"Invalid transition from '{self.from_status}' to '{self.to_status}'"
        super().__init__({"status": msg}, msg)


def _value(status: str) -> str:
    return status.value if isinstance(status, PayPeriodStatus) else status


class PayPeriodStateMachine:
    """State machine for pay period status transitions.

    Allowed transitions:
    - DRAFT → PROCESSING (calculation run starts)
    - PROCESSING → COMPLETED (run finished)
    - PROCESSING → DRAFT (run failed, or operator reset of an interrupted run)
    - COMPLETED → PAID (operator marks as paid)
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayPeriodStatus.DRAFT.value: [PayPeriodStatus.PROCESSING.value],
        PayPeriodStatus.PROCESSING.value: [
            PayPeriodStatus.COMPLETED.value,
            PayPeriodStatus.DRAFT.value,
        ],
        PayPeriodStatus.COMPLETED.value: [PayPeriodStatus.PAID.value],
        PayPeriodStatus.PAID.value: [],  # Terminal state
    }

    # Statuses in which adjustments are rejected
    ADJUSTMENTS_LOCKED = {PayPeriodStatus.PAID.value}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(_value(from_status), _value(to_status))

    @classmethod
    def can_calculate(cls, status: str) -> bool:
        """Check if a calculation run may start from this status."""
        return cls.can_transition(status, PayPeriodStatus.PROCESSING)

    @classmethod
    def can_adjust(cls, status: str) -> bool:
        """Check if adjustments may be added to calculations in this status."""
        return _value(status) not in cls.ADJUSTMENTS_LOCKED

    @classmethod
    def is_rollback(cls, from_status: str, to_status: str) -> bool:
        """Check if this transition abandons a run (PROCESSING → DRAFT)."""
        return (
            _value(from_status) == PayPeriodStatus.PROCESSING.value
            and _value(to_status) == PayPeriodStatus.DRAFT.value
        )

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(_value(current_status), [])
