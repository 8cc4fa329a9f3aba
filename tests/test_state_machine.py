"""Tests for pay period state machine."""

import pytest

from workforce_payroll.errors import ValidationError
from workforce_payroll.services.state_machine import (
    InvalidTransitionError,
    PayPeriodStateMachine,
    PayPeriodStatus,
)


class TestPayPeriodStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # DRAFT → PROCESSING
        assert PayPeriodStateMachine.can_transition("DRAFT", "PROCESSING") is True

        # PROCESSING → COMPLETED
        assert PayPeriodStateMachine.can_transition("PROCESSING", "COMPLETED") is True

        # PROCESSING → DRAFT (failed run)
        assert PayPeriodStateMachine.can_transition("PROCESSING", "DRAFT") is True

        # COMPLETED → PAID
        assert PayPeriodStateMachine.can_transition("COMPLETED", "PAID") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Can't skip processing
        assert PayPeriodStateMachine.can_transition("DRAFT", "COMPLETED") is False
        assert PayPeriodStateMachine.can_transition("DRAFT", "PAID") is False

        # Can't pay before completion
        assert PayPeriodStateMachine.can_transition("PROCESSING", "PAID") is False

        # No re-run from a finished period
        assert PayPeriodStateMachine.can_transition("COMPLETED", "PROCESSING") is False
        assert PayPeriodStateMachine.can_transition("COMPLETED", "DRAFT") is False

        # PAID is terminal
        assert PayPeriodStateMachine.can_transition("PAID", "DRAFT") is False
        assert PayPeriodStateMachine.can_transition("PAID", "PROCESSING") is False

    def test_accepts_enum_members(self):
        assert PayPeriodStateMachine.can_transition(
            PayPeriodStatus.COMPLETED, PayPeriodStatus.PAID
        ) is True

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayPeriodStateMachine.validate_transition("DRAFT", PayPeriodStatus.PAID)

        assert exc_info.value.from_status == "DRAFT"
        assert exc_info.value.to_status == "PAID"
        assert "status" in exc_info.value.errors

    def test_invalid_transition_is_validation_error(self):
        """Transition failures surface as 400-class validation errors."""
        error = InvalidTransitionError("PAID", "DRAFT")
        assert isinstance(error, ValidationError)
        assert error.status_code == 400

    def test_is_rollback(self):
        """Test failed-run rollback detection."""
        assert PayPeriodStateMachine.is_rollback("PROCESSING", "DRAFT") is True
        assert PayPeriodStateMachine.is_rollback("PROCESSING", "COMPLETED") is False
        assert PayPeriodStateMachine.is_rollback("DRAFT", "PROCESSING") is False

    def test_can_calculate(self):
        """Only DRAFT periods can start a run."""
        assert PayPeriodStateMachine.can_calculate("DRAFT") is True
        assert PayPeriodStateMachine.can_calculate("PROCESSING") is False
        assert PayPeriodStateMachine.can_calculate("COMPLETED") is False
        assert PayPeriodStateMachine.can_calculate("PAID") is False

    def test_can_adjust(self):
        """Adjustments are blocked only once paid."""
        assert PayPeriodStateMachine.can_adjust("DRAFT") is True
        assert PayPeriodStateMachine.can_adjust("PROCESSING") is True
        assert PayPeriodStateMachine.can_adjust("COMPLETED") is True
        assert PayPeriodStateMachine.can_adjust("PAID") is False

    def test_get_next_statuses(self):
        """Test getting valid next statuses."""
        assert PayPeriodStateMachine.get_next_statuses("DRAFT") == ["PROCESSING"]
        assert set(PayPeriodStateMachine.get_next_statuses("PROCESSING")) == {
            "COMPLETED",
            "DRAFT",
        }
        assert PayPeriodStateMachine.get_next_statuses("PAID") == []
