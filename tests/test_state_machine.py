"""Tests for disbursement state machine."""

import pytest

from employee_api.domain import DisbursementState, DisbursementStateMachine, InvalidTransitionError


class TestDisbursementStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # pending → approved
        assert DisbursementStateMachine.can_transition("pending", "approved") is True

        # pending → rejected
        assert DisbursementStateMachine.can_transition("pending", "rejected") is True

        # approved → scheduled
        assert DisbursementStateMachine.can_transition("approved", "scheduled") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Can't skip approval
        assert DisbursementStateMachine.can_transition("pending", "scheduled") is False

        # Can't go backwards
        assert DisbursementStateMachine.can_transition("approved", "pending") is False

        # Rejected and scheduled are terminal
        assert DisbursementStateMachine.can_transition("rejected", "approved") is False
        assert DisbursementStateMachine.can_transition("scheduled", "pending") is False

    def test_accepts_enum_members(self):
        assert DisbursementStateMachine.can_transition(
            DisbursementState.PENDING, DisbursementState.APPROVED
        )

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            DisbursementStateMachine.validate_transition("pending", "scheduled")

        assert exc_info.value.from_state == "pending"
        assert exc_info.value.to_state == "scheduled"
        assert exc_info.value.code == "INVALID_TRANSITION"

    def test_terminal_states(self):
        assert DisbursementStateMachine.is_terminal("rejected") is True
        assert DisbursementStateMachine.is_terminal("scheduled") is True
        assert DisbursementStateMachine.is_terminal("pending") is False
        assert DisbursementStateMachine.is_terminal("approved") is False

    def test_get_next_states(self):
        assert set(DisbursementStateMachine.get_next_states("pending")) == {
            DisbursementState.APPROVED,
            DisbursementState.REJECTED,
        }
        assert DisbursementStateMachine.get_next_states("scheduled") == []
