"""Disbursement state machine with transition validation."""

from __future__ import annotations

from employee_api.domain.types import DisbursementState
from employee_api.exceptions import EmployeeApiError


class InvalidTransitionError(EmployeeApiError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_state: str, to_state: str, reason: str | None = None):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        msg = f"Invalid transition from '{from_state}' to '{to_state}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class DisbursementStateMachine:
    """State machine for disbursement state transitions.

    Allowed transitions:
    - pending → rejected
    - pending → approved
    - approved → scheduled
    """

    VALID_TRANSITIONS: dict[DisbursementState, list[DisbursementState]] = {
        DisbursementState.PENDING: [DisbursementState.REJECTED, DisbursementState.APPROVED],
        DisbursementState.APPROVED: [DisbursementState.SCHEDULED],
        DisbursementState.REJECTED: [],
        DisbursementState.SCHEDULED: [],
    }

    @classmethod
    def can_transition(cls, from_state: str, to_state: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(DisbursementState(from_state), [])
        return DisbursementState(to_state) in allowed

    @classmethod
    def validate_transition(cls, from_state: str, to_state: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_state, to_state):
            raise InvalidTransitionError(
                DisbursementState(from_state).value, DisbursementState(to_state).value
            )

    @classmethod
    def is_terminal(cls, state: str) -> bool:
        return not cls.VALID_TRANSITIONS[DisbursementState(state)]

    @classmethod
    def get_next_states(cls, current_state: str) -> list[DisbursementState]:
        """Get list of valid next states from current state."""
        return list(cls.VALID_TRANSITIONS.get(DisbursementState(current_state), []))
